"""ringgate CLI entrypoint."""

from ringgate.cli import app

if __name__ == "__main__":
    app()
