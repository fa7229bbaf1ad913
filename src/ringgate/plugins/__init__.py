"""Built-in ringgate plugins."""
