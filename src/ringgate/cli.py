"""ringgate CLI."""

from __future__ import annotations

import asyncio
import json

import typer

from ringgate.actions import ActionName
from ringgate.config import get_settings
from ringgate.gateway import Gateway
from ringgate.logging_utils import configure_logging
from ringgate.types import ActionResponse

app = typer.Typer(name="ringgate", help="Ring-only private call gateway", add_completion=False)


async def _ring(gateway: Gateway, user_id: str, *, wait: bool) -> ActionResponse:
    async with gateway:
        response = await gateway.dispatch(
            {"action": ActionName.CALL_PRIVATE_RING.value, "params": {"user_id": user_id}}
        )
        if wait and response["retcode"] == 0 and gateway.terminator is not None:
            await asyncio.sleep(gateway.terminator.delay_seconds + 0.5)
        return response


@app.command("ring")
def ring(
    user_id: str = typer.Argument(..., help="Target user uin"),
    wait: bool = typer.Option(True, "--wait/--no-wait", help="Stay up until the call is cancelled"),
) -> None:
    """Ring a user and hang up automatically."""
    settings = get_settings()
    configure_logging(level=settings.log_level, profile=settings.log_profile)
    response = asyncio.run(_ring(Gateway(settings), user_id, wait=wait))
    typer.echo(json.dumps(response, ensure_ascii=False))
    if response["retcode"] != 0:
        raise typer.Exit(code=1)


@app.command("actions")
def actions() -> None:
    """List registered action names."""
    gateway = Gateway(get_settings())
    gateway.build()
    for name in gateway.router.names():
        typer.echo(name)
