from collections.abc import Iterator
from typing import Any

import pytest
from loguru import logger

import ringgate.logging_utils as logging_utils
from ringgate.actions.router import ActionName, ActionRouter, BaseAction
from ringgate.logging_utils import configure_logging
from ringgate.types import ActionResponse, Payload, ok_response


class LoggingAction(BaseAction):
    action_name = ActionName.CALL_PRIVATE_RING

    async def _handle(self, payload: Payload) -> ActionResponse:
        logger.info("inside.action")
        return ok_response()


@pytest.fixture
def configured(monkeypatch: pytest.MonkeyPatch) -> Iterator[list[dict[str, Any]]]:
    monkeypatch.setattr(logging_utils, "_CONFIGURED", None)
    configure_logging(level="debug")
    records: list[dict[str, Any]] = []
    logger.add(lambda message: records.append(message.record), level="DEBUG", format="{message}")
    yield records
    logger.remove()
    logger.configure(patcher=None)


@pytest.mark.asyncio
async def test_records_carry_current_action(configured: list[dict[str, Any]]) -> None:
    router = ActionRouter()
    router.register(LoggingAction())

    logger.info("outside.action")
    await router.dispatch({"action": "call_private_ring"})

    actions = {record["message"]: record["extra"]["action"] for record in configured}
    assert actions["outside.action"] == "-"
    assert actions["inside.action"] == "call_private_ring"


def test_repeated_configuration_keeps_existing_sinks(configured: list[dict[str, Any]]) -> None:
    configure_logging(level="DEBUG")
    logger.info("after.reconfigure")

    assert "after.reconfigure" in [record["message"] for record in configured]
