"""Action names, the action base class, and name-based dispatch."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Mapping
from contextvars import ContextVar
from enum import StrEnum
from typing import Any

from loguru import logger

from ringgate.errors import ActionRegistrationError
from ringgate.types import (
    RETCODE_BAD_REQUEST,
    RETCODE_INTERNAL_ERROR,
    RETCODE_UNSUPPORTED_ACTION,
    ActionResponse,
    CheckResult,
    Payload,
    failed_response,
)

_current_action: ContextVar[str] = ContextVar("ringgate_action", default="-")


def current_action() -> str:
    return _current_action.get()


class ActionName(StrEnum):
    CALL_PRIVATE_RING = "call_private_ring"


class BaseAction(ABC):
    """One named action: validate the payload, then handle it."""

    action_name: ActionName

    def check(self, payload: Payload) -> CheckResult:
        _ = payload
        return CheckResult.ok()

    @abstractmethod
    async def _handle(self, payload: Payload) -> ActionResponse:
        """Run the action for an already validated payload."""

    async def handle(self, payload: Payload, *, echo: Any = None) -> ActionResponse:
        """Check and run the action. Never raises."""
        checked = self.check(payload)
        if not checked.success:
            logger.info("action.check.failed name={} kind={} error={}", self.action_name, checked.kind, checked.error)
            return _with_echo(failed_response(RETCODE_BAD_REQUEST, checked.error), echo)

        try:
            response = await self._handle(payload)
        except Exception as exc:
            logger.exception("action.handle.error name={}", self.action_name)
            response = failed_response(RETCODE_INTERNAL_ERROR, f"internal failure: {exc}")
        return _with_echo(response, echo)


class ActionRouter:
    """Registry of actions keyed by action name."""

    def __init__(self) -> None:
        self._actions: dict[str, BaseAction] = {}

    def register(self, action: BaseAction) -> None:
        name = str(action.action_name)
        if name in self._actions:
            raise ActionRegistrationError(f"action already registered: {name}")
        self._actions[name] = action
        logger.debug("action.registered name={}", name)

    def get(self, name: str) -> BaseAction | None:
        return self._actions.get(name)

    def names(self) -> list[str]:
        return sorted(self._actions)

    async def dispatch(self, envelope: Any) -> ActionResponse:
        """Route ``{"action", "params", "echo"}`` to its action and return the response."""
        if not isinstance(envelope, Mapping):
            return failed_response(RETCODE_BAD_REQUEST, "request must be an object")

        echo = envelope.get("echo")
        name = envelope.get("action")
        if not isinstance(name, str) or not name:
            return _with_echo(failed_response(RETCODE_BAD_REQUEST, "missing action name"), echo)

        action = self._actions.get(name)
        if action is None:
            logger.info("action.unsupported name={}", name)
            return _with_echo(failed_response(RETCODE_UNSUPPORTED_ACTION, f"unsupported action: {name}"), echo)

        params = envelope.get("params")
        if params is None:
            params = {}

        token = _current_action.set(name)
        start = time.monotonic()
        logger.info("action.dispatch.start name={}", name)
        try:
            response = await action.handle(params, echo=echo)
            duration = time.monotonic() - start
            logger.info(
                "action.dispatch.end name={} retcode={} duration={:.3f}ms",
                name,
                response.get("retcode"),
                duration * 1000,
            )
            return response
        finally:
            _current_action.reset(token)


def _with_echo(response: ActionResponse, echo: Any) -> ActionResponse:
    if echo is not None:
        response["echo"] = echo
    return response
