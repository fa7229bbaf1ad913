"""Ring-only private call action.

The action starts a voice call to one user and schedules its cancellation a
few seconds later, so the target only sees the call ringing.
"""

from __future__ import annotations

import re

from loguru import logger

from ringgate.actions.router import ActionName, BaseAction
from ringgate.calls.contracts import (
    CallService,
    CallSession,
    ContextMode,
    IdentityResolver,
    StartCallRequest,
)
from ringgate.calls.terminator import CallTerminator
from ringgate.envelope import field_of
from ringgate.types import (
    RETCODE_INTERNAL_ERROR,
    RETCODE_UNKNOWN_TARGET,
    ActionResponse,
    CheckResult,
    Err,
    FailureKind,
    Ok,
    Payload,
    Result,
    err_response,
    failed_response,
    ok_response,
)

_DIGITS = re.compile(r"[0-9]+")


def check_call_request(payload: Payload) -> CheckResult:
    """Validate ``user_id`` without touching any collaborator."""
    user_id = field_of(payload, "user_id")
    if not user_id:
        return CheckResult.fail(FailureKind.MISSING_FIELD, "missing required field: user_id (target user uin)")
    if isinstance(user_id, str):
        if _DIGITS.fullmatch(user_id) is None:
            return CheckResult.fail(FailureKind.MALFORMED_FIELD, "user_id must be a number or a string of digits")
        return CheckResult.ok()
    if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id < 0:
        return CheckResult.fail(FailureKind.MALFORMED_FIELD, "user_id must be a number or a string of digits")
    return CheckResult.ok()


def normalize_user_id(user_id: str | int) -> int:
    return int(user_id)


class CallPrivateRing(BaseAction):
    """Ring a user in a private context, then hang up automatically."""

    action_name = ActionName.CALL_PRIVATE_RING

    def __init__(self, resolver: IdentityResolver, calls: CallService, terminator: CallTerminator) -> None:
        self._resolver = resolver
        self._calls = calls
        self._terminator = terminator

    def check(self, payload: Payload) -> CheckResult:
        return check_call_request(payload)

    async def _handle(self, payload: Payload) -> ActionResponse:
        try:
            user_id = normalize_user_id(field_of(payload, "user_id"))
            started = await self._start(user_id)
            if isinstance(started, Err):
                logger.info("ring.call.rejected user_id={} kind={} retcode={}", user_id, started.kind, started.retcode)
                return err_response(started)

            session = started.value
            self._terminator.schedule(session.call_id)
        except Exception as exc:
            logger.exception("ring.call.error payload={!r}", payload)
            return failed_response(RETCODE_INTERNAL_ERROR, f"server failed to handle call request: {exc}")

        seconds = f"{self._terminator.delay_seconds:g}"
        return ok_response(
            {
                "call_id": session.call_id,
                "message": f"call request sent, it will be cancelled automatically in {seconds} seconds",
            }
        )

    async def _start(self, user_id: int) -> Result[CallSession]:
        resolved = await self._resolve(user_id)
        if isinstance(resolved, Err):
            return resolved
        return await self._initiate(resolved.value)

    async def _resolve(self, user_id: int) -> Result[str]:
        peer_uid = await self._resolver.resolve_uid(str(user_id))
        if not peer_uid:
            return Err(
                kind=FailureKind.UNKNOWN_TARGET,
                retcode=RETCODE_UNKNOWN_TARGET,
                message="target user unresolved: user does not exist or cannot be looked up",
            )
        return Ok(peer_uid)

    async def _initiate(self, peer_uid: str) -> Result[CallSession]:
        request = StartCallRequest(chat_type=ContextMode.PRIVATE, peer_uid=peer_uid, guild_id="")
        started = await self._calls.start_voice_call(request)
        if started.result != 0:
            return Err(
                kind=FailureKind.CALL_REJECTED,
                retcode=started.result,
                message=f"call request failed, error code: {started.result}",
            )
        logger.info("ring.call.started call_id={} peer_uid={}", started.call_id, peer_uid)
        return Ok(CallSession(call_id=started.call_id, peer_uid=peer_uid))
