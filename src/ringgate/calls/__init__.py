from ringgate.calls.contracts import (
    CallService,
    CallSession,
    CallStartResult,
    ContextMode,
    IdentityResolver,
    StartCallRequest,
)
from ringgate.calls.terminator import RING_DURATION_SECONDS, CallTerminator

__all__ = [
    "RING_DURATION_SECONDS",
    "CallService",
    "CallSession",
    "CallStartResult",
    "CallTerminator",
    "ContextMode",
    "IdentityResolver",
    "StartCallRequest",
]
