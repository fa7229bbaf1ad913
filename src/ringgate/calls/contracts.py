"""Contracts of the identity and call-transport collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol


class ContextMode(IntEnum):
    """Messaging scope of a call request."""

    PRIVATE = 1
    GROUP = 2


@dataclass(frozen=True)
class StartCallRequest:
    chat_type: ContextMode
    peer_uid: str
    guild_id: str = ""


@dataclass(frozen=True)
class CallStartResult:
    """Transport answer to a start request. ``result`` 0 means accepted."""

    result: int
    call_id: str = ""


@dataclass(frozen=True)
class CallSession:
    """A call accepted by the transport and awaiting cancellation."""

    call_id: str
    peer_uid: str


class IdentityResolver(Protocol):
    """Maps a public uin to the uid used by the call transport."""

    async def resolve_uid(self, uin: str) -> str | None: ...


class CallService(Protocol):
    """Outbound voice-call transport."""

    async def start_voice_call(self, request: StartCallRequest) -> CallStartResult: ...

    async def stop_voice_call(self, call_id: str) -> bool | None: ...
