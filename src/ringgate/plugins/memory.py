"""In-process collaborators for local runs and tests."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from loguru import logger

from ringgate.calls.contracts import CallStartResult, StartCallRequest
from ringgate.hookspecs import hookimpl


@dataclass
class MemoryIdentityDirectory:
    """Static uin -> uid table."""

    entries: dict[str, str] = field(default_factory=dict)

    async def resolve_uid(self, uin: str) -> str | None:
        return self.entries.get(uin)


@dataclass
class MemoryCallService:
    """Call transport that only records what it was asked to do."""

    started: list[StartCallRequest] = field(default_factory=list)
    stopped: list[str] = field(default_factory=list)
    _active: set[str] = field(default_factory=set)

    async def start_voice_call(self, request: StartCallRequest) -> CallStartResult:
        call_id = f"call-{uuid.uuid4().hex[:12]}"
        self.started.append(request)
        self._active.add(call_id)
        logger.info("memory.call.start call_id={} peer_uid={}", call_id, request.peer_uid)
        return CallStartResult(result=0, call_id=call_id)

    async def stop_voice_call(self, call_id: str) -> bool:
        if call_id not in self._active:
            return False
        self._active.remove(call_id)
        self.stopped.append(call_id)
        logger.info("memory.call.stop call_id={}", call_id)
        return True

    @property
    def active(self) -> set[str]:
        return set(self._active)


class MemoryPlugin:
    def __init__(self, directory: dict[str, str] | None = None) -> None:
        self.resolver = MemoryIdentityDirectory(dict(directory or {}))
        self.calls = MemoryCallService()

    @hookimpl
    def provide_identity_resolver(self) -> MemoryIdentityDirectory:
        return self.resolver

    @hookimpl
    def provide_call_service(self) -> MemoryCallService:
        return self.calls
