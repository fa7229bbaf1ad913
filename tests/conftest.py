from __future__ import annotations

import asyncio
import time
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

import pytest
from loguru import logger

from ringgate.calls.contracts import CallStartResult, StartCallRequest


@dataclass
class FakeResolver:
    uid: str | None = "u_target"
    lookups: list[str] = field(default_factory=list)

    async def resolve_uid(self, uin: str) -> str | None:
        self.lookups.append(uin)
        return self.uid


@dataclass
class FakeCallService:
    start_result: CallStartResult = field(default_factory=lambda: CallStartResult(result=0, call_id="S1"))
    start_error: Exception | None = None
    stop_result: bool | None = True
    stop_error: Exception | None = None
    stop_delay: float = 0.0
    started: list[StartCallRequest] = field(default_factory=list)
    stopped: list[str] = field(default_factory=list)
    stopped_at: list[float] = field(default_factory=list)

    async def start_voice_call(self, request: StartCallRequest) -> CallStartResult:
        self.started.append(request)
        if self.start_error is not None:
            raise self.start_error
        return self.start_result

    async def stop_voice_call(self, call_id: str) -> bool | None:
        self.stopped.append(call_id)
        self.stopped_at.append(time.monotonic())
        if self.stop_delay:
            await asyncio.sleep(self.stop_delay)
        if self.stop_error is not None:
            raise self.stop_error
        return self.stop_result


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def calls() -> FakeCallService:
    return FakeCallService()


@pytest.fixture
def log_records() -> Iterator[list[dict[str, Any]]]:
    records: list[dict[str, Any]] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG", format="{message}")
    yield records
    logger.remove(handler_id)


def messages(records: list[dict[str, Any]], level: str | None = None) -> list[str]:
    return [record["message"] for record in records if level is None or record["level"].name == level]
