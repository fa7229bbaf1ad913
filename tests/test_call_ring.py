from __future__ import annotations

import asyncio

import pytest

from conftest import FakeCallService, FakeResolver, messages
from ringgate.actions.call_ring import CallPrivateRing
from ringgate.calls.contracts import CallStartResult, ContextMode
from ringgate.calls.terminator import CallTerminator


def _action(
    resolver: FakeResolver, calls: FakeCallService, *, delay: float = 0.05
) -> tuple[CallPrivateRing, CallTerminator]:
    terminator = CallTerminator(calls, delay_seconds=delay)
    terminator.start()
    return CallPrivateRing(resolver, calls, terminator), terminator


@pytest.mark.asyncio
async def test_invalid_payload_touches_no_collaborator(resolver: FakeResolver, calls: FakeCallService) -> None:
    action, terminator = _action(resolver, calls)
    try:
        response = await action.handle({"user_id": "12a3"})
    finally:
        terminator.shutdown()

    assert response["retcode"] == 1400
    assert response["status"] == "failed"
    assert "user_id" in response["error"]
    assert resolver.lookups == []
    assert calls.started == []


@pytest.mark.asyncio
async def test_unresolved_target_returns_100(calls: FakeCallService) -> None:
    resolver = FakeResolver(uid=None)
    action, terminator = _action(resolver, calls)
    try:
        response = await action.handle({"user_id": "10001"})
        await asyncio.sleep(0.15)
    finally:
        terminator.shutdown()

    assert response["retcode"] == 100
    assert response["status"] == "failed"
    assert response["error"]
    assert resolver.lookups == ["10001"]
    assert calls.started == []
    assert calls.stopped == []


@pytest.mark.asyncio
async def test_empty_uid_counts_as_unresolved(calls: FakeCallService) -> None:
    action, terminator = _action(FakeResolver(uid=""), calls)
    try:
        response = await action.handle({"user_id": 10001})
    finally:
        terminator.shutdown()

    assert response["retcode"] == 100


@pytest.mark.asyncio
async def test_rejected_call_propagates_transport_code(resolver: FakeResolver) -> None:
    calls = FakeCallService(start_result=CallStartResult(result=7, call_id=""))
    action, terminator = _action(resolver, calls)
    try:
        response = await action.handle({"user_id": 10001})
        await asyncio.sleep(0.15)
    finally:
        terminator.shutdown()

    assert response["retcode"] == 7
    assert response["status"] == "failed"
    assert "7" in response["error"]
    assert calls.stopped == []


@pytest.mark.asyncio
async def test_transport_exception_returns_500(resolver: FakeResolver) -> None:
    calls = FakeCallService(start_error=ConnectionError("transport down"))
    action, terminator = _action(resolver, calls)
    try:
        response = await action.handle({"user_id": 10001})
    finally:
        terminator.shutdown()

    assert response["retcode"] == 500
    assert response["status"] == "failed"
    assert "transport down" in response["error"]
    assert calls.stopped == []


@pytest.mark.asyncio
async def test_success_builds_private_request_and_schedules_stop(
    resolver: FakeResolver, calls: FakeCallService
) -> None:
    action, terminator = _action(resolver, calls, delay=0.1)
    try:
        response = await action.handle({"user_id": "00123"})
        assert calls.stopped == []
        await asyncio.sleep(0.4)
    finally:
        terminator.shutdown()

    assert response == {
        "retcode": 0,
        "status": "ok",
        "data": {"call_id": "S1", "message": response["data"]["message"]},
    }
    assert response["data"]["message"]
    assert resolver.lookups == ["123"]
    [request] = calls.started
    assert request.chat_type is ContextMode.PRIVATE
    assert request.peer_uid == "u_target"
    assert request.guild_id == ""
    assert calls.stopped == ["S1"]


@pytest.mark.asyncio
async def test_success_message_names_default_delay(resolver: FakeResolver, calls: FakeCallService) -> None:
    terminator = CallTerminator(calls)
    terminator.start()
    action = CallPrivateRing(resolver, calls, terminator)
    try:
        response = await action.handle({"user_id": 10001})
    finally:
        terminator.shutdown()

    assert "5 seconds" in response["data"]["message"]
    assert calls.stopped == []


@pytest.mark.asyncio
async def test_failed_stop_does_not_change_response(resolver: FakeResolver, log_records: list) -> None:
    calls = FakeCallService(stop_error=RuntimeError("stop failed"))
    action, terminator = _action(resolver, calls)
    try:
        response = await action.handle({"user_id": 10001})
        snapshot = dict(response)
        await asyncio.sleep(0.3)
    finally:
        terminator.shutdown()

    assert response == snapshot
    assert response["retcode"] == 0
    assert calls.stopped == ["S1"]
    assert "ring.cancel.failed call_id=S1" in messages(log_records, "WARNING")
