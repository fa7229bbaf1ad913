"""Framework-neutral data aliases and action result types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

type Payload = Any
type ActionResponse = dict[str, Any]

RETCODE_OK = 0
RETCODE_UNKNOWN_TARGET = 100
RETCODE_INTERNAL_ERROR = 500
RETCODE_BAD_REQUEST = 1400
RETCODE_UNSUPPORTED_ACTION = 1404


class FailureKind(StrEnum):
    MISSING_FIELD = "missing_field"
    MALFORMED_FIELD = "malformed_field"
    UNKNOWN_TARGET = "unknown_target"
    CALL_REJECTED = "call_rejected"
    INTERNAL_FAILURE = "internal_failure"


@dataclass(frozen=True)
class CheckResult:
    """Outcome of validating one action payload."""

    success: bool
    error: str = ""
    kind: FailureKind | None = None

    @classmethod
    def ok(cls) -> CheckResult:
        return cls(success=True)

    @classmethod
    def fail(cls, kind: FailureKind, error: str) -> CheckResult:
        return cls(success=False, error=error, kind=kind)


@dataclass(frozen=True)
class Ok[T]:
    value: T


@dataclass(frozen=True)
class Err:
    """Expected failure carried between handler stages instead of raised."""

    kind: FailureKind
    retcode: int
    message: str


type Result[T] = Ok[T] | Err


def ok_response(data: dict[str, Any] | None = None) -> ActionResponse:
    return {"retcode": RETCODE_OK, "status": "ok", "data": data}


def failed_response(retcode: int, error: str) -> ActionResponse:
    return {"retcode": retcode, "status": "failed", "error": error}


def err_response(err: Err) -> ActionResponse:
    return failed_response(err.retcode, err.message)
