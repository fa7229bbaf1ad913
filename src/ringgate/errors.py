"""Application-level exception types for ringgate."""

from __future__ import annotations


class RingGateError(Exception):
    """Base exception for ringgate."""


class ConfigurationError(RingGateError):
    """Base exception for configuration and startup wiring errors."""


class CollaboratorMissingError(ConfigurationError):
    """Raised when no plugin provides a required collaborator."""


class PluginLoadError(ConfigurationError):
    """Raised when a configured plugin module cannot be imported."""


class ActionRegistrationError(RingGateError):
    """Raised when two actions are registered under the same name."""


class CancellationFailedError(RingGateError):
    """Reported to error observers when the transport refuses to stop a call."""

    def __init__(self, call_id: str, message: str | None = None) -> None:
        super().__init__(message or f"transport did not stop call {call_id}")
        self.call_id = call_id


class CancellationAbandonedError(CancellationFailedError):
    """Reported to error observers when a stop request is interrupted by shutdown."""

    def __init__(self, call_id: str) -> None:
        super().__init__(call_id, f"stop request for call {call_id} interrupted before it completed")
