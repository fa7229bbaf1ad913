"""Pluggy hook namespace and gateway hook specifications."""

from __future__ import annotations

from typing import Any

import pluggy

from ringgate.calls.contracts import CallService, IdentityResolver

RINGGATE_HOOK_NAMESPACE = "ringgate"
hookspec = pluggy.HookspecMarker(RINGGATE_HOOK_NAMESPACE)
hookimpl = pluggy.HookimplMarker(RINGGATE_HOOK_NAMESPACE)


class RingGateHookSpecs:
    """Hook contract for ringgate plugins."""

    @hookspec(firstresult=True)
    def provide_identity_resolver(self) -> IdentityResolver | None:
        """Provide the uin -> uid resolver."""

    @hookspec(firstresult=True)
    def provide_call_service(self) -> CallService | None:
        """Provide the voice-call transport."""

    @hookspec
    def on_error(self, stage: str, error: Exception, context: dict[str, Any] | None) -> None:
        """Observe failures that are contained and never reach a caller."""
