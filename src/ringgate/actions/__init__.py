from ringgate.actions.call_ring import CallPrivateRing, check_call_request
from ringgate.actions.router import ActionName, ActionRouter, BaseAction, current_action

__all__ = [
    "ActionName",
    "ActionRouter",
    "BaseAction",
    "CallPrivateRing",
    "check_call_request",
    "current_action",
]
