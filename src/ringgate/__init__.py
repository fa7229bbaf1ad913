"""ringgate - ring-only call action for bot-protocol gateways."""

from .actions import ActionName, ActionRouter, BaseAction, CallPrivateRing
from .gateway import Gateway

__version__ = "0.1.0"

__all__ = ["ActionName", "ActionRouter", "BaseAction", "CallPrivateRing", "Gateway"]
