"""Gateway wiring: plugins, collaborators, actions, and the cancellation scheduler."""

from __future__ import annotations

import asyncio
import importlib
from collections.abc import Sequence
from types import TracebackType
from typing import Any

import pluggy
from loguru import logger

from ringgate.actions import ActionRouter, CallPrivateRing
from ringgate.calls.contracts import CallService, IdentityResolver
from ringgate.calls.terminator import RING_DURATION_SECONDS, CallTerminator
from ringgate.config import Settings, get_settings
from ringgate.errors import CollaboratorMissingError, PluginLoadError
from ringgate.hook_runtime import HookRuntime
from ringgate.hookspecs import RINGGATE_HOOK_NAMESPACE, RingGateHookSpecs
from ringgate.plugins.memory import MemoryPlugin
from ringgate.types import ActionResponse


def load_plugin_module(path: str) -> object:
    """Import ``path`` and return its ``plugin`` attribute, or the module itself."""
    try:
        module = importlib.import_module(path)
    except ImportError as exc:
        raise PluginLoadError(f"cannot import plugin module: {path}") from exc
    return getattr(module, "plugin", module)


class Gateway:
    """Hosts the action router and the collaborators behind it.

    Use it as an async context manager so the cancellation scheduler runs on
    the current event loop::

        async with Gateway(settings) as gateway:
            response = await gateway.dispatch({"action": "call_private_ring", "params": {"user_id": 10001}})
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        plugins: Sequence[object] = (),
        ring_delay_seconds: float = RING_DURATION_SECONDS,
    ) -> None:
        self.settings = settings or get_settings()
        self._ring_delay_seconds = ring_delay_seconds
        self._plugin_manager = pluggy.PluginManager(RINGGATE_HOOK_NAMESPACE)
        self._plugin_manager.add_hookspecs(RingGateHookSpecs)
        self._hook_runtime = HookRuntime(self._plugin_manager)
        self._extra_plugins = list(plugins)
        self._plugins_loaded = False
        self.router = ActionRouter()
        self.terminator: CallTerminator | None = None

    @property
    def hook_runtime(self) -> HookRuntime:
        return self._hook_runtime

    def load_plugins(self) -> None:
        """Register plugins; later registrations take precedence."""
        if self._plugins_loaded:
            return
        self._plugins_loaded = True
        if self.settings.use_memory_plugin:
            self._plugin_manager.register(MemoryPlugin(self.settings.memory_directory), name="builtin:memory")
        for path in self.settings.plugins:
            self._plugin_manager.register(load_plugin_module(path), name=f"config:{path}")
        for index, plugin in enumerate(self._extra_plugins):
            self._plugin_manager.register(plugin, name=f"extra:{index}:{type(plugin).__name__}")

    def build(self) -> None:
        """Resolve collaborators and register actions."""
        if self.terminator is not None:
            return
        self.load_plugins()

        resolver: IdentityResolver | None = self._hook_runtime.call_first_sync("provide_identity_resolver")
        if resolver is None:
            raise CollaboratorMissingError("no plugin provides an identity resolver")
        calls: CallService | None = self._hook_runtime.call_first_sync("provide_call_service")
        if calls is None:
            raise CollaboratorMissingError("no plugin provides a call service")

        self.terminator = CallTerminator(
            calls,
            delay_seconds=self._ring_delay_seconds,
            misfire_grace_seconds=self.settings.misfire_grace_seconds,
            on_failure=self._report_cancel_failure,
        )
        self.router.register(CallPrivateRing(resolver, calls, self.terminator))
        logger.info("gateway.ready actions={} hooks={}", self.router.names(), self._hook_runtime.hook_report())

    async def __aenter__(self) -> Gateway:
        self.build()
        assert self.terminator is not None
        self.terminator.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self.terminator is not None:
            self.terminator.shutdown()
            # let interrupted stop requests record the interruption
            await asyncio.sleep(0)

    async def dispatch(self, envelope: Any) -> ActionResponse:
        return await self.router.dispatch(envelope)

    async def _report_cancel_failure(self, call_id: str, error: Exception) -> None:
        await self._hook_runtime.notify_error(stage="ring.cancel", error=error, context={"call_id": call_id})
