"""Hook execution runtime with per-plugin fault isolation."""

from __future__ import annotations

import inspect
from typing import Any

import pluggy
from loguru import logger


class HookRuntime:
    """Safe wrapper around pluggy hook execution."""

    def __init__(self, plugin_manager: pluggy.PluginManager) -> None:
        self._plugin_manager = plugin_manager

    def call_first_sync(self, hook_name: str, **kwargs: Any) -> Any:
        """Run implementations in precedence order and return the first non-None value."""

        for impl in self._iter_hookimpls(hook_name):
            call_kwargs = self._kwargs_for_impl(impl, kwargs)
            try:
                value = impl.function(**call_kwargs)
            except Exception as error:
                self.notify_error_sync(stage=f"{hook_name}:{impl.plugin_name or '<unknown>'}", error=error)
                continue
            if inspect.isawaitable(value):
                logger.warning(
                    "hook.async_not_supported hook={} plugin={}",
                    hook_name,
                    impl.plugin_name or "<unknown>",
                )
                continue
            if value is not None:
                logger.debug("hook.provided hook={} plugin={}", hook_name, impl.plugin_name or "<unknown>")
                return value
        return None

    async def notify_error(self, *, stage: str, error: Exception, context: dict[str, Any] | None = None) -> None:
        """Call on_error hooks, swallowing observer failures."""

        for impl in self._iter_hookimpls("on_error"):
            call_kwargs = self._kwargs_for_impl(impl, {"stage": stage, "error": error, "context": context})
            try:
                value = impl.function(**call_kwargs)
                if inspect.isawaitable(value):
                    await value
            except Exception:
                logger.opt(exception=True).warning(
                    "hook.on_error_failed stage={} plugin={}",
                    stage,
                    impl.plugin_name or "<unknown>",
                )

    def notify_error_sync(self, *, stage: str, error: Exception, context: dict[str, Any] | None = None) -> None:
        """Synchronous on_error dispatch for startup paths."""

        logger.opt(exception=error).warning("hook.failed stage={}", stage)
        for impl in self._iter_hookimpls("on_error"):
            call_kwargs = self._kwargs_for_impl(impl, {"stage": stage, "error": error, "context": context})
            try:
                value = impl.function(**call_kwargs)
            except Exception:
                logger.opt(exception=True).warning(
                    "hook.on_error_failed stage={} plugin={}",
                    stage,
                    impl.plugin_name or "<unknown>",
                )
                continue
            if inspect.isawaitable(value):
                if inspect.iscoroutine(value):
                    value.close()
                logger.warning("hook.async_not_supported hook=on_error plugin={}", impl.plugin_name or "<unknown>")

    def hook_report(self) -> dict[str, list[str]]:
        """Build a hook -> plugins mapping for diagnostics."""

        report: dict[str, list[str]] = {}
        for hook_name, hook_caller in sorted(self._plugin_manager.hook.__dict__.items()):
            if hook_name.startswith("_") or not hasattr(hook_caller, "get_hookimpls"):
                continue
            plugin_names = [impl.plugin_name for impl in hook_caller.get_hookimpls()]
            if plugin_names:
                report[hook_name] = plugin_names
        return report

    def _iter_hookimpls(self, hook_name: str) -> list[Any]:
        hook = getattr(self._plugin_manager.hook, hook_name, None)
        if hook is None or not hasattr(hook, "get_hookimpls"):
            return []
        return list(reversed(hook.get_hookimpls()))

    @staticmethod
    def _kwargs_for_impl(impl: Any, kwargs: dict[str, Any]) -> dict[str, Any]:
        return {name: kwargs[name] for name in impl.argnames if name in kwargs}
