"""
Request lifecycle plugin merging metadata into introspection query results.

The plugin follows the usual two-step hook shape of GraphQL servers: a hook
called when a request starts, which may return a second hook called when the
response is about to be sent. Host contexts are read through
``request_context.request.query`` and ``response_context.response``, as
attributes or as mapping keys.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from introspection_metadata import configure_logging, log
from introspection_metadata.config import MetadataPath, PluginConfig
from introspection_metadata.detection import context_value, is_introspection_query
from introspection_metadata.merger import merge_metadata

Predicate = Callable[[Any], bool | Awaitable[bool]]


class MetadataPlugin:
    """Lifecycle plugin attaching metadata to every introspection response.

    Args:
        config: Validated plugin settings
        test_fn: Predicate telling whether a request should be augmented
    """

    def __init__(self, config: PluginConfig, test_fn: Predicate = is_introspection_query) -> None:
        if not callable(test_fn):
            raise TypeError(f"test_fn must be callable, got {type(test_fn).__name__}")
        self.config = config
        self.test_fn = test_fn

    @property
    def metadata_tree(self) -> Mapping[str, Any]:
        return self.config.metadata_tree

    def on_request_start(self, request_context: Any) -> "ResponseHook | AsyncResponseHook | None":
        """Decide whether this request needs its response augmented.

        Args:
            request_context: Host request context

        Returns:
            None when the request is not of interest, otherwise the hook to run
            when the response is ready. An awaitable predicate result is not
            awaited here: the returned AsyncResponseHook awaits it later.
        """
        decision = self.test_fn(request_context)

        if inspect.isawaitable(decision):
            log.debug("Deferring introspection check to response time")
            return AsyncResponseHook(self, decision)

        if not decision:
            return None

        log.debug("Introspection query detected, installing metadata hook")
        return ResponseHook(self)

    def apply(self, response_context: Any) -> None:
        """Merge the configured metadata into the response carried by ``response_context``."""
        response = context_value(response_context, "response")
        if response is None:
            log.debug("Response context carries no response, nothing to augment")
            return

        merge_metadata(
            response,
            self.config.metadata_tree,
            metadata_source_key=self.config.metadata_source_key,
            metadata_target_key=self.config.metadata_target_key,
        )


class ResponseHook:
    def __init__(self, plugin: MetadataPlugin) -> None:
        self.plugin = plugin

    def on_response_ready(self, response_context: Any) -> None:
        self.plugin.apply(response_context)


class AsyncResponseHook:
    """Response hook for predicates returning an awaitable.

    The predicate outcome is awaited once, when the response is ready, and the
    merge only happens if it resolved to a truthy value. When created inside a
    running event loop the outcome is scheduled right away, so it is consumed
    even if the response hook never runs. Later calls reuse the first outcome.
    """

    def __init__(self, plugin: MetadataPlugin, pending_decision: Awaitable[Any]) -> None:
        self.plugin = plugin
        self._decision: bool | None = None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._pending_decision: Awaitable[Any] = pending_decision
        else:
            self._pending_decision = asyncio.ensure_future(pending_decision, loop=loop)

    async def _resolve_decision(self) -> bool:
        if self._decision is None:
            if not isinstance(self._pending_decision, asyncio.Future):
                self._pending_decision = asyncio.ensure_future(self._pending_decision)
            self._decision = bool(await self._pending_decision)
        return self._decision

    async def on_response_ready(self, response_context: Any) -> None:
        if not await self._resolve_decision():
            log.debug("Request is not an introspection query, leaving response untouched")
            return
        self.plugin.apply(response_context)


def _resolve_config(config: PluginConfig | None, overrides: Mapping[str, Any]) -> PluginConfig:
    settings = config.model_dump(exclude_unset=True, exclude={"metadata_tree"}) if config else {}
    if config and "metadata_tree" in config.model_fields_set:
        # Dumping would copy the tree; the plugin keeps the caller's mapping
        settings["metadata_tree"] = config.metadata_tree
    if "metadata_key" in overrides:
        # The shorthand replaces keys inherited from config, but not explicit keyword overrides
        settings.pop("metadata_source_key", None)
        settings.pop("metadata_target_key", None)
    settings.update(overrides)
    return PluginConfig.model_validate(settings)


def create_plugin(
    config: PluginConfig | None = None,
    *,
    test_fn: Predicate | None = None,
    metadata_tree: Mapping[str, Any] | None = None,
    metadata_source_key: MetadataPath | None = None,
    metadata_target_key: MetadataPath | None = None,
    metadata_key: MetadataPath | None = None,
) -> MetadataPlugin:
    """
    Create a lifecycle plugin adding metadata to introspection query responses.

    Keyword arguments override the values of ``config``.

    Args:
        config: Optional base settings, e.g. from ``load_plugin_config``
        test_fn: Predicate over the request context, returning a bool or an awaitable
            bool. Defaults to ``is_introspection_query``
        metadata_tree: Metadata grouped by kind, then by type name
        metadata_source_key: Path of the payload inside each metadata entry
        metadata_target_key: Path the payload is written to on each matched node
        metadata_key: Shorthand for source and target keys that were not given

    Returns:
        The plugin

    Raises:
        ValidationError: If the settings are invalid
        TypeError: If test_fn is not callable
    """
    overrides = {
        name: value
        for name, value in (
            ("metadata_tree", metadata_tree),
            ("metadata_source_key", metadata_source_key),
            ("metadata_target_key", metadata_target_key),
            ("metadata_key", metadata_key),
        )
        if value is not None
    }
    resolved = _resolve_config(config, overrides)

    if resolved.log_level:
        configure_logging(resolved.log_level.value)

    if not resolved.metadata_tree:
        log.warning("Metadata plugin created without a metadata tree, responses will not change")

    return MetadataPlugin(resolved, test_fn or is_introspection_query)
