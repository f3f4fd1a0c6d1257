from introspection_metadata.logger import configure_logging, get_logger

__version__ = "0.3.0"

log = get_logger()

from introspection_metadata.config import PluginConfig, load_metadata_tree, load_plugin_config  # noqa: E402
from introspection_metadata.detection import is_introspection_query  # noqa: E402
from introspection_metadata.merger import merge_metadata  # noqa: E402
from introspection_metadata.paths import path_get, path_set  # noqa: E402
from introspection_metadata.plugin import AsyncResponseHook, MetadataPlugin, ResponseHook, create_plugin  # noqa: E402

__all__ = [
    "AsyncResponseHook",
    "MetadataPlugin",
    "PluginConfig",
    "ResponseHook",
    "configure_logging",
    "create_plugin",
    "is_introspection_query",
    "load_metadata_tree",
    "load_plugin_config",
    "log",
    "merge_metadata",
    "path_get",
    "path_set",
]
