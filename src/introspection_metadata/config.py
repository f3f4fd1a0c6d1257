from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, cast

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from introspection_metadata import log
from introspection_metadata.merger import DEFAULT_METADATA_KEY

MetadataPath = Annotated[str, Field(min_length=1)] | Annotated[list[str | int], Field(min_length=1)]


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class PluginConfig(BaseModel):
    """Settings of the introspection metadata plugin.

    Keys accept both snake_case names and the camelCase spelling used in YAML/JSON
    files (``metadataTree``, ``metadataSourceKey``, ...). ``metadata_key`` is a
    shorthand filling whichever of the source and target keys was not given.

    The metadata tree is kept as given, without copying or checking its entries:
    malformed buckets are skipped when merging.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    metadata_tree: Mapping[str, Any] = Field(default_factory=dict, alias="metadataTree")
    metadata_source_key: MetadataPath = Field(DEFAULT_METADATA_KEY, alias="metadataSourceKey")
    metadata_target_key: MetadataPath = Field(DEFAULT_METADATA_KEY, alias="metadataTargetKey")
    metadata_key: MetadataPath | None = Field(None, alias="metadataKey")
    log_level: LogLevel | None = Field(None, alias="logLevel")

    @field_validator("metadata_tree", mode="plain")
    @classmethod
    def keep_metadata_tree(cls, value: Any) -> Mapping[str, Any]:
        if not isinstance(value, Mapping):
            raise ValueError(f"Metadata tree must be a mapping, got {type(value).__name__}")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @model_validator(mode="after")
    def apply_shared_metadata_key(self) -> "PluginConfig":
        if self.metadata_key is None:
            return self
        if "metadata_source_key" not in self.model_fields_set:
            self.metadata_source_key = self.metadata_key
        if "metadata_target_key" not in self.model_fields_set:
            self.metadata_target_key = self.metadata_key
        return self


def _load_mapping(path: Path, what: str) -> dict[str, Any] | None:
    raw: Any
    with path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    log.debug("Loaded %s from %s", what, path)

    # Treat empty file or explicit YAML null as "defaults"
    if raw is None or raw == {}:
        return None

    if not isinstance(raw, dict):
        raise TypeError(f"{what.capitalize()} root must be a mapping (YAML object), got {type(raw).__name__}")

    return cast(dict[str, Any], raw)


def load_plugin_config(config_path: Path) -> PluginConfig:
    """
    Load and validate a plugin configuration from a YAML (or JSON) file.

    Args:
        config_path: Path to the configuration file

    Returns:
        A validated PluginConfig

    Raises:
        OSError: If the file cannot be read.
        yaml.YAMLError: If the file is not valid YAML.
        TypeError: If the YAML root is not a mapping.
        ValidationError: If validation against PluginConfig fails.
    """
    raw = _load_mapping(config_path, "plugin config")
    return PluginConfig.model_validate(raw or {})


def load_metadata_tree(tree_path: Path) -> dict[str, Any]:
    """
    Load a metadata tree (kind -> type name -> entry) from a YAML (or JSON) file.

    Raises:
        OSError: If the file cannot be read.
        yaml.YAMLError: If the file is not valid YAML.
        TypeError: If the YAML root is not a mapping.
    """
    return _load_mapping(tree_path, "metadata tree") or {}
