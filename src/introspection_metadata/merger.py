"""
Attach caller-supplied metadata to the nodes of an introspection query result.

The metadata tree mirrors the shape of the introspection result, grouped by kind:

    {
        "OBJECT": {
            "MyType": {
                "metadata": {"foo": "bar"},
                "fields": {
                    "myField": {
                        "metadata": {...},
                        "args": {"myArg": {"metadata": {...}}},
                    },
                },
            },
        },
        "INPUT_OBJECT": {"MyInput": {"metadata": {...}, "inputFields": {...}}},
        "ENUM": {"MyEnum": {"metadata": {...}, "enumValues": {...}}},
    }

Children of a type are looked up under the same attribute the introspection
result uses for that kind (see ``kinds.CHILD_COLLECTION_KEYS``).
"""

import copy
from collections.abc import Mapping, MutableMapping, Sequence
from dataclasses import dataclass
from typing import Any

from graphql import ExecutionResult

from introspection_metadata import log
from introspection_metadata.kinds import child_collection_key, is_introspection_type
from introspection_metadata.paths import PathLike, path_get, path_set, to_segments

DEFAULT_METADATA_KEY = "metadata"


@dataclass
class _MergeState:
    source_key: PathLike
    target_key: PathLike
    types_visited: int = 0
    meta_types_visited: int = 0
    writes: int = 0


def merge_metadata(
    response: Any,
    metadata_tree: Mapping[str, Any] | None,
    metadata_source_key: PathLike = DEFAULT_METADATA_KEY,
    metadata_target_key: PathLike = DEFAULT_METADATA_KEY,
    *,
    inplace: bool = True,
) -> Any:
    """
    Write matching metadata onto the types, fields and arguments of an introspection result.

    Missing or malformed optional structure on either side is never an error: the
    corresponding node is simply left as it was.

    Args:
        response: Introspection result, either ``{"data": {"__schema": ...}}``,
            ``{"__schema": ...}`` or a graphql-core ``ExecutionResult``
        metadata_tree: Metadata grouped by kind, then by type name
        metadata_source_key: Path of the payload inside each metadata entry
        metadata_target_key: Path the payload is written to on each matched node
        inplace: Mutate ``response`` (default) or merge into a deep copy of it

    Returns:
        The merged response: ``response`` itself, or the copy when ``inplace`` is False

    Raises:
        ValueError: If a key is an empty path
    """
    # Fail on a bad key before touching the response
    to_segments(metadata_source_key)
    to_segments(metadata_target_key)

    if not inplace:
        response = copy.deepcopy(response)

    if not isinstance(metadata_tree, Mapping):
        log.debug("No metadata tree given, leaving introspection result untouched")
        return response

    state = _MergeState(source_key=metadata_source_key, target_key=metadata_target_key)
    for type_node in _introspected_types(response):
        _merge_type(type_node, metadata_tree, state)

    log.debug(
        f"Merged metadata into introspection result: {state.types_visited} types visited "
        f"({state.meta_types_visited} introspection types), {state.writes} nodes written"
    )
    return response


def _introspected_types(response: Any) -> Sequence[Any]:
    envelope = response.data if isinstance(response, ExecutionResult) else response

    types = path_get(envelope, ["data", "__schema", "types"])
    if types is None:
        types = path_get(envelope, ["__schema", "types"])

    if isinstance(types, Sequence) and not isinstance(types, str):
        return types
    return []


def _children(node: Mapping[str, Any], key: str) -> Sequence[Any]:
    children = node.get(key)
    if isinstance(children, Sequence) and not isinstance(children, str):
        return children
    return []


def _entries(metadata: Any, key: str) -> Mapping[str, Any]:
    if not isinstance(metadata, Mapping):
        return {}
    entries = metadata.get(key)
    return entries if isinstance(entries, Mapping) else {}


def _attach(node: MutableMapping[str, Any], entry: Any, state: _MergeState) -> None:
    if not isinstance(entry, Mapping):
        return
    payload = path_get(entry, state.source_key)
    if not payload:
        return
    try:
        path_set(node, state.target_key, payload)
    except TypeError as e:
        # The target path runs into a list of this node; nothing is written on it
        log.debug(f"Skipping metadata for {node.get('name')!r}: {e}")
        return
    state.writes += 1


def _merge_type(type_node: Any, metadata_tree: Mapping[str, Any], state: _MergeState) -> None:
    if not isinstance(type_node, MutableMapping):
        return
    name = type_node.get("name")
    if not isinstance(name, str) or not name:
        return

    state.types_visited += 1
    if is_introspection_type(name):
        state.meta_types_visited += 1

    kind = type_node.get("kind")
    kind_metadata = metadata_tree.get(kind) if isinstance(kind, str) else None
    # An empty bucket still counts as present
    if not isinstance(kind_metadata, Mapping):
        return

    entry = kind_metadata.get(name)
    _attach(type_node, entry, state)

    children_key = child_collection_key(kind)
    children_metadata = _entries(entry, children_key)
    for field_node in _children(type_node, children_key):
        _merge_field(field_node, children_metadata, state)


def _merge_field(field_node: Any, fields_metadata: Mapping[str, Any], state: _MergeState) -> None:
    if not isinstance(field_node, MutableMapping):
        return
    name = field_node.get("name")
    if not isinstance(name, str) or not name:
        return

    entry = fields_metadata.get(name)
    _attach(field_node, entry, state)

    args_metadata = _entries(entry, "args")
    for arg_node in _children(field_node, "args"):
        _merge_arg(arg_node, args_metadata, state)


def _merge_arg(arg_node: Any, args_metadata: Mapping[str, Any], state: _MergeState) -> None:
    if not isinstance(arg_node, MutableMapping):
        return
    name = arg_node.get("name")
    if not isinstance(name, str) or not name:
        return

    _attach(arg_node, args_metadata.get(name), state)
