"""Read and write values at nested locations addressed by a path.

A path is a single key, a dot-delimited string (``"meta.meta"``) or an explicit
sequence of segments (``["meta.meta", "meta"]``). Segments of a sequence are
used verbatim, which is the only way to address a key containing a dot.
"""

from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from typing import Any, TypeAlias

Segment: TypeAlias = str | int
PathLike: TypeAlias = str | int | Sequence[Segment]


def to_segments(path: PathLike) -> list[Segment]:
    """Normalize a path into its ordered list of segments.

    Args:
        path: A key, a dot-delimited string or a sequence of segments

    Returns:
        The list of segments

    Raises:
        ValueError: If the path has no segments
        TypeError: If the path is neither a string, an int nor a sequence
    """
    if isinstance(path, str):
        segments: list[Segment] = list(path.split(".")) if path else []
    elif isinstance(path, int):
        segments = [path]
    elif isinstance(path, Sequence):
        segments = list(path)
    else:
        raise TypeError(f"Path must be a string, an int or a sequence of segments, got {type(path).__name__}")

    if not segments:
        raise ValueError("Path must contain at least one segment")
    return segments


def _list_index(container: Sequence[Any], segment: Segment) -> int | None:
    if isinstance(segment, bool):
        return None
    if isinstance(segment, int):
        index = segment
    elif isinstance(segment, str) and segment.isdigit():
        index = int(segment)
    else:
        return None
    return index if -len(container) <= index < len(container) else None


def _step(container: Any, segment: Segment) -> tuple[bool, Any]:
    if isinstance(container, Mapping):
        if segment in container:
            return True, container[segment]
        return False, None
    if isinstance(container, Sequence) and not isinstance(container, str):
        index = _list_index(container, segment)
        if index is not None:
            return True, container[index]
    return False, None


def path_get(container: Any, path: PathLike, default: Any = None) -> Any:
    """Return the value stored at ``path`` inside ``container``.

    Mappings are walked by key and lists by integer index. A miss anywhere on the
    way, including a non-container in the middle of the path, returns ``default``.
    """
    current = container
    for segment in to_segments(path):
        found, current = _step(current, segment)
        if not found:
            return default
    return current


def path_set(container: MutableMapping[Any, Any] | MutableSequence[Any], path: PathLike, value: Any) -> None:
    """Store ``value`` at ``path`` inside ``container``, creating dicts on the way.

    Intermediate values that cannot hold children are replaced by a new dict.
    Nothing is written when the path cannot be stored.

    Raises:
        TypeError: If ``container`` itself cannot be written to, or a list on the path
            cannot be indexed by the next segment
    """
    if not isinstance(container, MutableMapping | MutableSequence):
        raise TypeError(f"Cannot set a path on {type(container).__name__}")

    *parents, last = to_segments(path)
    current: Any = container
    for segment in parents:
        found, child = _step(current, segment)
        if not found or not isinstance(child, MutableMapping | MutableSequence):
            child = {}
            _assign(current, segment, child)
        current = child
    _assign(current, last, value)


def _assign(container: Any, segment: Segment, value: Any) -> None:
    if isinstance(container, MutableSequence):
        index = _list_index(container, segment)
        if index is None:
            raise TypeError(f"Cannot use segment {segment!r} as an index into a list of {len(container)} items")
        container[index] = value
    else:
        container[segment] = value
