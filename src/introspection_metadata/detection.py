import re
from collections.abc import Mapping
from typing import Any

INTROSPECTION_QUERY_PATTERN = re.compile(r"\b(__schema|__type)\b")


def context_value(context: Any, key: str) -> Any:
    """Read ``key`` from a host context, whether it is a mapping or an attribute bag."""
    if context is None:
        return None
    if isinstance(context, Mapping):
        return context.get(key)
    return getattr(context, key, None)


def query_text(request_context: Any) -> str | None:
    """Return the query text of ``request_context.request.query`` when it is a string."""
    query = context_value(context_value(request_context, "request"), "query")
    return query if isinstance(query, str) else None


def is_introspection_query(request_context: Any) -> bool:
    """Tell whether the request asks for ``__schema`` or ``__type``.

    Args:
        request_context: Host request context exposing ``request.query``

    Returns:
        True if the query text mentions one of the introspection meta-fields
    """
    query = query_text(request_context)
    return query is not None and INTROSPECTION_QUERY_PATTERN.search(query) is not None
