"""JSON queries over device documents.

Thin layer over glom: path lookups with default fallback, top-level entry
dumps, and filtered/sorted child collections. glom failures are mapped to the
msc query errors so callers only deal with one taxonomy.
"""

import json
from collections.abc import Callable, Iterable
from glom import SKIP, Coalesce, GlomError, PathAccessError, glom
from msc.errors import QueryFieldAbsent, QueryTypeMismatch
from typing import Any

MISSING = object()


def lookup(document: Any, path: str, default: Any = MISSING) -> Any:
    """Evaluate a dotted path against a document.

    Args:
        document: Decoded JSON document
        path: glom path, e.g. ``"volume"`` or ``"children.0.name"``
        default: Value returned when the path is absent (``expr // default``)

    Raises:
        QueryFieldAbsent: Path absent and no default given
    """
    try:
        result = glom(document, path)
    except PathAccessError as e:
        if default is not MISSING:
            return default
        raise QueryFieldAbsent(path) from e
    except GlomError as e:
        raise QueryTypeMismatch(path) from e
    if result is None and default is not MISSING:
        return default
    return result


def value(document: Any, key: str) -> Any:
    """Single top-level field, or None when absent. Keys are literal, never paths."""
    if not isinstance(document, dict):
        raise QueryTypeMismatch(key, document)
    return document.get(key)


def present(raw: Any) -> bool:
    """Whether jq's ``//`` would keep the value (anything but null or false)."""
    return raw is not None and raw is not False


def coalesce(document: Any, *paths: str, default: Any = None) -> Any:
    """First present, non-null path among ``paths``."""
    return glom(document, Coalesce(*paths, skip=(None,), default=default))


def integer(document: Any, key: str) -> int:
    """Field coerced to int, the way the device's string-typed numbers need.

    Raises:
        QueryFieldAbsent: Field absent or null
        QueryTypeMismatch: Field is not numeric
    """
    raw = lookup(document, key)
    if raw is None:
        raise QueryFieldAbsent(key)
    try:
        return int(float(raw))
    except (TypeError, ValueError) as e:
        raise QueryTypeMismatch(key, raw) from e


def entries(document: Any, skip: int = 0, exclude: Iterable[str] = ()) -> list[tuple[str, Any]]:
    """Top-level ``(key, value)`` pairs in document order.

    Args:
        document: Decoded JSON object
        skip: Number of leading entries to drop
        exclude: Keys to drop from what remains
    """
    if not isinstance(document, dict):
        raise QueryTypeMismatch("entries", document)
    excluded = set(exclude)
    return [(k, v) for k, v in list(document.items())[skip:] if k not in excluded]


def children(
    document: Any,
    predicate: Callable[[dict], bool] | None = None,
    sort_key: Callable[[dict], Any] | None = None,
    spec: Any = None,
) -> list:
    """Filter, sort and project a document's ``children`` collection.

    Args:
        document: Decoded JSON object with an optional ``children`` array
        predicate: Keep a child only when it returns True
        sort_key: Stable sort applied after filtering
        spec: glom spec projecting each surviving child

    Returns:
        Projected children, empty when the collection is absent
    """
    items = glom(document, Coalesce("children", default=[])) or []
    if predicate is not None:
        items = glom(items, [lambda child: child if predicate(child) else SKIP])
    if sort_key is not None:
        items = sorted(items, key=sort_key)
    if spec is not None:
        items = glom(items, [spec])
    return items


def render(raw: Any) -> str:
    """Render a JSON value the way ``jq -r`` prints it."""
    if isinstance(raw, str):
        return raw
    return json.dumps(raw, separators=(",", ":"), ensure_ascii=False)
