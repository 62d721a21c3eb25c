"""Null pruning for schema.org mappings."""

from collections.abc import Mapping
from typing import Any

__all__ = ["drop_null", "is_null"]


def is_null(value: Any) -> bool:
    """Whether a value counts as absent.

    ``None``, blank strings and empty containers are absent; ``0``,
    ``False`` and other scalars are concrete values.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset, Mapping)):
        return len(value) == 0
    return False


def drop_null(mapping: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of a mapping without absent values.

    Key order is preserved. Only the top level is pruned; nested mappings
    are expected to be pruned when they are built.

    Parameters
    ----------
    mapping : Mapping[str, Any]
        Property name to value mapping.

    Returns
    -------
    dict[str, Any]
        New dict holding only concrete values.
    """
    return {key: value for key, value in mapping.items() if not is_null(value)}
