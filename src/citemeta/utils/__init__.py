"""Common utility functions for citemeta."""

from citemeta.utils.pruning import drop_null, is_null
from citemeta.utils.timestamps import get_iso_timestamp

__all__ = [
    "drop_null",
    "is_null",
    "get_iso_timestamp",
]
