"""Shared data types for citemeta."""

from citemeta.models.entries import ENTRY_FIELDS, BibEntry, Person, Scalar

__all__ = [
    "BibEntry",
    "Person",
    "Scalar",
    "ENTRY_FIELDS",
]
