"""Mapping of bibliographic entries to schema.org objects.

Each function is pure and deterministic: the same entry always yields
a structurally identical result.
"""

from citemeta.mapping.bibtypes import (
    BIBTYPE_TO_SCHEMA,
    bibentry_to_schema_field,
    normalize_bibtype,
)
from citemeta.mapping.citation import parse_citation
from citemeta.mapping.doi import to_url_doi_or_none
from citemeta.mapping.journal import parse_journal
from citemeta.mapping.people import new_codemeta, parse_people, person_to_schema

__all__ = [
    "BIBTYPE_TO_SCHEMA",
    "bibentry_to_schema_field",
    "new_codemeta",
    "normalize_bibtype",
    "parse_citation",
    "parse_journal",
    "parse_people",
    "person_to_schema",
    "to_url_doi_or_none",
]
