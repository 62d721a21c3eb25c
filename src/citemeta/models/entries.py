"""Bibliographic entry data models.

Entries are produced by the citation file readers and the installed-package
source, and consumed by the citation builder. All types are immutable.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

__all__ = ["BibEntry", "ENTRY_FIELDS", "Person", "Scalar"]

# Field values keep the type they were declared with (e.g. volume = 12)
Scalar = str | int | float


@dataclass(frozen=True)
class Person:
    """A person or organization named in a bibliographic entry.

    Attributes
    ----------
    given : tuple[str, ...]
        Given names, in order. Empty for organizations.
    family : str | None
        Family name, or the full name of an organization.
    email : str | None
        Contact address.
    role : tuple[str, ...]
        MARC relator codes (e.g. 'aut', 'cre', 'ctb').
    comment : Mapping[str, str]
        Free-form annotations; an 'ORCID' key is recognised. Read-only and
        left out of the hash.
    """

    given: tuple[str, ...] = ()
    family: str | None = None
    email: str | None = None
    role: tuple[str, ...] = ()
    comment: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "comment", MappingProxyType(dict(self.comment)))

    @property
    def is_organization(self) -> bool:
        """Whether this entry names an organization rather than a person."""
        return not self.given

    def display_name(self) -> str:
        """Full name in 'Given Family' order."""
        parts = [*self.given, self.family] if self.family else list(self.given)
        return " ".join(parts)


@dataclass(frozen=True)
class BibEntry:
    """A single bibliographic record as declared in a citation file.

    Attributes
    ----------
    bibtype : str
        Entry type tag (e.g. 'Article', 'manual'). Not yet normalized.
    key : str | None
        Citation key, if declared.
    title : str | None
        Work title.
    author : tuple[Person, ...]
        Authors in declared order.
    year : Scalar | None
        Publication year.
    doi : str | None
        DOI as declared, bare or as URL.
    url : str | None
        Landing page.
    note : str | None
        Free-form note (often the package version).
    pages : Scalar | None
        Page range.
    journal : str | None
        Journal name.
    volume : Scalar | None
        Journal volume.
    number : Scalar | None
        Journal issue number.
    extra : Mapping[str, Any]
        Remaining declared fields, kept for reference only. Read-only and
        left out of the hash.
    """

    bibtype: str
    key: str | None = None
    title: str | None = None
    author: tuple[Person, ...] = ()
    year: Scalar | None = None
    doi: str | None = None
    url: str | None = None
    note: str | None = None
    pages: Scalar | None = None
    journal: str | None = None
    volume: Scalar | None = None
    number: Scalar | None = None
    extra: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))


# Field names accepted as BibEntry keyword arguments (besides bibtype/key/author)
ENTRY_FIELDS = frozenset(
    {"title", "year", "doi", "url", "note", "pages", "journal", "volume", "number"}
)
