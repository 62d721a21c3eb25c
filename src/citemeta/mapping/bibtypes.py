"""Bibliographic entry type to schema.org type mapping.

None of these schema.org types are part of the CodeMeta 2.0 context, so
documents embedding citations need the schema.org context as well.
"""

from types import MappingProxyType

from citemeta.exceptions import UnrecognizedEntryTypeError

__all__ = ["BIBTYPE_TO_SCHEMA", "bibentry_to_schema_field", "normalize_bibtype"]

BIBTYPE_TO_SCHEMA = MappingProxyType(
    {
        "Article": "ScholarlyArticle",
        "Book": "Book",
        "Booklet": "Book",
        "Inbook": "Chapter",
        "Incollection": "CreativeWork",
        "Inproceedings": "ScholarlyArticle",
        "Manual": "SoftwareSourceCode",
        "Mastersthesis": "Thesis",
        "Misc": "CreativeWork",
        "Phdthesis": "Thesis",
        "Proceedings": "ScholarlyArticle",
        "Techreport": "ScholarlyArticle",
        "Unpublished": "CreativeWork",
    }
)


def normalize_bibtype(bibtype: str) -> str:
    """Title-case an entry type tag ('inProceedings' -> 'Inproceedings')."""
    return bibtype.strip().capitalize()


def bibentry_to_schema_field(bibtype: str) -> str:
    """Map a title-cased entry type tag to its schema.org type.

    Parameters
    ----------
    bibtype : str
        Entry type tag, already normalized with :func:`normalize_bibtype`.

    Returns
    -------
    str
        schema.org type label.

    Raises
    ------
    UnrecognizedEntryTypeError
        If the tag is not in :data:`BIBTYPE_TO_SCHEMA`.
    """
    try:
        return BIBTYPE_TO_SCHEMA[bibtype]
    except KeyError:
        raise UnrecognizedEntryTypeError(bibtype) from None
