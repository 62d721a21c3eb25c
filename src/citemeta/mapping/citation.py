"""Bibliographic entry to schema.org citation conversion."""

from typing import Any

from citemeta.audit import AuditLogger
from citemeta.config import DEFAULT_CONFIG, CitationConfig
from citemeta.mapping.bibtypes import bibentry_to_schema_field, normalize_bibtype
from citemeta.mapping.doi import to_url_doi_or_none
from citemeta.mapping.journal import parse_journal
from citemeta.mapping.people import new_codemeta, parse_people
from citemeta.models import BibEntry
from citemeta.utils import drop_null, is_null

__all__ = ["parse_citation"]


def parse_citation(
    entry: BibEntry,
    *,
    config: CitationConfig | None = None,
    audit_logger: AuditLogger | None = None,
) -> dict[str, Any]:
    """Convert a bibliographic entry into a schema.org citation object.

    Parameters
    ----------
    entry : BibEntry
        Source entry.
    config : CitationConfig | None, optional
        Conversion settings, by default :data:`DEFAULT_CONFIG`.
    audit_logger : AuditLogger | None, optional
        Receives ``doi_discarded`` and ``citation_built`` events.

    Returns
    -------
    dict[str, Any]
        A new dict holding only present properties. ``identifier`` keeps
        the DOI as declared while ``@id`` and ``sameAs`` carry the
        canonical resolver URL.

    Raises
    ------
    UnrecognizedEntryTypeError
        If the entry type is not a known bibliographic type.

    Examples
    --------
        >>> from citemeta.models import BibEntry
        >>> parse_citation(BibEntry("Manual", title="citemeta"))
        {'@type': 'SoftwareSourceCode', 'name': 'citemeta'}
    """
    config = config or DEFAULT_CONFIG

    schema_type = bibentry_to_schema_field(normalize_bibtype(entry.bibtype))
    author = parse_people(entry.author, new_codemeta()).get("author")

    # Same URL twice: @id for identity, sameAs for cross-reference
    doi_url = to_url_doi_or_none(entry.doi, config.doi_base_url)
    if not is_null(entry.doi) and doi_url is None and audit_logger is not None:
        audit_logger.doi_discarded(str(entry.doi), rid=entry.key)

    citation = drop_null(
        {
            "@type": schema_type,
            "datePublished": entry.year,
            "author": author,
            "name": entry.title,
            "identifier": entry.doi,
            "url": entry.url,
            "description": entry.note,
            "pagination": entry.pages,
            "@id": doi_url,
            "sameAs": doi_url,
        }
    )

    journal = parse_journal(entry)
    if journal is not None:
        citation.update(journal)

    if audit_logger is not None:
        audit_logger.citation_built(schema_type, list(citation), rid=entry.key)

    return citation
