"""Journal, volume and issue nesting."""

from typing import Any

from citemeta.models import BibEntry
from citemeta.utils import drop_null, is_null

__all__ = ["parse_journal"]


def parse_journal(entry: BibEntry) -> dict[str, Any] | None:
    """Build the ``isPartOf`` fragment for an entry published in a journal.

    The issue wraps the volume, which doubles as the periodical:

        isPartOf -> PublicationIssue (issueNumber, datePublished)
                    isPartOf -> [PublicationVolume, Periodical] (volumeNumber, name)

    Parameters
    ----------
    entry : BibEntry
        Source entry.

    Returns
    -------
    dict[str, Any] | None
        ``{"isPartOf": {...}}`` or None when the entry has no journal.
    """
    if is_null(entry.journal):
        return None

    volume = drop_null(
        {
            "@type": ["PublicationVolume", "Periodical"],
            "volumeNumber": entry.volume,
            "name": entry.journal,
        }
    )
    issue = drop_null(
        {
            "@type": "PublicationIssue",
            "issueNumber": entry.number,
            "datePublished": entry.year,
            "isPartOf": volume,
        }
    )
    return {"isPartOf": issue}
