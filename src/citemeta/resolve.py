"""Citation lookup for a package.

A package is either a source directory or the name of an installed
distribution. The first source found wins:

1. a citation file under the package root (``inst/CITATION``, ``CITATION``,
   ``CITATION.bib``), decoded with the DESCRIPTION ``Encoding`` field
2. the auto-generated citation of an installed distribution
3. nothing
"""

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from citemeta.audit import AuditLogger
from citemeta.config import DEFAULT_CONFIG, CitationConfig
from citemeta.mapping import parse_citation
from citemeta.models import BibEntry
from citemeta.parse import read_citation_file, read_description
from citemeta.sources import installed_citation, is_installed

__all__ = ["InstalledSource", "find_citation_file", "guess_citation"]

InstalledSource = Callable[[str], Sequence[BibEntry]]


def find_citation_file(root: Path, config: CitationConfig = DEFAULT_CONFIG) -> Path | None:
    """Return the first configured citation file that exists under ``root``."""
    for relative in config.citation_paths:
        candidate = root / relative
        if candidate.is_file():
            return candidate
    return None


def guess_citation(
    pkg: str | Path,
    *,
    config: CitationConfig | None = None,
    installed_source: InstalledSource | None = None,
    audit_logger: AuditLogger | None = None,
) -> list[dict[str, Any]] | None:
    """Resolve the citations of a package as schema.org objects.

    Parameters
    ----------
    pkg : str | Path
        Package source directory or installed distribution name.
    config : CitationConfig | None, optional
        Lookup and conversion settings.
    installed_source : InstalledSource | None, optional
        Citation source for installed distributions, by default
        :func:`installed_citation`.
    audit_logger : AuditLogger | None, optional
        Receives reader, builder and resolver events.

    Returns
    -------
    list[dict[str, Any]] | None
        Citation objects in source order, or None when the package has
        no citation file and is not installed.

    Raises
    ------
    UnreadableSourceFileError
        If the package citation file cannot be parsed.
    UnrecognizedEntryTypeError
        If an entry has an unknown type.

    Examples
    --------
        >>> citations = guess_citation("path/to/pkg")
        >>> citations[0]["@type"]
        'ScholarlyArticle'
    """
    config = config or DEFAULT_CONFIG
    installed_source = installed_source or installed_citation

    root = Path(pkg)
    citation_file = find_citation_file(root, config) if root.is_dir() else None

    entries: Sequence[BibEntry]
    if citation_file is not None:
        description_path = root / config.description_file
        meta = read_description(description_path) if description_path.is_file() else None
        encoding = meta.get("Encoding") if meta else None
        result = read_citation_file(
            citation_file,
            encoding=encoding,
            meta=meta,
            audit_logger=audit_logger,
        )
        entries = result.entries
    elif isinstance(pkg, str) and is_installed(pkg):
        entries = installed_source(pkg)
    else:
        if audit_logger is not None:
            audit_logger.source_missing(str(pkg))
        return None

    # TODO: decide whether the package's citation of itself should be dropped
    return [parse_citation(entry, config=config, audit_logger=audit_logger) for entry in entries]
