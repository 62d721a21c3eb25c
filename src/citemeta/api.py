"""Public API for citation conversion.

This module provides the main entry points of citemeta:
- Converting the citation file of a package or an installed distribution
- Converting a single citation file
- Writing citation objects as JSON
"""

import json
from pathlib import Path
from typing import Any

from citemeta.audit import AuditLogger
from citemeta.config import CitationConfig
from citemeta.mapping import parse_citation
from citemeta.parse import read_citation_file
from citemeta.resolve import guess_citation

__all__ = [
    "citations_from_file",
    "guess_citation",
    "parse_citation",
    "write_json",
]


def citations_from_file(
    path: str | Path,
    *,
    encoding: str | None = None,
    config: CitationConfig | None = None,
    audit_logger: AuditLogger | None = None,
) -> list[dict[str, Any]]:
    """Convert every entry of a citation file.

    Parameters
    ----------
    path : str | Path
        R CITATION or BibTeX file.
    encoding : str | None, optional
        Declared file encoding, by default UTF-8.
    config : CitationConfig | None, optional
        Conversion settings.
    audit_logger : AuditLogger | None, optional
        Receives reader and builder events.

    Returns
    -------
    list[dict[str, Any]]
        Citation objects in source order.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    UnreadableSourceFileError
        If the file cannot be parsed.

    Examples
    --------
        >>> from citemeta import citations_from_file
        >>> for citation in citations_from_file("inst/CITATION"):
        ...     print(citation["@type"], citation.get("@id"))
    """
    result = read_citation_file(path, encoding=encoding, audit_logger=audit_logger)
    return [
        parse_citation(entry, config=config, audit_logger=audit_logger)
        for entry in result.entries
    ]


def write_json(
    citations: list[dict[str, Any]] | None,
    path: str | Path,
    *,
    indent: int = 2,
) -> None:
    """Write citation objects to a JSON file.

    Output is UTF-8 with property order preserved. ``None`` (no citation
    available) is written as an empty list.

    Parameters
    ----------
    citations : list[dict[str, Any]] | None
        Citation objects.
    path : str | Path
        Output file path.
    indent : int, optional
        Indentation width, by default 2.
    """
    file_path = Path(path)

    with file_path.open("w", encoding="utf-8", newline="\n") as f:
        json.dump(citations or [], f, ensure_ascii=False, indent=indent)
        f.write("\n")
