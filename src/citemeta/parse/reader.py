"""Citation file reading with repair of self-referential citation calls.

Some CITATION files call ``citation(auto = meta)`` to include the
auto-generated package citation. That call recurses into the file being
read and cannot be evaluated, so the reader runs a two-phase state machine:

    DIRECT_PARSE ──ok──────────────────────────────> entries
         │ error mentions "Error in ... auto"
         v
    REPAIR_ATTEMPTED (drop matching lines, parse a temporary copy)
         │ ok ──> entries
         v
    FAILED ──> UnreadableSourceFileError

Any other parse error goes straight to FAILED.
"""

import re
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any, NoReturn

from citemeta.audit import AuditLogger
from citemeta.config import DEFAULT_CONFIG
from citemeta.exceptions import CitationSyntaxError, UnreadableSourceFileError
from citemeta.models import BibEntry
from citemeta.parse.base import decode_text, sniff_format
from citemeta.parse.bibtex import parse_bibtex
from citemeta.parse.rcitation import parse_rcitation

__all__ = [
    "REPAIR_TRIGGER_RE",
    "SELF_CITATION_CALL_RE",
    "CitationReadResult",
    "ReadState",
    "needs_repair",
    "parse_citation_text",
    "read_citation_file",
    "remove_self_citation_calls",
]

REPAIR_TRIGGER_RE = re.compile(r"Error in.+?auto")
SELF_CITATION_CALL_RE = re.compile(r"citation\s*\(auto\s*=\s*meta\s*\)")


class ReadState(StrEnum):
    """Reader state machine states."""

    DIRECT_PARSE = "direct-parse"
    REPAIR_ATTEMPTED = "repair-attempted"
    FAILED = "failed"


@dataclass(frozen=True)
class CitationReadResult:
    """Immutable result of reading one citation file.

    Attributes
    ----------
    entries : tuple[BibEntry, ...]
        Entries in source order.
    state : ReadState
        State in which parsing succeeded.
    removed_lines : tuple[int, ...]
        1-based line numbers deleted by the repair, empty otherwise.
    """

    entries: tuple[BibEntry, ...]
    state: ReadState
    removed_lines: tuple[int, ...] = ()

    @property
    def repaired(self) -> bool:
        """Whether the entries come from a repaired copy of the file."""
        return self.state is ReadState.REPAIR_ATTEMPTED


def needs_repair(error: Exception) -> bool:
    """Whether a parse error is the self-referential citation failure."""
    return REPAIR_TRIGGER_RE.search(str(error)) is not None


def remove_self_citation_calls(lines: list[str]) -> tuple[list[str], list[int]]:
    """Drop every line holding a ``citation(auto = meta)`` call.

    Parameters
    ----------
    lines : list[str]
        File lines without line terminators.

    Returns
    -------
    tuple[list[str], list[int]]
        - Remaining lines
        - 1-based numbers of the removed lines
    """
    kept: list[str] = []
    removed: list[int] = []
    for number, line in enumerate(lines, start=1):
        if SELF_CITATION_CALL_RE.search(line):
            removed.append(number)
        else:
            kept.append(line)
    return kept, removed


def parse_citation_text(text: str, meta: Mapping[str, Any] | None = None) -> list[BibEntry]:
    """Parse citation file content in either supported syntax.

    Parameters
    ----------
    text : str
        File content.
    meta : Mapping[str, Any] | None, optional
        Package metadata for R CITATION files; unused for BibTeX.

    Returns
    -------
    list[BibEntry]
        Entries in source order.
    """
    if sniff_format(text) == "bibtex":
        return parse_bibtex(text)
    return parse_rcitation(text, meta)


def _parse_file(path: Path, encoding: str, meta: Mapping[str, Any] | None) -> list[BibEntry]:
    try:
        text = decode_text(path.read_bytes(), encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise CitationSyntaxError(f"Error: cannot decode {path.name} as {encoding}: {e}") from e
    return parse_citation_text(text, meta)


def _repair(
    path: Path, encoding: str, meta: Mapping[str, Any] | None
) -> tuple[list[BibEntry], list[int]]:
    lines = decode_text(path.read_bytes(), encoding).split("\n")
    kept, removed = remove_self_citation_calls(lines)

    # Scoped copy: the directory and file are removed on every exit path
    with tempfile.TemporaryDirectory(prefix="citemeta-") as tmp_dir:
        temp_file = Path(tmp_dir) / path.name
        temp_file.write_text("\n".join(kept), encoding=encoding)
        return _parse_file(temp_file, encoding, meta), removed


def read_citation_file(
    path: str | Path,
    encoding: str | None = None,
    meta: Mapping[str, Any] | None = None,
    *,
    audit_logger: AuditLogger | None = None,
) -> CitationReadResult:
    """Read the bibliographic entries of a citation file.

    Parameters
    ----------
    path : str | Path
        R CITATION or BibTeX file.
    encoding : str | None, optional
        Declared file encoding, by default UTF-8.
    meta : Mapping[str, Any] | None, optional
        Package metadata bound to ``meta`` while evaluating an R CITATION
        file. Defaults to ``{"Encoding": encoding}`` when an encoding is
        declared.
    audit_logger : AuditLogger | None, optional
        Receives read, repair and error events.

    Returns
    -------
    CitationReadResult
        Entries with the state in which they were read.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    UnreadableSourceFileError
        If the file cannot be parsed, directly or after the repair.

    Examples
    --------
        >>> result = read_citation_file("inst/CITATION", encoding="UTF-8")
        >>> [entry.title for entry in result.entries]
        ['citemeta: Citation Metadata for Packages']
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise FileNotFoundError(f"Citation file not found: {path}")

    if meta is None and encoding is not None:
        meta = {"Encoding": encoding}
    file_encoding = encoding or DEFAULT_CONFIG.default_encoding

    state = ReadState.DIRECT_PARSE
    removed: list[int] = []
    try:
        entries = _parse_file(file_path, file_encoding, meta)
    except CitationSyntaxError as direct_error:
        if not needs_repair(direct_error):
            _fail(file_path, ReadState.FAILED, direct_error, audit_logger)

        state = ReadState.REPAIR_ATTEMPTED
        try:
            entries, removed = _repair(file_path, file_encoding, meta)
        except CitationSyntaxError as repair_error:
            _fail(file_path, ReadState.FAILED, repair_error, audit_logger)

        if audit_logger is not None:
            audit_logger.repair_applied(str(file_path), removed)

    if audit_logger is not None:
        audit_logger.citation_file_read(str(file_path), state.value, len(entries))

    return CitationReadResult(tuple(entries), state, tuple(removed))


def _fail(
    path: Path,
    state: ReadState,
    error: CitationSyntaxError,
    audit_logger: AuditLogger | None,
) -> NoReturn:
    if audit_logger is not None:
        audit_logger.error(type(error).__name__, str(error), stage="reader")
    raise UnreadableSourceFileError(
        f"Failed to read {path.name}: {error}", file=path, state=state
    ) from error
