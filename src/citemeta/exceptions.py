"""Exception types raised by citemeta."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from citemeta.parse.reader import ReadState

__all__ = [
    "CitemetaError",
    "CitationSyntaxError",
    "UnreadableSourceFileError",
    "UnrecognizedEntryTypeError",
]


class CitemetaError(Exception):
    """Base class for all citemeta errors."""


class CitationSyntaxError(CitemetaError):
    """Raised when a citation file cannot be parsed or evaluated.

    The message follows the ``Error in <call> : <reason>`` convention so
    that callers can recognise specific failure modes from the text alone.
    """

    def __init__(self, message: str, line: int | None = None) -> None:
        """Initialize syntax error.

        Parameters
        ----------
        message : str
            Error message.
        line : int | None, optional
            1-based line number where the error was detected.
        """
        super().__init__(message)
        self.line = line


class UnreadableSourceFileError(CitemetaError):
    """Raised when a citation file cannot be read, even after repair."""

    def __init__(
        self,
        message: str,
        file: str | Path | None = None,
        state: ReadState | None = None,
    ) -> None:
        """Initialize unreadable source error.

        Parameters
        ----------
        message : str
            Error message.
        file : str | Path | None, optional
            File that failed to parse.
        state : ReadState | None, optional
            Reader state reached before failing.
        """
        super().__init__(message)
        self.file = str(file) if file is not None else None
        self.state = state


class UnrecognizedEntryTypeError(CitemetaError):
    """Raised for a bibliographic entry type outside the known table."""

    def __init__(self, bibtype: str) -> None:
        super().__init__(f"Unrecognized bibliographic entry type: {bibtype!r}")
        self.bibtype = bibtype
