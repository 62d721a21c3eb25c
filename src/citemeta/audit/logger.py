"""Structured audit logger for JSONL event logging.

Provides append-only structured event logging to JSONL files with
a persistent file handle. Every component that accepts an
``audit_logger`` treats ``None`` as "do not log".
"""

import json
import secrets
from dataclasses import asdict
from pathlib import Path
from typing import Any

from citemeta.audit.models import LEVELS, LogEvent
from citemeta.utils import get_iso_timestamp

__all__ = ["AuditLogger", "generate_run_id"]


def generate_run_id() -> str:
    """Generate unique run identifier.

    Returns
    -------
    str
        Run ID in format: ISO8601_timestamp__random_suffix.
    """
    timestamp = get_iso_timestamp()
    suffix = secrets.token_hex(4)
    return f"{timestamp}__{suffix}"


class AuditLogger:
    """JSONL audit logger with persistent file handle.

    Writes structured log events to a JSONL file (one JSON object per line).
    Events are append-only and flushed after each write.

    Attributes
    ----------
    run_id : str
        Unique run identifier.
    log_path : Path
        Path to JSONL log file.
    """

    def __init__(self, log_path: Path, run_id: str | None = None) -> None:
        """Initialize audit logger and open file handle.

        Parameters
        ----------
        log_path : Path
            Path to JSONL log file.
        run_id : str | None, optional
            Unique run identifier, generated when omitted.
        """
        self.run_id = run_id or generate_run_id()
        self.log_path = Path(log_path)

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.log_path.open("a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and close file."""
        self.close()

    def close(self) -> None:
        """Flush and close the log file handle."""
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        stage: str | None = None,
        rid: str | None = None,
    ) -> None:
        """Write structured event to log.

        Parameters
        ----------
        event_type : str
            Event type identifier (e.g., "citation_file_read").
        data : dict[str, Any] | None, optional
            Event-specific data payload.
        level : str, optional
            Log level ("DEBUG", "INFO", "WARN", "ERROR").
        stage : str | None, optional
            Emitting component.
        rid : str | None, optional
            Citation key if the event concerns a single entry.
        """
        if level not in LEVELS:
            raise ValueError(f"Unknown log level: {level!r}")

        log_event = LogEvent(
            ts=get_iso_timestamp(),
            run_id=self.run_id,
            level=level,
            event=event_type,
            data=data or {},
            stage=stage,
            rid=rid,
        )
        json.dump(asdict(log_event), self._file, ensure_ascii=False, separators=(",", ":"))
        self._file.write("\n")
        self._file.flush()

    def citation_file_read(self, path: str, state: str, entries: int) -> None:
        """Log a successful citation file read."""
        self.event(
            "citation_file_read",
            data={"path": path, "state": state, "entries": entries},
            stage="reader",
        )

    def repair_applied(self, path: str, removed_lines: list[int]) -> None:
        """Log removal of self-referential citation calls.

        Parameters
        ----------
        path : str
            Original citation file.
        removed_lines : list[int]
            1-based line numbers deleted before the retry.
        """
        self.event(
            "citation_repair_applied",
            data={"path": path, "removed_lines": removed_lines},
            level="WARN",
            stage="reader",
        )

    def doi_discarded(self, doi: str, rid: str | None = None) -> None:
        """Log a DOI value that is neither bare nor a resolver URL."""
        self.event("doi_discarded", data={"doi": doi}, level="WARN", stage="builder", rid=rid)

    def citation_built(self, schema_type: str, keys: list[str], rid: str | None = None) -> None:
        """Log a converted citation object."""
        self.event(
            "citation_built",
            data={"type": schema_type, "keys": keys},
            level="DEBUG",
            stage="builder",
            rid=rid,
        )

    def source_missing(self, package: str) -> None:
        """Log that no citation source exists for a package."""
        self.event("citation_source_missing", data={"package": package}, stage="resolver")

    def error(
        self,
        exception_class: str,
        message: str,
        stage: str | None = None,
        rid: str | None = None,
    ) -> None:
        """Log error event.

        Parameters
        ----------
        exception_class : str
            Exception class name.
        message : str
            Error message.
        stage : str | None, optional
            Component where error occurred.
        rid : str | None, optional
            Citation key if error is entry-specific.
        """
        self.event(
            "error",
            data={"exception_class": exception_class, "message": message},
            level="ERROR",
            stage=stage,
            rid=rid,
        )
