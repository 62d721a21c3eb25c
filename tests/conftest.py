"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from citemeta.audit import AuditLogger  # noqa: E402
from citemeta.models import BibEntry, Person  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the citation fixtures directory."""
    return FIXTURES_DIR / "citation"


@pytest.fixture
def make_entry() -> Callable[..., BibEntry]:
    """Factory for bibliographic entries with minimal boilerplate."""

    def _factory(bibtype: str = "Article", **fields: Any) -> BibEntry:
        return BibEntry(bibtype=bibtype, **fields)

    return _factory


@pytest.fixture
def jane() -> Person:
    """A person with an ORCID and an email address."""
    return Person(
        given=("Jane",),
        family="Smith",
        email="jane@example.org",
        comment={"ORCID": "0000-0002-1825-0097"},
    )


@pytest.fixture
def audit_logger(tmp_path: Path) -> Iterator[AuditLogger]:
    """Audit logger writing to a temporary file, closed after the test."""
    lg = AuditLogger(tmp_path / "events.jsonl", run_id="test_run")
    yield lg
    lg.close()

