"""Schema.org citation metadata for software packages.

This package provides:
- Data models (citemeta.models): bibliographic entries and persons
- Parsing (citemeta.parse): R CITATION, BibTeX and DESCRIPTION readers
- Mapping (citemeta.mapping): schema.org/CodeMeta conversion
- Sources (citemeta.sources): installed distribution citations
- Audit (citemeta.audit): structured event logging
- CLI (citemeta.cli): command-line interface
- Public API (citemeta.api): high-level convenience functions
"""

__version__ = "0.3.0"
__license__ = "MIT"

from citemeta.api import citations_from_file, guess_citation, parse_citation, write_json
from citemeta.config import CitationConfig
from citemeta.exceptions import (
    CitationSyntaxError,
    CitemetaError,
    UnreadableSourceFileError,
    UnrecognizedEntryTypeError,
)
from citemeta.models import BibEntry, Person

__all__ = [
    "__version__",
    "__license__",
    "BibEntry",
    "Person",
    "CitationConfig",
    "citations_from_file",
    "guess_citation",
    "parse_citation",
    "write_json",
    "CitemetaError",
    "CitationSyntaxError",
    "UnreadableSourceFileError",
    "UnrecognizedEntryTypeError",
]
