"""Citation file readers.

Supported syntaxes:
- R CITATION files (``bibentry()``/``citEntry()`` declarations)
- BibTeX

Main entry points:
- read_citation_file: Read one file, repairing self-referential calls
- read_description: Read package DESCRIPTION metadata
"""

from citemeta.parse.description import read_description
from citemeta.parse.reader import CitationReadResult, ReadState, read_citation_file

__all__ = [
    "CitationReadResult",
    "ReadState",
    "read_citation_file",
    "read_description",
]
