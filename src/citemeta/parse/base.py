"""Base utilities for citation file readers."""

import re

__all__ = [
    "decode_text",
    "detect_encoding",
    "normalize_line_endings",
    "sniff_format",
]

_BIBTEX_ENTRY_RE = re.compile(r"@\w+\s*\{")

# Line comments in BibTeX (%) and R (#) files
_COMMENT_PREFIXES = ("%", "#")


def detect_encoding(file_bytes: bytes) -> str:
    """Detect encoding of file bytes using deterministic strategy.

    Parameters
    ----------
    file_bytes : bytes
        Complete file content as bytes.

    Returns
    -------
    str
        Detected encoding (utf-8-sig, utf-8 or latin-1).
    """
    if file_bytes.startswith(b"\xef\xbb\xbf"):
        return "utf-8-sig"

    try:
        file_bytes.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        pass

    return "latin-1"


def normalize_line_endings(content: str) -> str:
    """Normalize line endings to LF.

    Parameters
    ----------
    content : str
        Text content with potentially mixed line endings.

    Returns
    -------
    str
        Text with normalized line endings (\\n only).
    """
    content = content.replace("\r\n", "\n")
    return content.replace("\r", "\n")


def decode_text(file_bytes: bytes, encoding: str) -> str:
    """Decode file bytes with a declared encoding and normalize line endings.

    A UTF-8 byte order mark is dropped when the declared encoding is UTF-8.

    Raises
    ------
    UnicodeDecodeError
        If the bytes are invalid in ``encoding``.
    LookupError
        If ``encoding`` is not a known codec.
    """
    if encoding.replace("-", "").replace("_", "").lower() == "utf8":
        encoding = "utf-8-sig"
    return normalize_line_endings(file_bytes.decode(encoding))


def sniff_format(text: str) -> str:
    """Sniff citation file syntax from its content.

    Parameters
    ----------
    text : str
        Decoded file content.

    Returns
    -------
    str
        'bibtex' when the first line that is neither blank nor a comment
        opens an ``@type{`` entry, else 'rcitation'.
    """
    for line in text.split("\n"):
        stripped = line.strip()
        if not stripped or stripped.startswith(_COMMENT_PREFIXES):
            continue
        if _BIBTEX_ENTRY_RE.match(stripped):
            return "bibtex"
        return "rcitation"
    return "rcitation"
