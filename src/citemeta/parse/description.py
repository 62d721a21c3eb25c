"""Package DESCRIPTION file reader.

DESCRIPTION files use the Debian control format: ``Field: value`` lines,
with continuation lines indented by whitespace.
"""

import re
from pathlib import Path

from citemeta.parse.base import decode_text, detect_encoding

__all__ = ["parse_description", "read_description"]

_FIELD_RE = re.compile(r"^([A-Za-z0-9@/._+-]+):\s*(.*)$")


def parse_description(text: str) -> dict[str, str]:
    """Parse DESCRIPTION content into a field mapping.

    Continuation lines are joined to their field with a single space;
    blank lines and unparseable lines are ignored.

    Parameters
    ----------
    text : str
        File content.

    Returns
    -------
    dict[str, str]
        Field name to value, in file order.
    """
    fields: dict[str, str] = {}
    current: str | None = None

    for line in text.split("\n"):
        if not line.strip():
            continue
        if line[0] in " \t":
            if current is not None:
                fields[current] = f"{fields[current]} {line.strip()}".strip()
            continue
        match = _FIELD_RE.match(line)
        if match:
            current = match.group(1)
            fields[current] = match.group(2).strip()
        else:
            current = None

    return fields


def read_description(path: Path) -> dict[str, str]:
    """Read a DESCRIPTION file.

    The file is decoded with its declared ``Encoding`` field when that
    differs from the detected encoding.

    Parameters
    ----------
    path : Path
        Path to the DESCRIPTION file.

    Returns
    -------
    dict[str, str]
        Field mapping.
    """
    file_bytes = Path(path).read_bytes()
    fields = parse_description(decode_text(file_bytes, detect_encoding(file_bytes)))

    declared = fields.get("Encoding")
    if declared:
        try:
            fields = parse_description(decode_text(file_bytes, declared))
        except (UnicodeDecodeError, LookupError):
            # Keep the detected decoding
            pass

    return fields
