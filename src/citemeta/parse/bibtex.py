"""BibTeX citation file reader.

Entries: @<entrytype>{citekey, field = {value}, ...}
Special entries (@STRING, @PREAMBLE, @COMMENT) are skipped.
Reference: http://www.bibtex.org/Format/
"""

import re

from citemeta.exceptions import CitationSyntaxError
from citemeta.models import ENTRY_FIELDS, BibEntry, Scalar
from citemeta.parse.names import parse_people_string

__all__ = ["parse_bibtex"]

ENTRY_START_PATTERN = re.compile(r"@(\w+)\s*\{", re.IGNORECASE)
FIELD_NAME_PATTERN = re.compile(r"([\w-]+)\s*=\s*", re.IGNORECASE)

_SPECIAL_ENTRIES = frozenset({"string", "preamble", "comment"})


def parse_bibtex(text: str) -> list[BibEntry]:
    """Parse BibTeX content into bibliographic entries.

    Parameters
    ----------
    text : str
        File content.

    Returns
    -------
    list[BibEntry]
        Entries in source order.

    Raises
    ------
    CitationSyntaxError
        If an entry is not closed or has no citation key.
    """
    entries: list[BibEntry] = []
    consumed_until = -1

    for match in ENTRY_START_PATTERN.finditer(text):
        # "@" inside a previous entry (e.g. an email address) is not an entry
        if match.start() < consumed_until:
            continue

        entry_type = match.group(1)
        line = text.count("\n", 0, match.start()) + 1
        open_brace = match.end() - 1
        close_brace = _find_closing_brace(text, open_brace)

        if close_brace == -1:
            raise CitationSyntaxError(f"Error: unclosed entry @{entry_type} at line {line}", line)

        consumed_until = close_brace
        if entry_type.lower() in _SPECIAL_ENTRIES:
            continue

        body = text[open_brace + 1 : close_brace]
        citekey, sep, field_text = body.partition(",")
        if not sep or "=" in citekey:
            raise CitationSyntaxError(
                f"Error: missing citation key in @{entry_type} at line {line}", line
            )

        entries.append(_build_entry(entry_type, citekey.strip(), _parse_fields(field_text)))

    return entries


def _find_closing_brace(text: str, open_brace: int) -> int:
    brace_depth = 0
    in_quotes = False
    escape_next = False

    for i in range(open_brace, len(text)):
        char = text[i]
        if escape_next:
            escape_next = False
            continue

        if char == "\\":
            escape_next = True
            continue

        if char == '"' and brace_depth == 1:
            in_quotes = not in_quotes
        elif not in_quotes:
            if char == "{":
                brace_depth += 1
            elif char == "}":
                brace_depth -= 1
                if brace_depth == 0:
                    return i

    return -1


def _parse_fields(content: str) -> list[tuple[str, Scalar]]:
    fields: list[tuple[str, Scalar]] = []

    i = 0
    while i < len(content):
        # Skip whitespace and separators
        while i < len(content) and (content[i].isspace() or content[i] == ","):
            i += 1
        if i >= len(content):
            break

        field_match = FIELD_NAME_PATTERN.match(content, i)
        if not field_match:
            i += 1
            continue

        field_name = field_match.group(1).lower()
        i = field_match.end()
        if i >= len(content):
            break

        # Parse value based on delimiter
        value: Scalar
        if content[i] == "{":
            value, i = _parse_braced_value(content, i)
        elif content[i] == '"':
            value, i = _parse_quoted_value(content, i)
        else:
            bare, i = _parse_bare_value(content, i)
            value = int(bare) if bare.isdigit() else bare

        if isinstance(value, str):
            value = " ".join(value.split())
        fields.append((field_name, value))

    return fields


def _parse_braced_value(content: str, start: int) -> tuple[str, int]:
    brace_depth = 0
    value_chars: list[str] = []
    i = start

    while i < len(content):
        char = content[i]
        if char == "{":
            brace_depth += 1
            if brace_depth > 1:
                value_chars.append(char)
        elif char == "}":
            brace_depth -= 1
            if brace_depth == 0:
                return "".join(value_chars), i + 1
            value_chars.append(char)
        else:
            value_chars.append(char)
        i += 1

    return "".join(value_chars), i


def _parse_quoted_value(content: str, start: int) -> tuple[str, int]:
    i = start + 1  # skip opening quote
    value_chars: list[str] = []
    escape_next = False

    while i < len(content):
        char = content[i]
        if escape_next:
            value_chars.append(char)
            escape_next = False
        elif char == "\\":
            escape_next = True
        elif char == '"':
            return "".join(value_chars), i + 1
        else:
            value_chars.append(char)
        i += 1

    return "".join(value_chars), i


def _parse_bare_value(content: str, start: int) -> tuple[str, int]:
    value_chars: list[str] = []
    i = start

    while i < len(content) and content[i] not in ",\n}":
        if content[i] == "#":
            break
        value_chars.append(content[i])
        i += 1

    return "".join(value_chars).strip(), i


def _strip_braces(value: Scalar) -> Scalar:
    if isinstance(value, str):
        return value.replace("{", "").replace("}", "")
    return value


def _build_entry(entry_type: str, citekey: str, fields: list[tuple[str, Scalar]]) -> BibEntry:
    values: dict[str, Scalar] = {}
    extra: dict[str, Scalar] = {}
    author = ()

    for name, value in fields:
        if name == "author":
            author = tuple(parse_people_string(str(value)))
        elif name in ENTRY_FIELDS:
            values.setdefault(name, _strip_braces(value))
        else:
            extra.setdefault(name, _strip_braces(value))

    # DOIs are identifiers even when written as bare digits
    if "doi" in values:
        values["doi"] = str(values["doi"])

    return BibEntry(
        bibtype=entry_type,
        key=citekey or None,
        author=author,
        extra=extra,
        **values,
    )
