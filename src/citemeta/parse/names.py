"""Person name string parsing.

Handles the two common spellings found in citation files:

- "Family, Given" and "Given Family" (BibTeX author fields)
- "Given Family <email> [role, role] (comment)" (R ``as.person`` strings)

Braces protect a name from splitting: ``{R Core Team}`` is one
organization name.
"""

import re

from citemeta.models import Person

__all__ = ["parse_name", "parse_people_string", "split_names"]

_AND_RE = re.compile(r"\s+and\s+")
_EMAIL_RE = re.compile(r"<([^>]*)>")
_ROLE_RE = re.compile(r"\[([^\]]*)\]")
_COMMENT_RE = re.compile(r"\(([^)]*)\)")
_ORCID_RE = re.compile(r"(\d{4}-\d{4}-\d{4}-\d{3}[\dX])")


def split_names(value: str) -> list[str]:
    """Split an author field on ' and ', ignoring brace-protected text."""
    names: list[str] = []
    depth = 0
    start = 0
    i = 0
    while i < len(value):
        char = value[i]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        elif depth == 0:
            match = _AND_RE.match(value, i)
            if match and i > start:
                names.append(value[start:i])
                start = i = match.end()
                continue
        i += 1
    names.append(value[start:])
    return [name.strip() for name in names if name.strip()]


def parse_name(text: str) -> Person:
    """Parse one name with optional email, roles and comment.

    Parameters
    ----------
    text : str
        Single name, e.g. "Carl Boettiger <cb@example.org> [aut, cre]".

    Returns
    -------
    Person
        Parsed person; a brace-protected or single-word name is an
        organization (family only).
    """
    email = None
    role: tuple[str, ...] = ()
    comment: dict[str, str] = {}

    match = _EMAIL_RE.search(text)
    if match:
        email = match.group(1).strip() or None
        text = text[: match.start()] + text[match.end() :]

    match = _ROLE_RE.search(text)
    if match:
        role = tuple(r.strip() for r in match.group(1).split(",") if r.strip())
        text = text[: match.start()] + text[match.end() :]

    match = _COMMENT_RE.search(text)
    if match:
        orcid = _ORCID_RE.search(match.group(1))
        if orcid:
            comment["ORCID"] = orcid.group(1)
        text = text[: match.start()] + text[match.end() :]

    text = " ".join(text.split())

    if text.startswith("{") and text.endswith("}"):
        return Person(family=text[1:-1].strip(), email=email, role=role, comment=comment)

    text = text.replace("{", "").replace("}", "")

    if "," in text:
        family, _, given = text.partition(",")
        return Person(
            given=tuple(given.split()),
            family=family.strip() or None,
            email=email,
            role=role,
            comment=comment,
        )

    parts = text.split()
    if len(parts) <= 1:
        return Person(family=text or None, email=email, role=role, comment=comment)

    return Person(
        given=tuple(parts[:-1]),
        family=parts[-1],
        email=email,
        role=role,
        comment=comment,
    )


def parse_people_string(value: str) -> list[Person]:
    """Parse an ' and '-separated list of names."""
    return [parse_name(name) for name in split_names(value)]
