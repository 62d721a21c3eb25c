"""Auto-generated citations for installed distributions.

Mirrors what a package citation looks like when the package declares none:
a single ``Manual`` entry built from the distribution metadata. Distribution
metadata carries no release date, so the entry has no year.
"""

import importlib.metadata
from email.utils import getaddresses

from citemeta.models import BibEntry, Person
from citemeta.parse.names import parse_name, parse_people_string

__all__ = ["installed_citation", "is_installed"]


def is_installed(dist_name: str) -> bool:
    """Whether a distribution is installed in the running environment."""
    try:
        importlib.metadata.distribution(dist_name)
    except (importlib.metadata.PackageNotFoundError, ValueError):
        return False
    return True


def installed_citation(dist_name: str) -> list[BibEntry]:
    """Build the citation of an installed distribution from its metadata.

    Parameters
    ----------
    dist_name : str
        Distribution name (e.g. "click").

    Returns
    -------
    list[BibEntry]
        One ``Manual`` entry.

    Raises
    ------
    importlib.metadata.PackageNotFoundError
        If the distribution is not installed.
    """
    metadata = importlib.metadata.metadata(dist_name)

    name = metadata.get("Name") or dist_name
    summary = metadata.get("Summary")
    version = metadata.get("Version")

    return [
        BibEntry(
            bibtype="Manual",
            key=name,
            title=f"{name}: {summary}" if summary else name,
            author=tuple(_authors(metadata.get("Author"), metadata.get("Author-email"))),
            note=f"Python package version {version}" if version else None,
            url=_home_page(metadata.get("Home-page"), metadata.get_all("Project-URL") or []),
        )
    ]


def _authors(author: str | None, author_email: str | None) -> list[Person]:
    if author_email:
        people = []
        for display, address in getaddresses([author_email]):
            person = parse_name(display) if display else Person()
            people.append(Person(given=person.given, family=person.family, email=address or None))
        return people
    if author:
        return parse_people_string(author)
    return []


def _home_page(home_page: str | None, project_urls: list[str]) -> str | None:
    if home_page and home_page.upper() != "UNKNOWN":
        return home_page
    for entry in project_urls:
        _, _, url = entry.partition(",")
        if url.strip():
            return url.strip()
    return None
