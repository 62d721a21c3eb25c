"""DOI to resolver URL canonicalization."""

import re

from citemeta.config import DOI_BASE_URL

__all__ = ["BARE_DOI_RE", "to_url_doi_or_none"]

BARE_DOI_RE = re.compile(r"^10\.")


def to_url_doi_or_none(doi: str | None, base_url: str = DOI_BASE_URL) -> str | None:
    """Convert a DOI to a canonical resolver URL.

    Parameters
    ----------
    doi : str | None
        DOI as declared: a resolver URL, a bare DOI ("10.xxxx/...") or
        anything else. Non-string values are never recognized.
    base_url : str, optional
        Resolver base URL, by default "https://doi.org/".

    Returns
    -------
    str | None
        The URL unchanged if it already starts with ``base_url``; the
        base URL joined with the DOI if it is bare; None otherwise.

    Examples
    --------
        >>> to_url_doi_or_none("10.1000/xyz")
        'https://doi.org/10.1000/xyz'
        >>> to_url_doi_or_none("doi:10.1000/xyz") is None
        True
    """
    if not isinstance(doi, str):
        return None

    if doi.startswith(base_url):
        return doi

    if BARE_DOI_RE.match(doi):
        return f"{base_url}{doi}"

    return None
