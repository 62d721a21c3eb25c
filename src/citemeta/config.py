"""Conversion configuration."""

from dataclasses import asdict, dataclass
from typing import Any

DOI_BASE_URL = "https://doi.org/"

DEFAULT_CITATION_PATHS = ("inst/CITATION", "CITATION", "CITATION.bib")


@dataclass(frozen=True)
class CitationConfig:
    """Configuration for citation lookup and conversion.

    Attributes
    ----------
    doi_base_url : str
        Canonical DOI resolver base URL, ending with a slash.
    default_encoding : str
        Encoding used for citation files that declare none.
    citation_paths : tuple[str, ...]
        Candidate citation file locations relative to a package root,
        in lookup order.
    description_file : str
        Package metadata file relative to a package root.
    """

    doi_base_url: str = DOI_BASE_URL
    default_encoding: str = "utf-8"
    citation_paths: tuple[str, ...] = DEFAULT_CITATION_PATHS
    description_file: str = "DESCRIPTION"

    def __post_init__(self) -> None:
        """Validate settings."""
        if not self.doi_base_url.startswith(("http://", "https://")):
            raise ValueError(f"doi_base_url must be an http(s) URL, got {self.doi_base_url!r}")

        if not self.doi_base_url.endswith("/"):
            raise ValueError(f"doi_base_url must end with '/', got {self.doi_base_url!r}")

        if not self.citation_paths:
            raise ValueError("citation_paths must not be empty")

        # Accept lists from callers; keep the instance hashable
        object.__setattr__(self, "citation_paths", tuple(self.citation_paths))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["citation_paths"] = list(self.citation_paths)
        return data


DEFAULT_CONFIG = CitationConfig()
