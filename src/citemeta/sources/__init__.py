"""Citation sources other than citation files."""

from citemeta.sources.installed import installed_citation, is_installed

__all__ = ["installed_citation", "is_installed"]
