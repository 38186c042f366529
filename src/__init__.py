"""treesum: concurrent checksum scanner for deployment trees."""

from treesum.version import __version__

__all__ = ["__version__"]
