"""trendscout: answers questions about trending GitHub repositories."""

from trendscout.version import __version__

__all__ = ["__version__"]
