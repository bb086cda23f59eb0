"""release-cli: track pull requests ported from trunk into stabilization branches."""

from .version import __version__

__all__ = ["__version__"]
