"""Command line interface for fieldgen."""

from fieldgen import __version__

__all__ = ["__version__"]
