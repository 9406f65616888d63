"""imgconv command line interface."""

from imgconv import __version__

__all__ = ["__version__"]
