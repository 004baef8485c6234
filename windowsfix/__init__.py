"""Terminal menu for one-shot Windows Explorer maintenance tweaks."""

from windowsfix.__version__ import __version__

__all__ = ["__version__"]
