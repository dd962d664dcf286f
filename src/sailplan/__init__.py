"""
Core package for the sail-plan advisor.
"""

from importlib import metadata as _metadata

try:
    __version__ = _metadata.version("sailplan")
except _metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = ["__version__"]
