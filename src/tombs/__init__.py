"""
Tombs of the Ancient Kings package root.

Core gameplay (generation, entities, combat, AI, items, turn control and
persistence) lives here as pure Python. Rendering and input are reached only
through the protocols in :mod:`tombs.interfaces`.
"""
from importlib.metadata import version, PackageNotFoundError

__all__ = ["__version__"]

try:
    __version__ = version("tombs")
except PackageNotFoundError:  # pragma: no cover - during tests without packaging
    __version__ = "0.0.0"
