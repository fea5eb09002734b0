"""Concrete presentation layers; the arcade window is imported lazily by the app."""
from .console import ConsoleFrontend

__all__ = ["ConsoleFrontend"]
