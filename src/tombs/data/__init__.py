"""Bundled data files (JSON Schemas)."""
