"""Localised string tables, search, C++ struct declaration reading and save-file sections."""

__version__ = "0.1.0"