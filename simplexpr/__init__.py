"""Dynamically typed string values, an expression syntax tree, and tray item helpers."""

__version__ = "0.1.0"
__all__ = ["ast", "dynval", "tray"]