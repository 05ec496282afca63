"""Impostor party game service"""

__version__ = "1.0.0"
