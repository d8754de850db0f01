"""NFDNS — a registry of unique, ownable tokens."""

__version__ = "0.1.0"
