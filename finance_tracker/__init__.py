"""Small-business finance tracker backend."""

__version__ = "0.1.0"
