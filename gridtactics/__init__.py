"""Turn-based tactical grid simulation core."""

__version__ = "0.1.0"
