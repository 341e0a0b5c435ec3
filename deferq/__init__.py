"""In-memory delayed work queue served over a line-based TCP protocol."""

__version__ = "0.1.0"
__all__ = ["__version__"]