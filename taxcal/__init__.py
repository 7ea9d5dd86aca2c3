"""Tax Cal - Per-country income tax calculation."""

__version__ = "0.1.0"
