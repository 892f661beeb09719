"""Drive an external AI coding CLI through monorepo setup and pattern guides."""

__version__ = "0.1.0"
