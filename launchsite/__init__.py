"""Launch site feasibility analysis service."""

__version__ = "0.1.0"
