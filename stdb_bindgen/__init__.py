"""SpacetimeDB client binding generator."""

__version__ = "0.1.0"
