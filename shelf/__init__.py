"""shelf - release store for pre-built package bundles."""

__version__ = "1.0.0"
