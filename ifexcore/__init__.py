"""IFEX interface parsing, parameter validation and service data model."""

__version__ = "0.1.0"

__all__ = ["parser", "types"]