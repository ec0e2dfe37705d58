"""Output writers."""

from .csv import CSVWriter

__all__ = ["CSVWriter"]
