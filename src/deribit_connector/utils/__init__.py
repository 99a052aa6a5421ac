"""Utility helpers."""

from .time import iso8601, milliseconds

__all__ = ["iso8601", "milliseconds"]
