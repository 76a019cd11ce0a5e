"""Utility functions for the Query String Transformer."""

from .validation import ValidationUtils

__all__ = ["ValidationUtils"]
