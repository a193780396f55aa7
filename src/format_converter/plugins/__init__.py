"""Converter plugin contract and in-memory index."""

from .base import ConverterPlugin
from .registry import ConverterIndex

__all__ = ["ConverterPlugin", "ConverterIndex"]
