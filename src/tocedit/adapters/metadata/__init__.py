"""Metadata adapters."""

from .pdftk import PdftkAdapter

__all__ = ["PdftkAdapter"]
