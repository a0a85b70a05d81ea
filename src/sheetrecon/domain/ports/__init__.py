"""Domain port definitions for adapters."""

from __future__ import annotations

from .spreadsheets import SpreadsheetReader, SpreadsheetWriter

__all__ = ["SpreadsheetReader", "SpreadsheetWriter"]
