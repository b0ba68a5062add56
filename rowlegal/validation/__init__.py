"""Legality checks for placed cells."""

from .legality import LegalityChecker, LegalityIssue

__all__ = ["LegalityChecker", "LegalityIssue"]
