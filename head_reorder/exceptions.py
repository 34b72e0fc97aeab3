"""
Custom exceptions for the head reorderer.

Error philosophy:
  - InvalidHeadError   → FAIL HARD: there is no head to reorder (None, or a
                         document without a <head>). Raised before anything
                         is mutated.
  - DocumentParseError → FAIL HARD: every parser in the fallback chain failed.

Classification never raises. Children with unexpected tags or missing
attributes fall into the "other" bucket instead.
"""

from typing import Optional


class HeadReorderError(Exception):
    """Base exception for all head reorderer errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_response(self) -> dict:
        """Error entry in the shape the CLI reports per file."""
        return {
            "status": "error",
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details
        }


class InvalidHeadError(HeadReorderError):
    """Raised when reorder is asked to work on a missing head."""
    pass


class DocumentParseError(HeadReorderError):
    """
    Raised when HTML cannot be turned into a tree.

    Carries the name of every parser that was tried, in order.
    """

    def __init__(
        self,
        message: str,
        parsers_tried: Optional[list[str]] = None,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        self.parsers_tried = parsers_tried or []
