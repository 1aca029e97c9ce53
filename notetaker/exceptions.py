"""
NoteTaker Backend: Exception Hierarchy
=======================================

What:  Application exceptions raised by the persistence layer and request
       parsing.
How:   Each exception carries a message and an optional context dict. The
       failure policy registered in main.py catches them and answers with a
       fixed 500 response; message and context only reach the server log.

Exception Hierarchy:
    NoteTakerError (base)
    ├── DatabaseError       → store unreachable, statement rejected, bad key
    └── RequestBodyError    → request body could not be decoded

    Every member maps to the same client response (HTTP 500, fixed text).
"""

from typing import Any, Dict, Optional


class NoteTakerError(Exception):
    """
    Base exception for all NoteTaker application errors.

    Attributes:
        message:  Short description for the server log
        context:  Additional debug info (logged, never returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class DatabaseError(NoteTakerError):
    """
    Raised when a database operation fails.

    When:    Connection lost, statement rejected by the store, a lookup key
             that cannot be bound to the integer id column.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RequestBodyError(NoteTakerError):
    """Raised when a POST body is neither valid JSON nor a decodable form."""

    def __init__(
        self,
        message: str = "Request body could not be parsed",
        content_type: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if content_type:
            ctx["content_type"] = content_type
        super().__init__(message=message, context=ctx)
        self.content_type = content_type
