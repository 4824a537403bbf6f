# pdfform/templates/exceptions.py

"""
Custom exceptions for the template store.
"""

from typing import Optional
from fastapi import HTTPException, status


class TemplateBaseException(Exception):
    """Base exception for all template store errors."""
    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class TemplateNotFoundError(TemplateBaseException):
    """Raised when a template file name is not present in the store."""
    def __init__(self, file_name: str):
        super().__init__("File not found.", {"file_name": file_name})


class InvalidTemplateError(TemplateBaseException):
    """Raised when an uploaded file is rejected."""
    def __init__(self, message: str, file_name: Optional[str] = None):
        super().__init__(message, {"file_name": file_name})


class DirectoryReadError(TemplateBaseException):
    """Raised when the store cannot be listed or read."""
    def __init__(self, reason: str):
        super().__init__("Failed to read directory", {"reason": reason})


class DirectoryWriteError(TemplateBaseException):
    """Raised when the store cannot be written to or deleted from."""
    def __init__(self, reason: str, file_name: Optional[str] = None):
        super().__init__("Failed to write to directory", {"reason": reason, "file_name": file_name})


def convert_to_http_exception(exc: TemplateBaseException) -> HTTPException:
    """
    Convert a TemplateBaseException to an HTTPException with appropriate status code.

    Args:
        exc: The template exception to convert

    Returns:
        HTTPException with appropriate status code and detail
    """
    if isinstance(exc, TemplateNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)
    elif isinstance(exc, InvalidTemplateError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)
    else:
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.message)
