# pdfform/forms/exceptions.py

"""
Custom exceptions for form introspection and filling.
"""

from typing import Optional
from fastapi import HTTPException, status


class FormBaseException(Exception):
    """Base exception for all form-related errors."""
    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class DocumentLoadError(FormBaseException):
    """Raised when the bytes are not a well-formed PDF or carry no interactive form."""
    def __init__(self, reason: str, file_name: Optional[str] = None):
        msg = f"Could not load PDF form: {reason}"
        super().__init__(msg, {"reason": reason, "file_name": file_name})


class FieldNotFoundError(FormBaseException):
    """Raised when a fill request references a field the template does not have."""
    def __init__(self, field_id: str):
        super().__init__(f"Field '{field_id}' not found in template", {"field_id": field_id})


class FieldTypeMismatchError(FormBaseException):
    """Raised when the requested field type disagrees with the field's actual kind."""
    def __init__(self, field_id: str, requested: str, actual: str):
        msg = f"Field '{field_id}' is a {actual} field, not {requested}"
        super().__init__(
            msg,
            {"field_id": field_id, "requested_type": requested, "actual_type": actual}
        )


class FontAssetMissingError(FormBaseException):
    """Raised when the bundled fill font cannot be read."""
    def __init__(self, font_path: str):
        super().__init__(f"Font asset not available: {font_path}", {"font_path": font_path})


class FormFillError(FormBaseException):
    """Raised when the PDF library fails while filling, flattening or saving."""
    def __init__(self, message: str, file_name: Optional[str] = None):
        super().__init__(message, {"file_name": file_name})


def convert_to_http_exception(exc: FormBaseException) -> HTTPException:
    """
    Convert a FormBaseException to an HTTPException.

    Every fill or load failure reaches the client as the same generic 500, the
    typed exception and its details are kept for the log.
    """
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Failed to process the PDF."
    )
