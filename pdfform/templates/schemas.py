# pdfform/templates/schemas.py

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Schema for plain acknowledgement responses."""
    message: str
