# pdfform/forms/schemas.py

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class FormField(BaseModel):
    """A form field as reported by introspection or submitted in a fill request."""
    model_config = ConfigDict(populate_by_name=True)

    field_id: str = Field(alias="fieldID")
    field_type: str = Field(alias="fieldType")
    value: Optional[Union[bool, str, int, float]] = None


class FieldsReport(BaseModel):
    """Fields of one stored template."""
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(alias="fileName")
    field: List[FormField] = Field(default_factory=list)


class UploadedTemplateReport(FieldsReport):
    """Fields of a freshly uploaded template along with the name it was uploaded as."""
    original_name: Optional[str] = Field(default=None, alias="originalName")


class RenderRequest(BaseModel):
    """Schema for fill requests."""
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(alias="fileName", min_length=1)
    field: List[FormField] = Field(default_factory=list)
