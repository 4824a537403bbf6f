# pdfform/forms/fields.py

"""
Field kinds recognised by the service.

A field is classified once, from the runtime type of the widget the PDF
library builds for it, into TEXT, CHECKBOX or UNSUPPORTED(type name). The
fill engine reuses that classification instead of re-inspecting type names.
"""

from enum import Enum as PyEnum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict

UNNAMED_FIELD = "[Unnamed Field]"


class FieldType(str, PyEnum):
    """Field types that can be filled"""
    TEXT = "text"
    CHECKBOX = "checkbox"


# Widget class names of the PDF library
_WIDGET_TYPES = {
    "Text": FieldType.TEXT,
    "Checkbox": FieldType.CHECKBOX,
}

# Wire names accepted on fill requests, including the legacy names clients
# of the first API version send.
_REQUEST_TYPES = {
    "text": FieldType.TEXT,
    "checkbox": FieldType.CHECKBOX,
    "PDFTextField": FieldType.TEXT,
    "PDFCheckBox": FieldType.CHECKBOX,
}


class FieldKind(BaseModel):
    """Kind of a form field: a supported FieldType or an unsupported widget type name."""
    model_config = ConfigDict(frozen=True)

    field_type: Optional[FieldType] = None
    type_name: str

    @classmethod
    def of(cls, field_type: FieldType) -> "FieldKind":
        return cls(field_type=field_type, type_name=field_type.value)

    @classmethod
    def unsupported(cls, type_name: str) -> "FieldKind":
        return cls(field_type=None, type_name=type_name)

    @property
    def is_supported(self) -> bool:
        return self.field_type is not None

    @property
    def default_value(self) -> Union[str, bool, None]:
        """Value reported by introspection and used for fields a fill leaves out."""
        if self.field_type is FieldType.TEXT:
            return ""
        if self.field_type is FieldType.CHECKBOX:
            return False
        return None


def classify_widget(widget: Any) -> FieldKind:
    """Classify a widget by its exact runtime type."""
    type_name = type(widget).__name__
    field_type = _WIDGET_TYPES.get(type_name)
    if field_type is None:
        return FieldKind.unsupported(type_name)
    return FieldKind.of(field_type)


def parse_requested_type(field_type: Optional[str]) -> Optional[FieldType]:
    """Map a fieldType from a fill request to a FieldType, None if unsupported."""
    if not field_type:
        return None
    return _REQUEST_TYPES.get(field_type, _REQUEST_TYPES.get(field_type.lower()))


def field_display_name(name: Optional[str]) -> str:
    return name or UNNAMED_FIELD
