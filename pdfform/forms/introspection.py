# pdfform/forms/introspection.py

from typing import List, Optional

from pdfform.forms.document import field_kinds, load_form
from pdfform.forms.fields import field_display_name
from pdfform.forms.schemas import FieldsReport, FormField
from pdfform.utils.logger import get_logger

logger = get_logger(__name__)


def list_fields(template_bytes: bytes, file_name: Optional[str] = None) -> List[FormField]:
    """
    Report the form fields of a PDF in document order.

    Stored values are not read: text fields report "", checkboxes False and
    unsupported kinds their widget type name with no value.

    Raises:
        DocumentLoadError: the bytes are not a PDF form.
    """
    form = load_form(template_bytes, file_name)
    fields = [
        FormField(
            field_id=field_display_name(name),
            field_type=kind.type_name,
            value=kind.default_value,
        )
        for name, kind in field_kinds(form).items()
    ]
    logger.info("Inspected PDF form", file_name=file_name, field_count=len(fields))
    return fields


def inspect_template(template_bytes: bytes, file_name: str) -> FieldsReport:
    """Fields report for a stored template."""
    return FieldsReport(file_name=file_name, field=list_fields(template_bytes, file_name))
