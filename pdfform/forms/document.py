# pdfform/forms/document.py

"""
Loading of PDF form documents.

pypdf validates the raw structure and the presence of an AcroForm, PyPDFForm
provides the widget model used to classify fields.
"""

from io import BytesIO
from typing import Dict, Optional

from pypdf import PdfReader
from PyPDFForm import PdfWrapper

from pdfform.forms.exceptions import DocumentLoadError
from pdfform.forms.fields import FieldKind, classify_widget
from pdfform.utils.logger import get_logger

logger = get_logger(__name__)


def load_form(template_bytes: bytes, file_name: Optional[str] = None) -> PdfWrapper:
    """
    Load a PDF with an interactive form.

    Args:
        template_bytes: Raw PDF content.
        file_name: Name used in log records and error details.

    Returns:
        PdfWrapper around a copy of the bytes. The caller's bytes are never modified.

    Raises:
        DocumentLoadError: the bytes are not a PDF or the PDF has no form fields.
    """
    if not template_bytes:
        raise DocumentLoadError("document is empty", file_name)

    try:
        reader = PdfReader(BytesIO(template_bytes), strict=False)
        acro_fields = reader.get_fields()
    except Exception as e:
        logger.error("Error reading PDF structure", file_name=file_name, error=str(e))
        raise DocumentLoadError(str(e) or type(e).__name__, file_name) from e

    if not acro_fields:
        raise DocumentLoadError("document has no interactive form", file_name)

    try:
        form = PdfWrapper(bytes(template_bytes))
        widgets = form.widgets
    except Exception as e:
        logger.error("Error building form widgets", file_name=file_name, error=str(e), exc_info=True)
        raise DocumentLoadError(str(e) or type(e).__name__, file_name) from e

    if not widgets:
        raise DocumentLoadError("document has no fillable widgets", file_name)

    return form


def field_kinds(form: PdfWrapper) -> Dict[str, FieldKind]:
    """Field name -> kind, in the order the document stores its widgets."""
    return {name: classify_widget(widget) for name, widget in form.widgets.items()}
