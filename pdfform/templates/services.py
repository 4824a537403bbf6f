# pdfform/templates/services.py

"""
Business logic for the template store: upload, list, introspect and delete.
"""

import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from fastapi import Depends

from pdfform.forms.exceptions import DocumentLoadError
from pdfform.forms.introspection import inspect_template, list_fields
from pdfform.forms.schemas import FieldsReport, UploadedTemplateReport
from pdfform.templates.exceptions import InvalidTemplateError
from pdfform.templates.storage import TemplateStore, get_template_store
from pdfform.utils.file_utils import validate_file
from pdfform.utils.logger import get_logger

logger = get_logger(__name__)


def generate_template_name(original_name: str, now: Optional[datetime] = None) -> str:
    """
    Build the stored name for an upload: original stem, UTC timestamp to the
    second and a random suffix, keeping the original extension, e.g.
    "w9.pdf" -> "w9-2024-05-01-08-30-15-3f9c2a1b.pdf".
    """
    now = now or datetime.now(timezone.utc)
    path = Path(Path(original_name).name)
    stem = path.stem.replace(" ", "_") or "template"
    timestamp = now.strftime("%Y-%m-%d-%H-%M-%S")
    return f"{stem}-{timestamp}-{uuid.uuid4().hex[:8]}{path.suffix.lower()}"


class TemplateService:
    """Service for managing stored PDF templates"""

    def __init__(self, store: TemplateStore = Depends(get_template_store)):
        self.store = store

    def upload_template(self, upload_name: Optional[str], data: bytes) -> UploadedTemplateReport:
        """
        Validate and store an uploaded template, returning its fields.

        Nothing is stored when the upload is not a PDF with a fillable form.
        """
        is_valid, error = validate_file(upload_name, data)
        if not is_valid:
            raise InvalidTemplateError(error, upload_name)

        try:
            fields = list_fields(data, upload_name)
        except DocumentLoadError as e:
            raise InvalidTemplateError("Uploaded file is not a fillable PDF form.", upload_name) from e

        file_name = generate_template_name(upload_name)
        self.store.put(file_name, data, original_name=upload_name)
        logger.info("Stored template", file_name=file_name, original_name=upload_name, field_count=len(fields))

        return UploadedTemplateReport(file_name=file_name, original_name=upload_name, field=fields)

    def list_templates(self) -> List[str]:
        """All stored template file names"""
        return self.store.list()

    def get_template_fields(self, file_name: str) -> FieldsReport:
        """
        Fields of a stored template.

        Raises:
            TemplateNotFoundError: no such template.
            DocumentLoadError: the stored file is not a readable PDF form.
        """
        return inspect_template(self.store.get(file_name), file_name)

    def delete_template(self, file_name: str) -> None:
        self.store.delete(file_name)
        logger.info("Deleted template", file_name=file_name)
