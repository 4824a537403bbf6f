# pdfform/forms/services.py

import time
from typing import Iterable, Tuple

from fastapi import Depends

from pdfform.core.config import settings
from pdfform.forms.engine import fill_template
from pdfform.forms.schemas import FormField
from pdfform.templates.storage import TemplateStore, get_template_store
from pdfform.utils.logger import get_logger

logger = get_logger(__name__)


class RenderService:
    """Fills stored templates. Output is returned to the caller and never stored."""

    def __init__(self, store: TemplateStore = Depends(get_template_store)):
        self.store = store

    def render(self, file_name: str, fields: Iterable[FormField]) -> Tuple[bytes, str]:
        """
        Fill the named template.

        Returns:
            The filled PDF bytes and the download name "filled-<epoch ms>.pdf".
        """
        template_bytes = self.store.get(file_name)
        filled = fill_template(template_bytes, fields, settings.fill_font_path, file_name=file_name)
        return filled, f"filled-{int(time.time() * 1000)}.pdf"
