# pdfform/utils/file_utils.py

import os
from typing import Tuple, Optional

from pdfform.core.config import settings

PDF_MAGIC = b"%PDF-"


def validate_file(file_name: Optional[str], data: bytes) -> Tuple[bool, Optional[str]]:
    """
    Validates an uploaded file's type and size based on application settings.

    Args:
        file_name: Name the file was uploaded as.
        data: The uploaded content.

    Returns:
        A tuple containing a boolean (True if valid) and an optional error message string.
    """
    if not file_name:
        return False, "Please upload a file!"

    # 1. Validate file type based on extension
    allowed_types = {ext.strip().lower() for ext in settings.allowed_file_types.split(',') if ext.strip()}
    file_ext = os.path.splitext(file_name)[1].lower().lstrip('.')

    if not file_ext:
        return False, "File must have an extension."

    if file_ext not in allowed_types:
        return False, f"File type '.{file_ext}' is not allowed. The allowed types are: {', '.join(sorted(allowed_types))}."

    # 2. Validate file size, allowed_file_size is in Kilobytes (KB)
    if not data:
        return False, "Uploaded file is empty."

    max_size_in_bytes = settings.allowed_file_size * 1024
    if len(data) > max_size_in_bytes:
        return False, f"File size of {len(data) / 1024:.2f} KB exceeds the maximum allowed size of {settings.allowed_file_size} KB."

    # 3. Validate content signature
    if file_ext == "pdf" and PDF_MAGIC not in data[:1024]:
        return False, "File is not a PDF document."

    return True, None
