## pdfform/core/security.py

import hmac
from typing import Optional

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader, APIKeyQuery

from pdfform.core.config import settings
from pdfform.utils.logger import get_logger

logger = get_logger(__name__)

api_key_header = APIKeyHeader(name="x-api-key", auto_error=False)
api_key_query = APIKeyQuery(name="api_key", auto_error=False)


def verify_api_key(
    header_key: Optional[str] = Security(api_key_header),
    query_key: Optional[str] = Security(api_key_query),
) -> None:
    """
    Check the `x-api-key` header or `api_key` query parameter against the
    configured secret. Only enforced when `api_key_required` is set.
    """
    if not settings.api_key_required:
        return

    api_key = header_key or query_key
    if not api_key or not settings.api_key or not hmac.compare_digest(api_key, settings.api_key):
        logger.warning("Rejected request with missing or invalid API key")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
