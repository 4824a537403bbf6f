# pdfform/forms/router.py

from fastapi import APIRouter, Depends, HTTPException, Response, status

from pdfform.forms.exceptions import FormBaseException, convert_to_http_exception
from pdfform.forms.schemas import RenderRequest
from pdfform.forms.services import RenderService
from pdfform.templates.exceptions import TemplateBaseException, TemplateNotFoundError
from pdfform.templates.exceptions import convert_to_http_exception as template_http_exception
from pdfform.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(tags=["Forms"])


@router.post(
    "/renderPdf",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "Returns the filled PDF."},
        404: {"description": "File not found."},
        422: {"description": "Request body is invalid."},
        500: {"description": "Failed to process the PDF."},
    },
)
def render_pdf(request: RenderRequest, render_service: RenderService = Depends()):
    """Fill a PDF template with the provided field data and return it flattened."""
    try:
        filled, output_name = render_service.render(request.file_name, request.field)
    except TemplateNotFoundError as e:
        raise template_http_exception(e) from e
    except FormBaseException as e:
        logger.error(
            "Error processing the PDF",
            file_name=request.file_name,
            error_type=type(e).__name__,
            error_message=e.message,
            error_details=e.details,
        )
        raise convert_to_http_exception(e) from e
    except TemplateBaseException as e:
        logger.error("Error reading template", file_name=request.file_name, error_message=e.message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to process the PDF."
        ) from e

    return Response(
        content=filled,
        media_type="application/pdf",
        headers={"Content-Disposition": f"inline; filename={output_name}"},
    )
