# pdfform/templates/router.py

"""
FastAPI router for stored PDF templates.
"""

from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from pdfform.forms.exceptions import FormBaseException
from pdfform.forms.schemas import FieldsReport, UploadedTemplateReport
from pdfform.templates.exceptions import (
    TemplateBaseException, TemplateNotFoundError, convert_to_http_exception
)
from pdfform.templates.schemas import MessageResponse
from pdfform.templates.services import TemplateService
from pdfform.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(tags=["Templates"])


@router.post(
    "/files",
    response_model=UploadedTemplateReport,
    responses={400: {"description": "No file attached or the file is not a fillable PDF form."}},
)
def upload_template(
    pdf_file: UploadFile = File(default=None, alias="pdfFile", description="PDF form template"),
    template_service: TemplateService = Depends(),
):
    """Upload a PDF and get its fields"""
    if pdf_file is None or not pdf_file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Please upload a file!")

    try:
        data = pdf_file.file.read()
        return template_service.upload_template(pdf_file.filename, data)
    except TemplateBaseException as e:
        logger.error("Error uploading template", error_message=e.message, error_details=e.details)
        raise convert_to_http_exception(e) from e


@router.get(
    "/files",
    response_model=List[str],
    responses={500: {"description": "Failed to read directory."}},
)
def list_templates(template_service: TemplateService = Depends()):
    """Returns a list of files in the template store"""
    try:
        return template_service.list_templates()
    except TemplateBaseException as e:
        logger.error("Error listing templates", error_message=e.message, error_details=e.details)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to read directory"
        ) from e


@router.get(
    "/files/{file_name}",
    response_model=FieldsReport,
    responses={
        404: {"description": "File not found."},
        500: {"description": "Error reading the file."},
    },
)
def get_template_fields(file_name: str, template_service: TemplateService = Depends()):
    """Get form fields of a PDF by its filename"""
    try:
        return template_service.get_template_fields(file_name)
    except TemplateNotFoundError as e:
        raise convert_to_http_exception(e) from e
    except (TemplateBaseException, FormBaseException) as e:
        logger.error("Error reading PDF", file_name=file_name, error_message=e.message, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error reading the file."
        ) from e


@router.delete(
    "/files/{file_name}",
    response_model=MessageResponse,
    responses={
        404: {"description": "File not found."},
        500: {"description": "Error deleting the file."},
    },
)
def delete_template(file_name: str, template_service: TemplateService = Depends()):
    """Delete a file by its filename"""
    try:
        template_service.delete_template(file_name)
    except TemplateNotFoundError as e:
        raise convert_to_http_exception(e) from e
    except TemplateBaseException as e:
        logger.error("Error deleting file", file_name=file_name, error_message=e.message, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting the file."
        ) from e

    return MessageResponse(message="File deleted successfully.")
