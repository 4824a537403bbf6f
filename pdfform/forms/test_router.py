from fastapi.testclient import TestClient

from pdfform.forms.engine import CHECK_MARK
from pdfform.testing_dependencies import (
    client, form_fields, page_text, template_bytes, template_store, widget_count
)
from pdfform.utils.logger import get_logger

logger = get_logger(__name__)

RENDER_URL = "/api/v1/renderPdf"


def test_render_pdf_success(client: TestClient, template_store, template_bytes):
    template_store.put("form.pdf", template_bytes)
    payload = {
        "fileName": "form.pdf",
        "field": [
            {"fieldID": "Name", "fieldType": "text", "value": "Jane"},
            {"fieldID": "Agree", "fieldType": "checkbox", "value": True},
        ],
    }

    response = client.post(RENDER_URL, json=payload)
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"].startswith("inline; filename=filled-")
    assert response.headers["content-disposition"].endswith(".pdf")

    assert form_fields(response.content) == {}
    assert widget_count(response.content) == 0
    text = page_text(response.content)
    assert "Jane" in text
    assert CHECK_MARK in text
    # The stored template is untouched
    assert template_store.get("form.pdf") == template_bytes


def test_render_pdf_template_not_found(client: TestClient):
    response = client.post(RENDER_URL, json={"fileName": "missing.pdf", "field": []})
    logger.info(response.json())
    assert response.status_code == 404
    assert response.json() == {"detail": "File not found."}


def test_render_pdf_unknown_field(client: TestClient, template_store, template_bytes):
    template_store.put("form.pdf", template_bytes)
    payload = {"fileName": "form.pdf", "field": [{"fieldID": "Nope", "fieldType": "text", "value": "x"}]}

    response = client.post(RENDER_URL, json=payload)
    logger.info(response.json())
    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to process the PDF."}


def test_render_pdf_type_mismatch(client: TestClient, template_store, template_bytes):
    template_store.put("form.pdf", template_bytes)
    payload = {"fileName": "form.pdf", "field": [{"fieldID": "Agree", "fieldType": "text", "value": "x"}]}

    response = client.post(RENDER_URL, json=payload)
    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to process the PDF."}


def test_render_pdf_broken_template(client: TestClient, template_store):
    template_store.put("broken.pdf", b"%PDF-1.7 truncated")

    response = client.post(RENDER_URL, json={"fileName": "broken.pdf", "field": []})
    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to process the PDF."}


def test_render_pdf_requires_file_name(client: TestClient):
    response = client.post(RENDER_URL, json={"field": []})
    assert response.status_code == 422
