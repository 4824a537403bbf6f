import logging
from io import BytesIO
from typing import Dict, Iterable, List, Optional

import pytest
from fastapi.testclient import TestClient
from pypdf import PdfReader
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from .core.config import settings
from .main import pdf_app as fast_api_app, rate_limiter
from .templates.storage import InMemoryTemplateStore, get_template_store

logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)

FONT_PATH = settings.fill_font_path


def build_form_pdf(
    text_fields: Iterable[str] = ("Name", "Comments"),
    checkboxes: Iterable[str] = ("Agree",),
    choices: Iterable[str] = (),
) -> bytes:
    """Build a one page AcroForm PDF with the given fields, in that order."""
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=letter)
    form = pdf.acroForm
    y = 700

    for name in text_fields:
        pdf.drawString(72, y + 6, name)
        form.textfield(name=name, tooltip=name, x=200, y=y, width=250, height=20, forceBorder=True)
        y -= 40

    for name in checkboxes:
        pdf.drawString(72, y + 6, name)
        form.checkbox(name=name, tooltip=name, x=200, y=y, size=20, buttonStyle="check", checked=False)
        y -= 40

    for name in choices:
        pdf.drawString(72, y + 6, name)
        form.choice(name=name, tooltip=name, value="A", options=["A", "B", "C"], x=200, y=y, width=120, height=20)
        y -= 40

    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def build_plain_pdf() -> bytes:
    """A valid PDF without any form."""
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=letter)
    pdf.drawString(72, 720, "No form on this page")
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def form_fields(pdf_bytes: bytes) -> Dict[str, Optional[str]]:
    """Field name -> /V of a PDF, empty when no form is left."""
    fields = PdfReader(BytesIO(pdf_bytes)).get_fields() or {}
    return {name: field.get("/V") for name, field in fields.items()}


def widget_count(pdf_bytes: bytes) -> int:
    """Number of form widget annotations left on all pages."""
    count = 0
    for page in PdfReader(BytesIO(pdf_bytes)).pages:
        for annot in page.get("/Annots") or []:
            if annot.get_object().get("/Subtype") == "/Widget":
                count += 1
    return count


def page_text(pdf_bytes: bytes) -> str:
    """Extracted text of every page, joined."""
    return "\n".join(page.extract_text() for page in PdfReader(BytesIO(pdf_bytes)).pages)


def page_font_names(pdf_bytes: bytes) -> List[str]:
    """Base font names referenced by the page resources."""
    names = []
    for page in PdfReader(BytesIO(pdf_bytes)).pages:
        resources = page.get("/Resources")
        fonts = resources.get_object().get("/Font") if resources is not None else None
        if fonts is None:
            continue
        for font in fonts.get_object().values():
            names.append(str(font.get_object().get("/BaseFont")))
    return names


@pytest.fixture
def template_bytes():
    return build_form_pdf()


@pytest.fixture
def plain_pdf_bytes():
    return build_plain_pdf()


@pytest.fixture
def template_store():
    return InMemoryTemplateStore()


@pytest.fixture
def client(template_store):

    # Override the store dependency with an in-memory store
    def override_get_template_store():
        return template_store

    fast_api_app.dependency_overrides[get_template_store] = override_get_template_store
    rate_limiter.reset()
    yield TestClient(fast_api_app)

    fast_api_app.dependency_overrides.clear()
    rate_limiter.reset()
