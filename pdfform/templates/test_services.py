from datetime import datetime, timezone

import pytest

from pdfform.templates.exceptions import InvalidTemplateError, TemplateNotFoundError
from pdfform.templates.services import TemplateService, generate_template_name
from pdfform.testing_dependencies import plain_pdf_bytes, template_bytes, template_store


def test_generated_name_keeps_stem_and_extension():
    name = generate_template_name("W9 Form.PDF", datetime(2024, 5, 1, 8, 30, 15, tzinfo=timezone.utc))
    assert name.startswith("W9_Form-2024-05-01-08-30-15-")
    assert name.endswith(".pdf")


def test_generated_names_differ_within_the_same_second():
    now = datetime(2024, 5, 1, 8, 30, 15, tzinfo=timezone.utc)
    names = {generate_template_name("form.pdf", now) for _ in range(50)}
    assert len(names) == 50


def test_generated_name_drops_directories():
    name = generate_template_name("../../etc/form.pdf")
    assert "/" not in name
    assert name.startswith("form-")


def test_upload_stores_template_and_reports_fields(template_store, template_bytes):
    service = TemplateService(store=template_store)
    report = service.upload_template("form.pdf", template_bytes)

    assert report.original_name == "form.pdf"
    assert template_store.list() == [report.file_name]
    assert template_store.get(report.file_name) == template_bytes
    assert [f.field_id for f in report.field] == ["Name", "Comments", "Agree"]


@pytest.mark.parametrize("upload_name, data", [
    ("notes.txt", b"%PDF-1.4"),
    ("form", b"%PDF-1.4"),
    ("form.pdf", b""),
    ("form.pdf", b"PK\x03\x04 zip, not pdf"),
    (None, b"%PDF-1.4"),
])
def test_upload_rejects_invalid_files(template_store, upload_name, data):
    service = TemplateService(store=template_store)
    with pytest.raises(InvalidTemplateError):
        service.upload_template(upload_name, data)
    assert template_store.list() == []


def test_upload_rejects_pdf_without_form(template_store, plain_pdf_bytes):
    service = TemplateService(store=template_store)
    with pytest.raises(InvalidTemplateError) as exc_info:
        service.upload_template("plain.pdf", plain_pdf_bytes)
    assert exc_info.value.message == "Uploaded file is not a fillable PDF form."
    assert template_store.list() == []


def test_upload_rejects_oversized_files(template_store, template_bytes, monkeypatch):
    from pdfform.core.config import settings

    monkeypatch.setattr(settings, "allowed_file_size", 1)
    service = TemplateService(store=template_store)
    with pytest.raises(InvalidTemplateError):
        service.upload_template("form.pdf", template_bytes + b"\0" * 2048)


def test_delete_then_fetch_is_not_found(template_store, template_bytes):
    service = TemplateService(store=template_store)
    file_name = service.upload_template("form.pdf", template_bytes).file_name

    service.delete_template(file_name)
    with pytest.raises(TemplateNotFoundError):
        service.get_template_fields(file_name)
    with pytest.raises(TemplateNotFoundError):
        service.delete_template(file_name)
