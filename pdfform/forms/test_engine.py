import pytest

from pdfform.forms.engine import CHECK_MARK, fill_template, load_font
from pdfform.forms.exceptions import (
    DocumentLoadError, FieldNotFoundError, FieldTypeMismatchError, FontAssetMissingError
)
from pdfform.forms.schemas import FormField
from pdfform.testing_dependencies import (
    FONT_PATH, build_form_pdf, form_fields, page_font_names, page_text, plain_pdf_bytes,
    template_bytes, widget_count
)


def entry(field_id, field_type, value):
    return FormField(fieldID=field_id, fieldType=field_type, value=value)


def test_fill_renders_values_and_removes_the_form(template_bytes):
    filled = fill_template(
        template_bytes,
        [entry("Name", "text", "Jane"), entry("Agree", "checkbox", True)],
        FONT_PATH,
    )

    assert filled.startswith(b"%PDF")
    assert form_fields(filled) == {}
    assert widget_count(filled) == 0

    text = page_text(filled)
    assert "Jane" in text
    assert CHECK_MARK in text


def test_filled_text_uses_the_bundled_font(template_bytes):
    filled = fill_template(template_bytes, [entry("Name", "text", "Jane")], FONT_PATH)
    assert any("DejaVuSans" in name for name in page_font_names(filled))


def test_unmentioned_fields_keep_defaults(template_bytes):
    filled = fill_template(template_bytes, [entry("Name", "text", "Jane")], FONT_PATH)

    assert widget_count(filled) == 0
    assert CHECK_MARK not in page_text(filled)


def test_non_latin_text_is_filled(template_bytes):
    filled = fill_template(template_bytes, [entry("Name", "text", "Żółć Ελλάδα")], FONT_PATH)

    assert "Żółć Ελλάδα" in page_text(filled)
    assert any("DejaVuSans" in name for name in page_font_names(filled))


def test_unchecked_checkbox_is_blank(template_bytes):
    filled = fill_template(template_bytes, [entry("Agree", "checkbox", False)], FONT_PATH)

    assert widget_count(filled) == 0
    assert CHECK_MARK not in page_text(filled)


def test_legacy_field_type_names(template_bytes):
    filled = fill_template(
        template_bytes,
        [entry("Name", "PDFTextField", "Jane"), entry("Agree", "PDFCheckBox", True)],
        FONT_PATH,
    )
    text = page_text(filled)
    assert "Jane" in text
    assert CHECK_MARK in text


def test_unknown_field_raises_field_not_found(template_bytes):
    with pytest.raises(FieldNotFoundError) as exc_info:
        fill_template(template_bytes, [entry("Missing", "text", "x")], FONT_PATH)
    assert exc_info.value.details["field_id"] == "Missing"


def test_type_mismatch_raises(template_bytes):
    with pytest.raises(FieldTypeMismatchError) as exc_info:
        fill_template(template_bytes, [entry("Agree", "text", "yes")], FONT_PATH)
    assert exc_info.value.details["actual_type"] == "checkbox"


def test_unsupported_field_type_entries_are_skipped():
    pdf = build_form_pdf(text_fields=("Name",), checkboxes=(), choices=("Color",))
    filled = fill_template(
        pdf,
        [entry("Color", "Dropdown", "B"), entry("Nowhere", "signature", "x"), entry("Name", "text", "Jane")],
        FONT_PATH,
    )
    assert "Jane" in page_text(filled)
    assert widget_count(filled) == 0


def test_missing_font_raises(template_bytes, tmp_path):
    with pytest.raises(FontAssetMissingError):
        fill_template(template_bytes, [entry("Name", "text", "Jane")], tmp_path / "missing.ttf")


def test_empty_font_file_raises(tmp_path):
    font = tmp_path / "empty.ttf"
    font.write_bytes(b"")
    with pytest.raises(FontAssetMissingError):
        load_font(font)


def test_corrupt_font_file_raises(template_bytes, tmp_path):
    font = tmp_path / "corrupt.ttf"
    font.write_bytes(b"this is not a TrueType font")
    with pytest.raises(FontAssetMissingError):
        fill_template(template_bytes, [entry("Name", "text", "Jane")], font)


def test_malformed_template_raises(plain_pdf_bytes):
    with pytest.raises(DocumentLoadError):
        fill_template(b"garbage", [], FONT_PATH)
    with pytest.raises(DocumentLoadError):
        fill_template(plain_pdf_bytes, [], FONT_PATH)


def test_template_bytes_are_not_modified(template_bytes):
    original = bytes(template_bytes)
    fill_template(template_bytes, [entry("Name", "text", "Jane")], FONT_PATH)
    assert template_bytes == original


def test_fill_is_repeatable(template_bytes):
    request = [entry("Name", "text", "Jane"), entry("Agree", "checkbox", True)]
    first = fill_template(template_bytes, request, FONT_PATH)
    second = fill_template(template_bytes, request, FONT_PATH)

    assert page_text(first) == page_text(second)
    assert widget_count(first) == widget_count(second) == 0
