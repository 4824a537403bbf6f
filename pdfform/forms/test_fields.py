from pdfform.forms.fields import (
    UNNAMED_FIELD, FieldKind, FieldType, classify_widget, field_display_name, parse_requested_type
)


class Text:
    pass


class Checkbox:
    pass


class Radio(Checkbox):
    pass


def test_classify_supported_widgets():
    assert classify_widget(Text()) == FieldKind.of(FieldType.TEXT)
    assert classify_widget(Checkbox()) == FieldKind.of(FieldType.CHECKBOX)


def test_classify_uses_exact_type_not_subclass():
    kind = classify_widget(Radio())
    assert not kind.is_supported
    assert kind.type_name == "Radio"
    assert kind.default_value is None


def test_default_values():
    assert FieldKind.of(FieldType.TEXT).default_value == ""
    assert FieldKind.of(FieldType.CHECKBOX).default_value is False


def test_parse_requested_type_accepts_legacy_names():
    assert parse_requested_type("text") is FieldType.TEXT
    assert parse_requested_type("Checkbox") is FieldType.CHECKBOX
    assert parse_requested_type("PDFTextField") is FieldType.TEXT
    assert parse_requested_type("PDFCheckBox") is FieldType.CHECKBOX
    assert parse_requested_type("Dropdown") is None
    assert parse_requested_type("") is None
    assert parse_requested_type(None) is None


def test_unnamed_field_placeholder():
    assert field_display_name("") == UNNAMED_FIELD
    assert field_display_name(None) == UNNAMED_FIELD
    assert field_display_name("Name") == "Name"
