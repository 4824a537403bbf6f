# pdfform/forms/engine.py

"""
Fill and flatten PDF form templates.

1. Load the template and classify its fields
2. Register the bundled TrueType font so filled text renders outside the
   standard PDF font coverage
3. Apply the requested values, leaving every other field at its default
4. Draw every widget's value onto an overlay page with the bundled font
5. Merge the overlay into the page, drop the widgets and the form, serialize
"""

import hashlib
import re
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pypdf import PdfReader, PdfWriter
from pypdf.generic import ArrayObject, NameObject
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from pdfform.forms.document import field_kinds, load_form
from pdfform.forms.exceptions import (
    FieldNotFoundError, FieldTypeMismatchError, FontAssetMissingError, FormFillError
)
from pdfform.forms.fields import FieldKind, FieldType, parse_requested_type
from pdfform.forms.schemas import FormField
from pdfform.utils.logger import get_logger

logger = get_logger(__name__)

FILL_FONT_NAME = "FillFont"
CHECK_MARK = "✔"
RADIO_MARK = "●"

DEFAULT_FONT_SIZE = 12
MIN_FONT_SIZE = 4

# Field flag bits
FF_MULTILINE = 1 << 12
FF_RADIO = 1 << 15
# Annotation flag bits
F_HIDDEN = 1 << 1

_DA_FONT_SIZE = re.compile(r"(\d+(?:\.\d+)?)\s+Tf")


def load_font(font_path: Union[str, Path]) -> bytes:
    """Read the fill font, raising FontAssetMissingError when it is absent or empty."""
    try:
        font_bytes = Path(font_path).read_bytes()
    except OSError as e:
        logger.error("Fill font not readable", font_path=str(font_path), error=str(e))
        raise FontAssetMissingError(str(font_path)) from e

    if not font_bytes:
        raise FontAssetMissingError(str(font_path))
    return font_bytes


def register_fill_font(font_bytes: bytes, font_path: Union[str, Path]) -> str:
    """
    Register a TrueType font with reportlab and return its registered name.

    The name carries a digest of the font bytes, so different font files never
    share a registry entry and the same file is parsed only once per process.
    """
    font_name = f"{FILL_FONT_NAME}-{hashlib.sha1(font_bytes).hexdigest()[:12]}"
    if font_name in pdfmetrics.getRegisteredFontNames():
        return font_name

    try:
        pdfmetrics.registerFont(TTFont(font_name, BytesIO(font_bytes)))
    except Exception as e:
        logger.error("Could not register fill font", font_path=str(font_path), error=str(e))
        raise FontAssetMissingError(str(font_path)) from e
    return font_name


def _coerce_value(field_type: FieldType, value: Any) -> Union[str, bool]:
    if field_type is FieldType.CHECKBOX:
        return bool(value)
    if value is None:
        return ""
    return str(value)


def _inherited(annot, key: str):
    """Look up a field attribute on the widget or the nearest parent defining it."""
    node = annot
    while node is not None:
        if key in node:
            return node[key]
        parent = node.get("/Parent")
        node = parent.get_object() if parent is not None else None
    return None


def _qualified_name(annot) -> Optional[str]:
    parts = []
    node = annot
    while node is not None:
        if "/T" in node:
            parts.append(str(node["/T"]))
        parent = node.get("/Parent")
        node = parent.get_object() if parent is not None else None
    return ".".join(reversed(parts)) or None


def _font_size(annot, height: float) -> float:
    match = _DA_FONT_SIZE.search(str(_inherited(annot, "/DA") or ""))
    size = float(match.group(1)) if match else 0
    if size <= 0:
        # Auto size
        size = min(DEFAULT_FONT_SIZE, height * 0.7)
    return max(MIN_FONT_SIZE, size)


def _draw_text(pdf: canvas.Canvas, font_name: str, text: str, rect: Tuple[float, ...], annot) -> None:
    x1, y1, x2, y2 = rect
    width, height = x2 - x1, y2 - y1
    size = _font_size(annot, height)

    if int(_inherited(annot, "/Ff") or 0) & FF_MULTILINE:
        pdf.setFont(font_name, size)
        y = y2 - size - 2
        for line in text.splitlines():
            if y < y1:
                break
            pdf.drawString(x1 + 2, y, line)
            y -= size * 1.15
        return

    # Shrink single lines that would overflow the box
    text_width = pdfmetrics.stringWidth(text, font_name, size)
    if text_width > width - 4 and text_width > 0:
        size = max(MIN_FONT_SIZE, size * (width - 4) / text_width)
    pdf.setFont(font_name, size)
    pdf.drawString(x1 + 2, y1 + (height - size) * 0.5 + size * 0.22, text)


def _draw_mark(pdf: canvas.Canvas, font_name: str, mark: str, rect: Tuple[float, ...]) -> None:
    x1, y1, x2, y2 = rect
    size = max(MIN_FONT_SIZE, min(x2 - x1, y2 - y1) * 0.8)
    pdf.setFont(font_name, size)
    pdf.drawCentredString((x1 + x2) / 2, y1 + (y2 - y1 - size) * 0.5 + size * 0.2, mark)


def _draw_widget(
    pdf: canvas.Canvas,
    font_name: str,
    annot,
    kind: Optional[FieldKind],
    value: Union[str, bool, None],
) -> None:
    """Draw one widget's value. Widgets the fill does not set keep their stored state."""
    x1, y1, x2, y2 = (float(v) for v in annot["/Rect"])
    rect = (min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2))

    if kind is not None and kind.field_type is FieldType.TEXT:
        if value:
            _draw_text(pdf, font_name, str(value), rect, annot)
        return
    if kind is not None and kind.field_type is FieldType.CHECKBOX:
        if value:
            _draw_mark(pdf, font_name, CHECK_MARK, rect)
        return

    field_type = _inherited(annot, "/FT")
    if field_type == "/Btn":
        if str(annot.get("/AS", "/Off")) != "/Off":
            radio = int(_inherited(annot, "/Ff") or 0) & FF_RADIO
            _draw_mark(pdf, font_name, RADIO_MARK if radio else CHECK_MARK, rect)
    elif field_type in ("/Tx", "/Ch"):
        stored = _inherited(annot, "/V")
        if isinstance(stored, ArrayObject):
            stored = ", ".join(str(v) for v in stored)
        if stored:
            _draw_text(pdf, font_name, str(stored), rect, annot)


def _flatten(
    template_bytes: bytes,
    kinds: Dict[str, FieldKind],
    data: Dict[str, Union[str, bool]],
    font_name: str,
) -> bytes:
    """Render widget values as page content and strip the interactive form."""
    reader = PdfReader(BytesIO(template_bytes), strict=False)
    pages_with_widgets: List[int] = []

    overlay = BytesIO()
    pdf = canvas.Canvas(overlay)
    for index, page in enumerate(reader.pages):
        media = page.mediabox
        pdf.setPageSize((float(media.right), float(media.top)))

        kept_annots = []
        for ref in page.get("/Annots") or []:
            annot = ref.get_object()
            if annot.get("/Subtype") != "/Widget":
                kept_annots.append(ref)
                continue
            if int(annot.get("/F", 0)) & F_HIDDEN or "/Rect" not in annot:
                continue
            name = _qualified_name(annot)
            _draw_widget(pdf, font_name, annot, kinds.get(name), data.get(name))

        if "/Annots" in page:
            pages_with_widgets.append(index)
            if kept_annots:
                page[NameObject("/Annots")] = ArrayObject(kept_annots)
            else:
                del page["/Annots"]
        pdf.showPage()
    pdf.save()

    overlay_reader = PdfReader(BytesIO(overlay.getvalue()))
    writer = PdfWriter()
    for index, page in enumerate(reader.pages):
        if index in pages_with_widgets:
            page.merge_page(overlay_reader.pages[index])
        writer.add_page(page)

    output = BytesIO()
    writer.write(output)
    return output.getvalue()


def fill_template(
    template_bytes: bytes,
    field_values: Iterable[FormField],
    font_path: Union[str, Path],
    file_name: Optional[str] = None,
) -> bytes:
    """
    Fill a PDF form and flatten it.

    Args:
        template_bytes: The stored template. Never modified.
        field_values: Ordered (fieldID, fieldType, value) entries. Entries whose
            fieldType is neither text nor checkbox are skipped.
        font_path: TrueType font used to draw every filled value.
        file_name: Template name for log records and error details.

    Returns:
        Bytes of the filled PDF. Field values are page content and no
        interactive form is left.

    Raises:
        DocumentLoadError: template is not a PDF form.
        FontAssetMissingError: font file missing or unusable.
        FieldNotFoundError: an entry names a field the template lacks.
        FieldTypeMismatchError: an entry's fieldType disagrees with the field's kind.
        FormFillError: the PDF library failed to render, flatten or save.
    """
    form = load_form(template_bytes, file_name)
    font_bytes = load_font(font_path)
    kinds = field_kinds(form)

    data: Dict[str, Union[str, bool]] = {
        name: kind.default_value for name, kind in kinds.items() if kind.is_supported
    }

    for entry in field_values:
        requested = parse_requested_type(entry.field_type)
        if requested is None:
            logger.debug("Skipping unsupported field type", field_id=entry.field_id, field_type=entry.field_type)
            continue

        kind = kinds.get(entry.field_id)
        if kind is None:
            raise FieldNotFoundError(entry.field_id)
        if kind.field_type is not requested:
            raise FieldTypeMismatchError(entry.field_id, requested.value, kind.type_name)

        data[entry.field_id] = _coerce_value(requested, entry.value)

    font_name = register_fill_font(font_bytes, font_path)

    try:
        filled_bytes = _flatten(bytes(template_bytes), kinds, data, font_name)
    except Exception as e:
        logger.error("Error filling PDF form", file_name=file_name, error=str(e), exc_info=True)
        raise FormFillError(f"Failed to fill PDF form: {e}", file_name) from e

    logger.info("Filled PDF form", file_name=file_name, fields_filled=len(data), output_size=len(filled_bytes))
    return filled_bytes
