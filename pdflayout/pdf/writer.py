"""Fillable PDF output: layout fields as AcroForm widgets via reportlab + pypdf."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from io import BytesIO
import logging
from pathlib import Path
import re

from pypdf import PdfReader, PdfWriter
from pypdf.generic import ArrayObject, BooleanObject, DictionaryObject, NameObject, NumberObject
from reportlab.lib import colors
from reportlab.pdfgen import canvas

from pdflayout.model.field import FieldKind, LayoutField
from pdflayout.model.geometry import CoordinateSpace

logger = logging.getLogger(__name__)


class PdfWriteError(RuntimeError):
    """Raised when output generation fails."""


@dataclass(slots=True, frozen=True)
class WidgetBox:
    """One AcroForm text widget in PDF points (bottom-left origin)."""

    name: str
    x: float
    y: float
    width: float
    height: float
    multiline: bool = False
    required: bool = False
    tooltip: str = ""


def write_fillable_pdf(
    source_path: str | Path,
    output_path: str | Path,
    fields: list[LayoutField],
    zoom: float,
    space: CoordinateSpace = CoordinateSpace.PERCENT,
) -> int:
    """Write ``source_path`` with one widget per field (per cell for tables).

    Field sizes are pixels at ``zoom`` pixels per point. Returns the number of
    widgets written.
    """
    source = Path(source_path)
    output = Path(output_path)

    try:
        reader = PdfReader(str(source))
        writer = PdfWriter()
        for page in reader.pages:
            writer.add_page(page)

        _strip_existing_form_widgets(writer)

        boxes_by_page = _layout_widgets(reader, fields, zoom, space)
        widget_count = sum(len(boxes) for boxes in boxes_by_page.values())
        if widget_count:
            overlay_reader = PdfReader(_build_overlay_pdf(reader, boxes_by_page))
            _transfer_widget_annotations(overlay_reader, writer, set(boxes_by_page))
            _hide_widget_borders(writer)

        with output.open("wb") as handle:
            writer.write(handle)
    except Exception as exc:
        raise PdfWriteError(f"Failed to write output PDF: {output}") from exc

    logger.info("Wrote %d widget(s) to %s", widget_count, output)
    return widget_count


def field_widgets(
    field: LayoutField,
    page_width: float,
    page_height: float,
    zoom: float,
    space: CoordinateSpace = CoordinateSpace.PERCENT,
) -> list[WidgetBox]:
    if space is CoordinateSpace.PERCENT:
        left = field.position.x / 100.0 * page_width
        top = field.position.y / 100.0 * page_height
    else:
        left = field.position.x / zoom
        top = field.position.y / zoom

    base_name = _widget_name(field)
    grid = field.grid
    if grid is None:
        width = field.size.width / zoom
        height = field.size.height / zoom
        return [
            WidgetBox(
                name=base_name,
                x=left,
                y=page_height - top - height,
                width=width,
                height=height,
                multiline=field.kind is FieldKind.MULTILINE,
                required=field.settings.required,
                tooltip=field.title,
            )
        ]

    boxes: list[WidgetBox] = []
    for row, row_offset in enumerate(grid.row_offsets()):
        cell_top = top + row_offset / zoom
        cell_height = grid.cell_heights[row] / zoom
        for col, col_offset in enumerate(grid.column_offsets()):
            cell = grid.cells[f"{row}-{col}"]
            boxes.append(
                WidgetBox(
                    name=f"{base_name}_r{row}c{col}",
                    x=left + col_offset / zoom,
                    y=page_height - cell_top - cell_height,
                    width=grid.cell_widths[col] / zoom,
                    height=cell_height,
                    required=field.settings.required,
                    tooltip=cell.title or f"{field.title} {cell.cell_type.value}",
                )
            )
    return boxes


def _layout_widgets(
    reader: PdfReader,
    fields: list[LayoutField],
    zoom: float,
    space: CoordinateSpace,
) -> dict[int, list[WidgetBox]]:
    grouped: dict[int, list[WidgetBox]] = defaultdict(list)
    for field in fields:
        page_index = field.position.page_index
        if page_index > len(reader.pages):
            logger.warning("Skipping field %d on missing page %d", field.id, page_index)
            continue
        mediabox = reader.pages[page_index - 1].mediabox
        boxes = field_widgets(field, float(mediabox.width), float(mediabox.height), zoom, space)
        for box in boxes:
            grouped[page_index].append(
                WidgetBox(
                    name=box.name,
                    x=box.x + float(mediabox.left),
                    y=box.y + float(mediabox.bottom),
                    width=box.width,
                    height=box.height,
                    multiline=box.multiline,
                    required=box.required,
                    tooltip=box.tooltip,
                )
            )
    return dict(grouped)


def _widget_name(field: LayoutField) -> str:
    stem = re.sub(r"[^A-Za-z0-9_]+", "_", field.title).strip("_") or field.kind.value
    return f"{stem}_{field.id}"


def _strip_existing_form_widgets(writer: PdfWriter) -> None:
    for page in writer.pages:
        annots = page.get("/Annots")
        if not annots:
            continue

        kept = ArrayObject()
        for annot_ref in annots:
            annot = annot_ref.get_object()
            if annot.get("/Subtype") == "/Widget":
                continue
            kept.append(annot_ref)

        if kept:
            page[NameObject("/Annots")] = kept
        elif "/Annots" in page:
            del page["/Annots"]

    if "/AcroForm" in writer._root_object:
        del writer._root_object["/AcroForm"]


def _hide_widget_borders(writer: PdfWriter) -> None:
    zero_border = ArrayObject([NumberObject(0), NumberObject(0), NumberObject(0)])
    for page in writer.pages:
        for annot_ref in page.get("/Annots") or []:
            annot = annot_ref.get_object()
            if annot.get("/Subtype") == "/Widget":
                annot[NameObject("/Border")] = zero_border


def _transfer_widget_annotations(
    overlay_reader: PdfReader,
    writer: PdfWriter,
    pages_with_fields: set[int],
) -> None:
    field_refs = ArrayObject()

    for page_index in sorted(pages_with_fields):
        source_page = overlay_reader.pages[page_index - 1]
        target_page = writer.pages[page_index - 1]
        target_annots_obj = target_page.get("/Annots")
        target_annots = ArrayObject() if target_annots_obj is None else target_annots_obj.get_object()

        for annot_ref in source_page.get("/Annots") or []:
            annot = annot_ref.get_object()
            if annot.get("/Subtype") != "/Widget":
                continue

            cloned_ref = annot.clone(writer)
            cloned_annot = cloned_ref.get_object()
            if getattr(target_page, "indirect_reference", None) is not None:
                cloned_annot[NameObject("/P")] = target_page.indirect_reference
            _clear_widget_background(cloned_annot)

            target_annots.append(cloned_ref)
            field_refs.append(cloned_ref)

        target_page[NameObject("/Annots")] = target_annots

    acroform = DictionaryObject(
        {
            NameObject("/Fields"): field_refs,
            NameObject("/NeedAppearances"): BooleanObject(True),
        }
    )
    writer._root_object[NameObject("/AcroForm")] = writer._add_object(acroform)


def _build_overlay_pdf(reader: PdfReader, boxes_by_page: dict[int, list[WidgetBox]]) -> BytesIO:
    buffer = BytesIO()
    first_box = reader.pages[0].mediabox
    report = canvas.Canvas(buffer, pagesize=(float(first_box.width), float(first_box.height)))

    for page_index, page in enumerate(reader.pages, start=1):
        report.setPageSize((float(page.mediabox.right), float(page.mediabox.top)))

        for box in boxes_by_page.get(page_index, []):
            flags = " ".join(
                flag for flag, enabled in (("multiline", box.multiline), ("required", box.required)) if enabled
            )
            report.acroForm.textfield(
                name=box.name,
                tooltip=box.tooltip or None,
                x=box.x,
                y=box.y,
                width=box.width,
                height=box.height,
                value="",
                fieldFlags=flags,
                forceBorder=False,
                borderWidth=0,
                fillColor=None,
                borderColor=None,
                textColor=colors.black,
            )

        report.showPage()

    report.save()
    buffer.seek(0)
    return buffer


def _clear_widget_background(widget_annot: DictionaryObject) -> None:
    mk = widget_annot.get("/MK")
    if mk is None:
        return
    mk_dict = mk.get_object()
    if "/BG" in mk_dict:
        del mk_dict["/BG"]
