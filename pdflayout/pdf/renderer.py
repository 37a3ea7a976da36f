"""PDF rendering helpers using PyMuPDF."""

from __future__ import annotations

import fitz
from PySide6.QtGui import QImage


class PdfRenderError(RuntimeError):
    """Raised when a page cannot be rendered."""


def render_page_image(document: fitz.Document, page_index: int, zoom: float = 1.25) -> QImage:
    """Render a 1-based page at ``zoom`` pixels per PDF point."""
    if page_index < 1 or page_index > document.page_count:
        raise PdfRenderError(f"Page number out of range: {page_index}")

    try:
        page = document.load_page(page_index - 1)
        matrix = fitz.Matrix(zoom, zoom)
        pix = page.get_pixmap(matrix=matrix, alpha=False, annots=False)
    except Exception as exc:  # pragma: no cover
        raise PdfRenderError(f"Failed to render page {page_index}") from exc

    image = QImage(pix.samples, pix.width, pix.height, pix.stride, QImage.Format.Format_RGB888)
    return image.copy()


def render_document_pages(document: fitz.Document, zoom: float = 1.25) -> list[QImage]:
    return [render_page_image(document, number, zoom=zoom) for number in range(1, document.page_count + 1)]
