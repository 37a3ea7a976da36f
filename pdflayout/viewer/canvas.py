"""Interactive page canvas: renders pages and fields, feeds pointer gestures to controllers."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from PySide6.QtCore import QMimeData, QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QColor, QDrag, QImage, QPainter, QPen, QPixmap
from PySide6.QtWidgets import QApplication, QInputDialog, QWidget

from pdflayout.config import LayoutConfig
from pdflayout.interaction.drag import (
    PAYLOAD_MIME_TYPE,
    DragController,
    MoveFieldPayload,
    decode_payload,
    encode_payload,
)
from pdflayout.interaction.gesture import CellResizeMode
from pdflayout.interaction.resize import ResizeController
from pdflayout.model.field import LayoutField, kind_spec
from pdflayout.model.geometry import Point, SurfaceRect
from pdflayout.model.table import cell_key
from pdflayout.state.session import LayoutSession

logger = logging.getLogger(__name__)

SELECTED_COLOR = QColor("#1565c0")
SELECTED_CELL_COLOR = QColor("lightyellow")
HANDLE_COLOR = QColor("#c62828")


@dataclass(slots=True)
class HitResult:
    field_id: int
    area: str
    row: int | None = None
    col: int | None = None


class PageCanvas(QWidget):
    """Stacks every rendered page vertically and overlays the session's fields.

    Field positions are page-relative, sizes are pixels at the reference zoom
    and get scaled with the current render zoom.
    """

    content_ready = Signal(int)

    def __init__(
        self,
        session: LayoutSession,
        drag_controller: DragController,
        resize_controller: ResizeController,
        config: LayoutConfig,
    ) -> None:
        super().__init__()
        self._session = session
        self._drag = drag_controller
        self._resize = resize_controller
        self._config = config
        self._pixmaps: list[QPixmap] = []
        self._render_zoom = config.zoom
        self._press_pos: QPointF | None = None
        self._press_field_id: int | None = None

        self.setAcceptDrops(True)
        self.setMouseTracking(True)
        self.setMinimumSize(500, 600)

        registry = session.registry
        for signal in (registry.field_added, registry.field_changed, registry.field_removed):
            signal.connect(self._on_registry_changed)
        registry.cleared.connect(self.update)
        session.selection.selection_changed.connect(self._on_registry_changed)

    @property
    def scale(self) -> float:
        return self._render_zoom / self._config.zoom

    def set_pages(self, images: list[QImage], zoom: float) -> None:
        self._finish_gestures()
        self._pixmaps = [QPixmap.fromImage(image) for image in images]
        self._render_zoom = zoom
        width = max((pixmap.width() for pixmap in self._pixmaps), default=500)
        height = sum(pixmap.height() for pixmap in self._pixmaps)
        height += self._config.page_gap * max(0, len(self._pixmaps) - 1)
        self.resize(width, max(height, 600))
        self.update()
        self.content_ready.emit(len(self._pixmaps))

    def clear_pages(self) -> None:
        self._finish_gestures()
        self._pixmaps = []
        self.resize(500, 600)
        self.update()

    def page_rects(self) -> dict[int, SurfaceRect]:
        """Current page surfaces keyed by 1-based page number."""
        rects: dict[int, SurfaceRect] = {}
        top = 0
        for number, pixmap in enumerate(self._pixmaps, start=1):
            left = (self.width() - pixmap.width()) / 2.0
            rects[number] = SurfaceRect(left, float(top), float(pixmap.width()), float(pixmap.height()))
            top += pixmap.height() + self._config.page_gap
        return rects

    def field_rect(self, field: LayoutField, rects: dict[int, SurfaceRect] | None = None) -> QRectF | None:
        rects = self.page_rects() if rects is None else rects
        page = rects.get(field.position.page_index)
        if page is None:
            return None
        origin = self._session.mapper.to_surface(field.position.x, field.position.y, page, self.scale)
        return QRectF(origin.x, origin.y, field.size.width * self.scale, field.size.height * self.scale)

    def paintEvent(self, event) -> None:  # type: ignore[override]
        del event
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor("#e9eaee"))

        rects = self.page_rects()
        for number, pixmap in enumerate(self._pixmaps, start=1):
            page = rects[number]
            painter.drawPixmap(QPointF(page.left, page.top), pixmap)

        selected_id = self._session.selection.selected_field_id
        for field in self._session.registry:
            rect = self.field_rect(field, rects)
            if rect is None:
                continue
            self._paint_field(painter, field, rect, field.id == selected_id)

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if event.button() != Qt.MouseButton.LeftButton or not self._pixmaps:
            return

        pos = event.position()
        hit = self._hit_test(pos)
        selection = self._session.selection
        if hit is None:
            selection.clear()
            return

        selection.select_field(hit.field_id)
        pointer = self._reference_point(pos)
        if hit.area == "resize":
            if self._resize.begin_box(hit.field_id, pointer):
                self.grabMouse()
        elif hit.area in ("column", "row"):
            mode = CellResizeMode.HORIZONTAL if hit.area == "column" else CellResizeMode.VERTICAL
            if self._resize.begin_cell(hit.field_id, hit.row, hit.col, mode, pointer):
                self.grabMouse()
        else:
            if hit.area == "cell":
                selection.select_cell(hit.field_id, cell_key(hit.row, hit.col))
            self._press_pos = pos
            self._press_field_id = hit.field_id

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        pos = event.position()
        if self._resize.active:
            if event.buttons() & Qt.MouseButton.LeftButton:
                self._resize.update(self._reference_point(pos))
                return
            # Release never arrived.
            self._finish_gestures()

        self._update_cursor(pos)
        if self._press_pos is None or self._press_field_id is None:
            return
        if (pos - self._press_pos).manhattanLength() < QApplication.startDragDistance():
            return
        field_id = self._press_field_id
        self._press_pos = None
        self._press_field_id = None
        self._start_move_drag(field_id, pos)

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        del event
        self._finish_gestures()

    def mouseDoubleClickEvent(self, event) -> None:  # type: ignore[override]
        hit = self._hit_test(event.position())
        if hit is None:
            return
        field = self._session.registry.get(hit.field_id)
        if field is None:
            return
        if hit.area == "cell":
            key = cell_key(hit.row, hit.col)
            cell = field.grid.cell(key) if field.grid is not None else None
            if cell is None:
                return
            text, ok = QInputDialog.getText(self, "Cell Title", "Title:", text=cell.title)
            if ok:
                self._session.update_cell_title(field.id, key, text)
        elif hit.area == "body":
            text, ok = QInputDialog.getText(self, "Field Title", "Title:", text=field.title)
            if ok:
                self._session.registry.update_title(field.id, text)

    def dragEnterEvent(self, event) -> None:  # type: ignore[override]
        if event.mimeData().hasFormat(PAYLOAD_MIME_TYPE):
            event.acceptProposedAction()

    def dragMoveEvent(self, event) -> None:  # type: ignore[override]
        if event.mimeData().hasFormat(PAYLOAD_MIME_TYPE):
            self._drag.update(Point(event.position().x(), event.position().y()))
            event.acceptProposedAction()

    def dropEvent(self, event) -> None:  # type: ignore[override]
        payload = decode_payload(bytes(event.mimeData().data(PAYLOAD_MIME_TYPE)))
        if payload is None:
            event.ignore()
            return
        pos = event.position()
        if self._drag.drop(payload, Point(pos.x(), pos.y()), self.page_rects(), self.scale):
            event.acceptProposedAction()
        else:
            event.ignore()

    def _start_move_drag(self, field_id: int, pos: QPointF) -> None:
        payload = MoveFieldPayload(field_id)
        mime = QMimeData()
        mime.setData(PAYLOAD_MIME_TYPE, encode_payload(payload))
        drag = QDrag(self)
        drag.setMimeData(mime)

        field = self._session.registry.get(field_id)
        rect = self.field_rect(field) if field is not None else None
        if rect is not None:
            drag.setPixmap(self.grab(rect.toAlignedRect()))
            drag.setHotSpot((pos - rect.topLeft()).toPoint())

        if not self._drag.begin(payload, Point(pos.x(), pos.y())):
            return
        try:
            drag.exec(Qt.DropAction.MoveAction)
        finally:
            self._drag.end()

    def _finish_gestures(self) -> None:
        try:
            self._resize.end()
        finally:
            self._press_pos = None
            self._press_field_id = None
            if QWidget.mouseGrabber() is self:
                self.releaseMouse()

    def _hit_test(self, pos: QPointF) -> HitResult | None:
        rects = self.page_rects()
        handle = float(self._config.handle_size)
        for field in reversed(self._session.registry.fields()):
            rect = self.field_rect(field, rects)
            if rect is None:
                continue
            if _handle_rect(rect, handle).contains(pos):
                return HitResult(field.id, "resize")
            if not rect.contains(pos):
                continue
            if field.grid is not None:
                cell_hit = self._hit_cell(field, rect, pos)
                if cell_hit is not None:
                    return cell_hit
            return HitResult(field.id, "body")
        return None

    def _hit_cell(self, field: LayoutField, rect: QRectF, pos: QPointF) -> HitResult | None:
        grid = field.grid
        if grid is None:
            return None
        scale = self.scale
        band = self._config.cell_handle_size / 2.0
        local_x = pos.x() - rect.left()
        local_y = pos.y() - rect.top()

        col_edges = [(offset + width) * scale for offset, width in zip(grid.column_offsets(), grid.cell_widths)]
        row_edges = [(offset + height) * scale for offset, height in zip(grid.row_offsets(), grid.cell_heights)]
        col = _band_index(local_x, col_edges)
        row = _band_index(local_y, row_edges)
        if col is None or row is None:
            return None

        if col < grid.columns - 1 and abs(local_x - col_edges[col]) <= band:
            return HitResult(field.id, "column", row=row, col=col)
        if row < grid.rows - 1 and abs(local_y - row_edges[row]) <= band:
            return HitResult(field.id, "row", row=row, col=col)
        return HitResult(field.id, "cell", row=row, col=col)

    def _update_cursor(self, pos: QPointF) -> None:
        hit = self._hit_test(pos)
        area = hit.area if hit is not None else None
        cursor = {
            "resize": Qt.CursorShape.SizeFDiagCursor,
            "column": Qt.CursorShape.SplitHCursor,
            "row": Qt.CursorShape.SplitVCursor,
            "body": Qt.CursorShape.SizeAllCursor,
            "cell": Qt.CursorShape.PointingHandCursor,
        }.get(area, Qt.CursorShape.ArrowCursor)
        self.setCursor(cursor)

    def _reference_point(self, pos: QPointF) -> Point:
        return Point(pos.x() / self.scale, pos.y() / self.scale)

    def _paint_field(self, painter: QPainter, field: LayoutField, rect: QRectF, selected: bool) -> None:
        spec = kind_spec(field.kind)
        painter.fillRect(rect, QColor("white"))
        if field.grid is not None:
            self._paint_grid(painter, field, rect)
        else:
            painter.setPen(QColor("black"))
            painter.drawText(rect.adjusted(4, 2, -4, -2), Qt.AlignmentFlag.AlignLeft, field.title)
            painter.setPen(QColor(spec.color))
            painter.drawText(rect.adjusted(4, 2, -4, -2), Qt.AlignmentFlag.AlignRight, spec.label)

        pen = QPen(SELECTED_COLOR if selected else QColor("#cccccc"))
        pen.setWidth(2 if selected else 1)
        painter.setPen(pen)
        painter.drawRect(rect)
        if selected:
            painter.fillRect(_handle_rect(rect, float(self._config.handle_size)), HANDLE_COLOR)

    def _paint_grid(self, painter: QPainter, field: LayoutField, rect: QRectF) -> None:
        grid = field.grid
        if grid is None:
            return
        scale = self.scale
        painter.save()
        painter.setClipRect(rect)
        for row, row_offset in enumerate(grid.row_offsets()):
            for col, col_offset in enumerate(grid.column_offsets()):
                key = cell_key(row, col)
                cell_rect = QRectF(
                    rect.left() + col_offset * scale,
                    rect.top() + row_offset * scale,
                    grid.cell_widths[col] * scale,
                    grid.cell_heights[row] * scale,
                )
                if key == field.settings.selected_cell:
                    painter.fillRect(cell_rect, SELECTED_CELL_COLOR)
                painter.setPen(QColor("#bdbdbd"))
                painter.drawRect(cell_rect)
                cell = grid.cells[key]
                painter.setPen(QColor("black"))
                painter.drawText(
                    cell_rect.adjusted(2, 1, -2, -1),
                    Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter,
                    cell.title or cell.cell_type.value,
                )
        painter.restore()

    def _on_registry_changed(self, *args) -> None:
        del args
        self.update()


def _handle_rect(field_rect: QRectF, handle_size: float) -> QRectF:
    return QRectF(
        field_rect.right() - handle_size / 2.0,
        field_rect.bottom() - handle_size / 2.0,
        handle_size,
        handle_size,
    )


def _band_index(offset: float, edges: list[float]) -> int | None:
    start = 0.0
    for index, edge in enumerate(edges):
        if start <= offset <= edge:
            return index
        start = edge
    return None
