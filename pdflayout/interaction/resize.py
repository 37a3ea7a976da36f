"""Box and table-cell resize gestures."""

from __future__ import annotations

import logging

from pdflayout.interaction.gesture import CellResizeMode, GestureKind, GestureSession, GestureTracker
from pdflayout.model.geometry import Point
from pdflayout.model.field import min_size
from pdflayout.model.table import MIN_CELL_HEIGHT, MIN_CELL_WIDTH
from pdflayout.state.registry import FieldRegistry

logger = logging.getLogger(__name__)


class ResizeController:
    """Turns pointer-down/move/up on resize handles into registry updates.

    Sizes are always recomputed from the values captured at pointer-down, so
    a gesture that overshoots a minimum and comes back tracks the pointer
    exactly.
    """

    def __init__(self, registry: FieldRegistry, tracker: GestureTracker) -> None:
        self._registry = registry
        self._tracker = tracker

    @property
    def active(self) -> bool:
        session = self._tracker.session
        return session is not None and session.kind in (GestureKind.RESIZE, GestureKind.CELL_RESIZE)

    def begin_box(self, field_id: int, pointer: Point) -> bool:
        field = self._registry.get(field_id)
        if field is None:
            logger.debug("Cannot resize unknown field %s", field_id)
            return False
        session = GestureSession(
            kind=GestureKind.RESIZE,
            field_id=field_id,
            start=pointer,
            current=pointer,
            start_width=field.size.width,
            start_height=field.size.height,
        )
        return self._tracker.begin(session) is not None

    def begin_cell(
        self,
        field_id: int,
        row: int,
        col: int,
        mode: CellResizeMode | str,
        pointer: Point,
    ) -> bool:
        field = self._registry.get(field_id)
        if field is None or field.grid is None:
            logger.debug("Cannot resize cells of field %s", field_id)
            return False
        grid = field.grid
        if not (0 <= row < grid.rows and 0 <= col < grid.columns):
            logger.debug("Cell %d-%d is outside field %d", row, col, field_id)
            return False
        session = GestureSession(
            kind=GestureKind.CELL_RESIZE,
            field_id=field_id,
            start=pointer,
            current=pointer,
            start_width=grid.cell_widths[col],
            start_height=grid.cell_heights[row],
            row=row,
            col=col,
            mode=CellResizeMode(mode),
        )
        return self._tracker.begin(session) is not None

    def update(self, pointer: Point) -> bool:
        if not self.active:
            return False
        session = self._tracker.update(pointer)
        if session is None:
            return False
        if session.kind is GestureKind.RESIZE:
            return self._apply_box(session)
        return self._apply_cell(session)

    def end(self) -> None:
        if self.active:
            self._tracker.end()

    def _apply_box(self, session: GestureSession) -> bool:
        field = self._registry.get(session.field_id)
        if field is None:
            return False
        min_width, min_height = min_size(field.kind)
        width = max(min_width, session.start_width + session.dx)
        height = max(min_height, session.start_height + session.dy)
        return self._registry.resize(field.id, width, height)

    def _apply_cell(self, session: GestureSession) -> bool:
        field = self._registry.get(session.field_id)
        if field is None or field.grid is None:
            return False
        grid = field.grid
        if session.mode is CellResizeMode.HORIZONTAL:
            if session.col is None or session.col >= grid.columns:
                return False
            widths = list(grid.cell_widths)
            widths[session.col] = max(MIN_CELL_WIDTH, int(round(session.start_width + session.dx)))
            return self._registry.update_settings(field.id, {"cell_widths": widths})
        if session.row is None or session.row >= grid.rows:
            return False
        heights = list(grid.cell_heights)
        heights[session.row] = max(MIN_CELL_HEIGHT, int(round(session.start_height + session.dy)))
        return self._registry.update_settings(field.id, {"cell_heights": heights})
