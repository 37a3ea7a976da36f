"""In-memory layout session: fields, selection and source document metadata."""

from __future__ import annotations

import logging

from pdflayout.config import LayoutConfig
from pdflayout.model.field import LayoutField
from pdflayout.model.geometry import GeometryMapper
from pdflayout.model.table import CellType, TableCell
from pdflayout.state.registry import FieldRegistry
from pdflayout.state.selection import SelectionModel

logger = logging.getLogger(__name__)


class LayoutSession:
    def __init__(self, config: LayoutConfig | None = None, document_name: str = "") -> None:
        self.config = config or LayoutConfig()
        self.registry = FieldRegistry()
        self.selection = SelectionModel(self.registry)
        self.mapper = GeometryMapper(
            space=self.config.coordinate_space,
            clamp=self.config.clamp_positions,
        )
        self.document_name = document_name
        self.page_count = 0

    def reset(self, document_name: str = "", page_count: int = 0) -> None:
        self.registry.clear()
        self.document_name = document_name
        self.page_count = page_count

    def selected_field(self) -> LayoutField | None:
        return self.selection.selected_field()

    def selected_cell(self) -> TableCell | None:
        field = self.selection.selected_field()
        key = self.selection.selected_cell()
        if field is None or field.grid is None or key is None:
            return None
        return field.grid.cell(key)

    def update_cell_title(self, field_id: int, key: str, title: str) -> bool:
        cell = self._cell(field_id, key)
        if cell is None:
            return False
        return self.registry.update_settings(
            field_id,
            {"cells": {key: TableCell(cell_type=cell.cell_type, title=title)}},
        )

    def update_cell_type(self, field_id: int, key: str, cell_type: CellType | str) -> bool:
        cell = self._cell(field_id, key)
        if cell is None:
            return False
        return self.registry.update_settings(
            field_id,
            {"cells": {key: TableCell(cell_type=CellType(cell_type), title=cell.title)}},
        )

    def _cell(self, field_id: int, key: str) -> TableCell | None:
        field = self.registry.get(field_id)
        if field is None or field.grid is None:
            logger.debug("Field %s has no table cells", field_id)
            return None
        cell = field.grid.cell(key)
        if cell is None:
            logger.debug("Field %d has no cell %s", field_id, key)
        return cell
