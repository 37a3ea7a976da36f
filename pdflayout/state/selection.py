"""Selection state for the active field and table cell."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, Signal

from pdflayout.model.field import LayoutField
from pdflayout.state.registry import FieldRegistry

logger = logging.getLogger(__name__)


class SelectionModel(QObject):
    selection_changed = Signal(object)

    def __init__(self, registry: FieldRegistry, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._registry = registry
        self._selected_field_id: int | None = None

        registry.field_added.connect(self.select_field)
        registry.field_removed.connect(self._on_field_removed)
        registry.cleared.connect(self.clear)

    @property
    def selected_field_id(self) -> int | None:
        return self._selected_field_id

    def selected_field(self) -> LayoutField | None:
        return self._registry.get(self._selected_field_id)

    def selected_cell(self) -> str | None:
        """Key of the selected field's selected cell, if it still addresses a cell."""
        field = self.selected_field()
        if field is None or field.grid is None:
            return None
        key = field.settings.selected_cell
        if key is None or not field.grid.has_cell(key):
            return None
        return key

    def select_field(self, field_id: int | None) -> None:
        if field_id is not None and field_id not in self._registry:
            logger.debug("Cannot select unknown field %s", field_id)
            return
        if field_id == self._selected_field_id:
            return
        self._selected_field_id = field_id
        self.selection_changed.emit(field_id)

    def select_cell(self, field_id: int, key: str) -> bool:
        field = self._registry.get(field_id)
        if field is None or field.grid is None:
            logger.debug("Cannot select cell %s on field %s", key, field_id)
            return False
        if not field.grid.has_cell(key):
            logger.debug("Cell %s does not exist on field %d", key, field_id)
            return False
        return self._registry.update_settings(field_id, {"selected_cell": key})

    def clear(self) -> None:
        self.select_field(None)

    def _on_field_removed(self, field_id: int) -> None:
        if field_id == self._selected_field_id:
            self.clear()
