"""Ordered collection of placed fields with change notification."""

from __future__ import annotations

import logging
from typing import Any, Iterator, Mapping

from PySide6.QtCore import QObject, Signal

from pdflayout.model.field import (
    FieldKind,
    FieldSettings,
    FieldSize,
    LayoutField,
    PagePosition,
    kind_spec,
)

logger = logging.getLogger(__name__)


class FieldRegistry(QObject):
    """Owns every field of a layout.

    UI layers mutate fields only through the command methods below and learn
    about changes from the signals. Ids come from a counter that never goes
    backwards, so a deleted field's id is never handed out again.
    """

    field_added = Signal(int)
    field_changed = Signal(int)
    field_removed = Signal(int)
    cleared = Signal()

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._fields: dict[int, LayoutField] = {}
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[LayoutField]:
        return iter(list(self._fields.values()))

    def __contains__(self, field_id: object) -> bool:
        return field_id in self._fields

    def get(self, field_id: int | None) -> LayoutField | None:
        if field_id is None:
            return None
        return self._fields.get(field_id)

    def fields(self) -> list[LayoutField]:
        return list(self._fields.values())

    def create(
        self,
        kind: FieldKind | str,
        label: str,
        page_index: int,
        x: float,
        y: float,
    ) -> LayoutField:
        kind = FieldKind(kind)
        spec = kind_spec(kind)
        field = LayoutField(
            id=self._allocate_id(),
            kind=kind,
            title=label if label else spec.label,
            position=PagePosition(page_index, x, y),
            size=FieldSize(spec.default_width, spec.default_height),
            settings=FieldSettings.for_kind(kind),
        )
        self._fields[field.id] = field
        logger.debug("Created %s field %d on page %d at (%.2f, %.2f)", kind.value, field.id, page_index, x, y)
        self.field_added.emit(field.id)
        return field

    def move(self, field_id: int, page_index: int, x: float, y: float) -> bool:
        field = self._lookup(field_id, "move")
        if field is None:
            return False
        field.position = PagePosition(page_index, x, y)
        self.field_changed.emit(field_id)
        return True

    def resize(self, field_id: int, width: float, height: float) -> bool:
        field = self._lookup(field_id, "resize")
        if field is None:
            return False
        field.size = FieldSize(width, height)
        self.field_changed.emit(field_id)
        return True

    def update_title(self, field_id: int, text: str) -> bool:
        field = self._lookup(field_id, "retitle")
        if field is None:
            return False
        field.title = text
        self.field_changed.emit(field_id)
        return True

    def update_settings(self, field_id: int, partial: Mapping[str, Any]) -> bool:
        field = self._lookup(field_id, "update settings of")
        if field is None:
            return False
        field.settings.merge(partial)
        self.field_changed.emit(field_id)
        return True

    def delete(self, field_id: int) -> bool:
        field = self._fields.pop(field_id, None)
        if field is None:
            logger.debug("Cannot delete unknown field %s", field_id)
            return False
        logger.debug("Deleted %s field %d", field.kind.value, field_id)
        self.field_removed.emit(field_id)
        return True

    def clear(self) -> None:
        self._fields.clear()
        self.cleared.emit()

    def _allocate_id(self) -> int:
        field_id = self._next_id
        self._next_id += 1
        return field_id

    def _lookup(self, field_id: int, action: str) -> LayoutField | None:
        field = self._fields.get(field_id)
        if field is None:
            logger.debug("Cannot %s unknown field %s", action, field_id)
        return field
