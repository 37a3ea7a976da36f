"""Layout field model definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Any, Mapping

from pdflayout.model.table import CellType, TableCell, TableGrid

logger = logging.getLogger(__name__)


class FieldKind(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    TABLE = "table"
    MULTILINE = "multiline"
    SIGNATURE = "signature"


@dataclass(slots=True, frozen=True)
class KindSpec:
    label: str
    color: str
    default_width: int
    default_height: int
    min_width: int
    min_height: int


KIND_SPECS: dict[FieldKind, KindSpec] = {
    FieldKind.TEXT: KindSpec("Text", "red", 150, 30, 100, 30),
    FieldKind.NUMBER: KindSpec("Number", "blue", 150, 30, 100, 30),
    FieldKind.DATE: KindSpec("Date", "green", 150, 30, 100, 30),
    FieldKind.TABLE: KindSpec("Table", "yellow", 300, 150, 200, 100),
    FieldKind.MULTILINE: KindSpec("Multiline", "purple", 300, 150, 150, 100),
    FieldKind.SIGNATURE: KindSpec("Signature", "cyan", 150, 150, 60, 60),
}


def kind_spec(kind: FieldKind) -> KindSpec:
    return KIND_SPECS[FieldKind(kind)]


def min_size(kind: FieldKind) -> tuple[int, int]:
    spec = kind_spec(kind)
    return spec.min_width, spec.min_height


@dataclass(slots=True, frozen=True)
class PagePosition:
    """Field origin on a page; ``x``/``y`` are in the session's coordinate space."""

    page_index: int
    x: float
    y: float

    def __post_init__(self) -> None:
        if self.page_index < 1:
            raise ValueError(f"Page index must be 1-based: {self.page_index}")


@dataclass(slots=True, frozen=True)
class FieldSize:
    width: float
    height: float


_TABLE_KEYS = frozenset({"rows", "columns", "cell_widths", "cell_heights", "cells", "selected_cell"})
_SETTING_KEYS = frozenset({"required", "minimum", "maximum", "max_lines"}) | _TABLE_KEYS
# Spellings used by FieldSettings.to_dict.
_EXPORT_ALIASES = {
    "min": "minimum",
    "max": "maximum",
    "maxLines": "max_lines",
    "cellWidths": "cell_widths",
    "cellHeights": "cell_heights",
    "selectedCell": "selected_cell",
}


@dataclass(slots=True)
class FieldSettings:
    required: bool = True
    minimum: float | None = None
    maximum: float | None = None
    max_lines: int | None = None
    grid: TableGrid | None = None
    selected_cell: str | None = None

    @classmethod
    def for_kind(cls, kind: FieldKind) -> FieldSettings:
        if FieldKind(kind) is FieldKind.TABLE:
            return cls(grid=TableGrid.default())
        return cls()

    def merge(self, partial: Mapping[str, Any]) -> None:
        """Shallow-merge ``partial`` into these settings.

        Keys are the attribute names (``max_lines``, ``cell_widths``); the
        camelCase spellings written by :meth:`to_dict` are accepted too, so an
        exported settings dict merges back unchanged. Row and column counts
        reshape the grid so widths, heights and cells stay consistent with them.
        """
        partial = {_EXPORT_ALIASES.get(key, key): value for key, value in partial.items()}
        unknown = set(partial) - _SETTING_KEYS
        if unknown:
            raise ValueError(f"Unknown setting(s): {', '.join(sorted(unknown))}")

        if "required" in partial:
            self.required = bool(partial["required"])
        if "minimum" in partial:
            self.minimum = _optional_float(partial["minimum"])
        if "maximum" in partial:
            self.maximum = _optional_float(partial["maximum"])
        if "max_lines" in partial:
            value = partial["max_lines"]
            self.max_lines = None if value is None else max(1, int(value))

        table_updates = {key: partial[key] for key in _TABLE_KEYS if key in partial}
        if not table_updates:
            return
        if self.grid is None:
            logger.debug("Ignoring table settings on a non-table field: %s", sorted(table_updates))
            return
        self._merge_grid(self.grid, table_updates)

    def _merge_grid(self, grid: TableGrid, updates: Mapping[str, Any]) -> None:
        if "rows" in updates or "columns" in updates:
            grid.reshape(rows=updates.get("rows"), columns=updates.get("columns"))
        if "cell_widths" in updates:
            widths = [int(width) for width in updates["cell_widths"]]
            if len(widths) != grid.columns:
                raise ValueError(f"Expected {grid.columns} column widths, got {len(widths)}")
            grid.cell_widths = widths
        if "cell_heights" in updates:
            heights = [int(height) for height in updates["cell_heights"]]
            if len(heights) != grid.rows:
                raise ValueError(f"Expected {grid.rows} row heights, got {len(heights)}")
            grid.cell_heights = heights
        if "cells" in updates:
            for key, cell in dict(updates["cells"]).items():
                if grid.has_cell(key):
                    grid.cells[key] = _coerce_cell(cell)
                else:
                    logger.debug("Ignoring cell outside the grid: %s", key)
        if "selected_cell" in updates:
            self.selected_cell = updates["selected_cell"]

        if self.selected_cell is not None and not grid.has_cell(self.selected_cell):
            logger.debug("Clearing selected cell outside the grid: %s", self.selected_cell)
            self.selected_cell = None

    def to_dict(self, kind: FieldKind) -> dict[str, Any]:
        data: dict[str, Any] = {"required": self.required}
        kind = FieldKind(kind)
        if kind is FieldKind.NUMBER:
            data["min"] = self.minimum
            data["max"] = self.maximum
        elif kind is FieldKind.MULTILINE:
            data["maxLines"] = self.max_lines
        elif kind is FieldKind.TABLE and self.grid is not None:
            data["rows"] = self.grid.rows
            data["columns"] = self.grid.columns
            data["cellWidths"] = list(self.grid.cell_widths)
            data["cellHeights"] = list(self.grid.cell_heights)
            data["cells"] = {
                key: {"type": cell.cell_type.value, "title": cell.title}
                for key, cell in self.grid.cells.items()
            }
            data["selectedCell"] = self.selected_cell
        return data


@dataclass(slots=True)
class LayoutField:
    id: int
    kind: FieldKind
    title: str
    position: PagePosition
    size: FieldSize
    settings: FieldSettings = field(default_factory=FieldSettings)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "kind":
            try:
                current = object.__getattribute__(self, "kind")
            except AttributeError:
                current = None
            if current is not None:
                raise AttributeError("Field kind cannot change after creation")
            value = FieldKind(value)
        object.__setattr__(self, name, value)

    @property
    def grid(self) -> TableGrid | None:
        return self.settings.grid


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def _coerce_cell(value: Any) -> TableCell:
    if isinstance(value, TableCell):
        return TableCell(cell_type=value.cell_type, title=value.title)
    data = dict(value)
    return TableCell(
        cell_type=CellType(data.get("cell_type", data.get("type", CellType.NUMBER))),
        title=str(data.get("title", "")),
    )
