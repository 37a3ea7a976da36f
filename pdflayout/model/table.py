"""Grid sub-model for table fields."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

DEFAULT_ROWS = 4
DEFAULT_COLUMNS = 4
DEFAULT_CELL_WIDTH = 100
DEFAULT_CELL_HEIGHT = 30
MIN_CELL_WIDTH = 30
MIN_CELL_HEIGHT = 20


class CellType(str, Enum):
    NUMBER = "number"
    TEXT = "text"
    DATE = "date"


@dataclass(slots=True)
class TableCell:
    cell_type: CellType = CellType.NUMBER
    title: str = ""


def cell_key(row: int, col: int) -> str:
    return f"{row}-{col}"


def parse_cell_key(key: str) -> tuple[int, int]:
    row_text, sep, col_text = key.partition("-")
    if not sep:
        raise ValueError(f"Malformed cell key: {key!r}")
    try:
        row, col = int(row_text), int(col_text)
    except ValueError as exc:
        raise ValueError(f"Malformed cell key: {key!r}") from exc
    if row < 0 or col < 0:
        raise ValueError(f"Malformed cell key: {key!r}")
    return row, col


@dataclass(slots=True)
class TableGrid:
    rows: int = DEFAULT_ROWS
    columns: int = DEFAULT_COLUMNS
    cell_widths: list[int] = field(default_factory=list)
    cell_heights: list[int] = field(default_factory=list)
    cells: dict[str, TableCell] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.rows < 1 or self.columns < 1:
            raise ValueError(f"Table needs at least one row and column: {self.rows}x{self.columns}")
        self._fill_missing()

    @classmethod
    def default(cls) -> TableGrid:
        return cls(rows=DEFAULT_ROWS, columns=DEFAULT_COLUMNS)

    def keys(self) -> list[str]:
        return [cell_key(row, col) for row in range(self.rows) for col in range(self.columns)]

    def has_cell(self, key: str) -> bool:
        return key in self.cells

    def cell(self, key: str) -> TableCell | None:
        return self.cells.get(key)

    def reshape(self, rows: int | None = None, columns: int | None = None) -> None:
        """Change the row/column count, keeping cells that still fit."""
        new_rows = self.rows if rows is None else int(rows)
        new_columns = self.columns if columns is None else int(columns)
        if new_rows < 1 or new_columns < 1:
            raise ValueError(f"Table needs at least one row and column: {new_rows}x{new_columns}")

        self.cells = {
            key: cell
            for key, cell in self.cells.items()
            if _fits(key, new_rows, new_columns)
        }
        self.cell_widths = self.cell_widths[:new_columns]
        self.cell_heights = self.cell_heights[:new_rows]
        self.rows = new_rows
        self.columns = new_columns
        self._fill_missing()

    def column_offsets(self) -> list[int]:
        return _offsets(self.cell_widths)

    def row_offsets(self) -> list[int]:
        return _offsets(self.cell_heights)

    def _fill_missing(self) -> None:
        if len(self.cell_widths) < self.columns:
            self.cell_widths.extend([DEFAULT_CELL_WIDTH] * (self.columns - len(self.cell_widths)))
        if len(self.cell_heights) < self.rows:
            self.cell_heights.extend([DEFAULT_CELL_HEIGHT] * (self.rows - len(self.cell_heights)))
        del self.cell_widths[self.columns:]
        del self.cell_heights[self.rows:]

        ordered: dict[str, TableCell] = {}
        for key in self.keys():
            ordered[key] = self.cells.get(key) or TableCell()
        self.cells = ordered


def _fits(key: str, rows: int, columns: int) -> bool:
    try:
        row, col = parse_cell_key(key)
    except ValueError:
        return False
    return row < rows and col < columns


def _offsets(sizes: list[int]) -> list[int]:
    offsets = [0]
    for size in sizes[:-1]:
        offsets.append(offsets[-1] + size)
    return offsets
