"""Single active pointer gesture shared by the drag and resize controllers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
import logging

from pdflayout.model.geometry import Point

logger = logging.getLogger(__name__)


class GestureKind(str, Enum):
    DRAG = "drag"
    RESIZE = "resize"
    CELL_RESIZE = "cell_resize"


class CellResizeMode(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(slots=True, frozen=True)
class GestureSession:
    """Everything captured at pointer-down plus the latest pointer position."""

    kind: GestureKind
    field_id: int | None
    start: Point
    current: Point
    start_width: float = 0.0
    start_height: float = 0.0
    row: int | None = None
    col: int | None = None
    mode: CellResizeMode | None = None

    @property
    def dx(self) -> float:
        return self.current.x - self.start.x

    @property
    def dy(self) -> float:
        return self.current.y - self.start.y


class GestureTracker:
    def __init__(self) -> None:
        self._session: GestureSession | None = None

    @property
    def session(self) -> GestureSession | None:
        return self._session

    @property
    def active(self) -> bool:
        return self._session is not None

    def begin(self, session: GestureSession) -> GestureSession | None:
        if self._session is not None:
            logger.debug(
                "Ignoring %s gesture while %s gesture is active",
                session.kind.value,
                self._session.kind.value,
            )
            return None
        self._session = session
        return session

    def update(self, pointer: Point) -> GestureSession | None:
        if self._session is None:
            return None
        self._session = replace(self._session, current=pointer)
        return self._session

    def end(self) -> GestureSession | None:
        session, self._session = self._session, None
        return session
