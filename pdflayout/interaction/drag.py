"""Drop handling for moving fields and creating them from the palette."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from typing import Mapping, Union

from pdflayout.interaction.gesture import GestureKind, GestureSession, GestureTracker
from pdflayout.model.field import FieldKind
from pdflayout.model.geometry import Point, SurfaceRect, resolve_page
from pdflayout.state.session import LayoutSession

logger = logging.getLogger(__name__)

PAYLOAD_MIME_TYPE = "application/x-pdflayout-field"


@dataclass(slots=True, frozen=True)
class MoveFieldPayload:
    field_id: int


@dataclass(slots=True, frozen=True)
class PalettePayload:
    kind: FieldKind
    label: str


DragPayload = Union[MoveFieldPayload, PalettePayload]


def encode_payload(payload: DragPayload) -> bytes:
    if isinstance(payload, MoveFieldPayload):
        data: dict[str, object] = {"id": payload.field_id}
    else:
        data = {"kind": FieldKind(payload.kind).value, "label": payload.label}
    return json.dumps(data, sort_keys=True).encode("utf-8")


def decode_payload(raw: bytes | str) -> DragPayload | None:
    """Decode a drag payload; an ``id`` key means an existing field is moving."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError, UnicodeDecodeError):
        logger.debug("Discarding undecodable drag payload")
        return None
    if not isinstance(data, dict):
        return None

    if "id" in data:
        field_id = data["id"]
        if isinstance(field_id, bool) or not isinstance(field_id, int):
            return None
        return MoveFieldPayload(field_id)

    try:
        kind = FieldKind(data.get("kind"))
    except ValueError:
        logger.debug("Discarding drag payload with unknown kind: %r", data.get("kind"))
        return None
    return PalettePayload(kind=kind, label=str(data.get("label") or ""))


class DragController:
    """Applies drops to the registry; nothing changes until the drop lands."""

    def __init__(self, session: LayoutSession, tracker: GestureTracker) -> None:
        self._session = session
        self._tracker = tracker

    @property
    def active(self) -> bool:
        session = self._tracker.session
        return session is not None and session.kind is GestureKind.DRAG

    def begin(self, payload: DragPayload, pointer: Point) -> bool:
        field_id = payload.field_id if isinstance(payload, MoveFieldPayload) else None
        session = GestureSession(kind=GestureKind.DRAG, field_id=field_id, start=pointer, current=pointer)
        return self._tracker.begin(session) is not None

    def update(self, pointer: Point) -> None:
        if self.active:
            self._tracker.update(pointer)

    def end(self) -> None:
        if self.active:
            self._tracker.end()

    def drop(
        self,
        payload: DragPayload,
        point: Point,
        page_rects: Mapping[int, SurfaceRect],
        scale: float = 1.0,
    ) -> bool:
        """Apply a drop at canvas ``point``; ``scale`` is render zoom over reference zoom."""
        try:
            return self._apply_drop(payload, point, page_rects, scale)
        finally:
            self.end()

    def drop_on_delete_target(self, payload: DragPayload) -> bool:
        try:
            if not isinstance(payload, MoveFieldPayload):
                return False
            return self._session.registry.delete(payload.field_id)
        finally:
            self.end()

    def _apply_drop(
        self,
        payload: DragPayload,
        point: Point,
        page_rects: Mapping[int, SurfaceRect],
        scale: float,
    ) -> bool:
        resolved = resolve_page(point, page_rects)
        if resolved is None:
            return False
        page_index, rect = resolved
        x, y = self._session.mapper.to_page(point, rect, scale)

        registry = self._session.registry
        if isinstance(payload, MoveFieldPayload):
            return registry.move(payload.field_id, page_index, x, y)
        registry.create(payload.kind, payload.label, page_index, x, y)
        return True
