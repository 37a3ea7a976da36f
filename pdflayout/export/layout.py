"""Layout document export (field geometry and metadata as JSON)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pdflayout.model.field import LayoutField
from pdflayout.model.geometry import CoordinateSpace
from pdflayout.state.session import LayoutSession

logger = logging.getLogger(__name__)


class LayoutExportError(RuntimeError):
    """Raised when the layout file cannot be written."""


def export_layout(session: LayoutSession, full: bool = False) -> dict[str, Any]:
    space = session.mapper.space
    document: dict[str, Any] = {"documentName": session.document_name}
    if full:
        document["coordinateSpace"] = space.value
    document["fields"] = [_project(field, space, full) for field in session.registry]
    return document


def dumps_layout(session: LayoutSession, full: bool = False) -> str:
    return json.dumps(export_layout(session, full=full), indent=2)


def write_layout(session: LayoutSession, path: str | Path, full: bool = False) -> Path:
    target = Path(path)
    try:
        target.write_text(dumps_layout(session, full=full) + "\n", encoding="utf-8")
    except OSError as exc:
        raise LayoutExportError(f"Failed to write layout: {target}") from exc
    logger.info("Exported %d field(s) to %s", len(session.registry), target)
    return target


def _project(field: LayoutField, space: CoordinateSpace, full: bool) -> dict[str, Any]:
    x_key, y_key = ("xPct", "yPct") if space is CoordinateSpace.PERCENT else ("x", "y")
    data: dict[str, Any] = {
        "id": field.id,
        "kind": field.kind.value,
        "title": field.title,
        "pageIndex": field.position.page_index,
        x_key: field.position.x,
        y_key: field.position.y,
        "width": field.size.width,
        "height": field.size.height,
    }
    if full:
        data["settings"] = field.settings.to_dict(field.kind)
    return data
