from __future__ import annotations

import pytest

from pdflayout.interaction.drag import DragController, PalettePayload
from pdflayout.interaction.gesture import CellResizeMode, GestureKind
from pdflayout.interaction.resize import ResizeController
from pdflayout.model.field import FieldKind, FieldSize, min_size
from pdflayout.model.geometry import Point


@pytest.fixture
def controller(session, tracker) -> ResizeController:
    return ResizeController(session.registry, tracker)


def _drag_handle(controller: ResizeController, field_id: int, dx: float, dy: float) -> None:
    start = Point(500.0, 500.0)
    assert controller.begin_box(field_id, start)
    controller.update(Point(start.x + dx / 2, start.y + dy / 2))
    controller.update(Point(start.x + dx, start.y + dy))
    controller.end()


def test_signature_resize_clamps_to_minimum(session, controller) -> None:
    field = session.registry.create(FieldKind.SIGNATURE, "Sign", 1, 0.0, 0.0)
    assert field.size == FieldSize(150, 150)

    _drag_handle(controller, field.id, -1000, -1000)

    assert field.size == FieldSize(60, 60)
    assert not controller.active


@pytest.mark.parametrize("kind", list(FieldKind))
@pytest.mark.parametrize("dx, dy", [(-10_000, -10_000), (-35, 12), (0, 0), (250, -5), (10_000, 10_000)])
def test_box_resize_never_goes_below_kind_minimum(session, controller, kind, dx, dy) -> None:
    field = session.registry.create(kind, "", 1, 0.0, 0.0)
    min_width, min_height = min_size(kind)

    _drag_handle(controller, field.id, dx, dy)

    assert field.size.width >= min_width
    assert field.size.height >= min_height


def test_box_resize_tracks_pointer_from_start_size(session, controller) -> None:
    field = session.registry.create(FieldKind.TEXT, "Name", 1, 0.0, 0.0)

    assert controller.begin_box(field.id, Point(10.0, 10.0))
    controller.update(Point(-500.0, -500.0))
    assert field.size == FieldSize(100, 30)
    controller.update(Point(40.0, 25.0))
    controller.end()

    assert field.size == FieldSize(180, 45)


def test_column_resize_floors_at_thirty_and_leaves_siblings(session, controller) -> None:
    field = session.registry.create(FieldKind.TABLE, "Table", 1, 0.0, 0.0)

    assert controller.begin_cell(field.id, 0, 2, CellResizeMode.HORIZONTAL, Point(300.0, 10.0))
    controller.update(Point(100.0, 60.0))
    controller.end()

    assert field.grid.cell_widths == [100, 100, 30, 100]
    assert field.grid.cell_heights == [30, 30, 30, 30]


def test_row_resize_floors_at_twenty(session, controller) -> None:
    field = session.registry.create(FieldKind.TABLE, "Table", 1, 0.0, 0.0)

    assert controller.begin_cell(field.id, 1, 0, "vertical", Point(0.0, 60.0))
    controller.update(Point(0.0, 75.0))
    assert field.grid.cell_heights == [30, 45, 30, 30]
    controller.update(Point(0.0, -100.0))
    controller.end()

    assert field.grid.cell_heights == [30, 20, 30, 30]
    assert field.grid.cell_widths == [100, 100, 100, 100]


def test_cell_resize_requires_table_and_valid_cell(session, controller) -> None:
    text = session.registry.create(FieldKind.TEXT, "Name", 1, 0.0, 0.0)
    table = session.registry.create(FieldKind.TABLE, "Table", 1, 0.0, 0.0)

    assert not controller.begin_cell(text.id, 0, 0, CellResizeMode.HORIZONTAL, Point(0.0, 0.0))
    assert not controller.begin_cell(table.id, 0, 4, CellResizeMode.HORIZONTAL, Point(0.0, 0.0))
    assert not controller.begin_box(999, Point(0.0, 0.0))
    assert not controller.active


def test_cell_resize_keeps_grid_consistent(session, controller) -> None:
    field = session.registry.create(FieldKind.TABLE, "Table", 1, 0.0, 0.0)
    session.registry.update_settings(field.id, {"rows": 3, "columns": 5})

    controller.begin_cell(field.id, 2, 4, CellResizeMode.HORIZONTAL, Point(0.0, 0.0))
    controller.update(Point(55.0, 0.0))
    controller.end()

    grid = field.grid
    assert grid.cell_widths == [100, 100, 100, 100, 155]
    assert len(grid.cell_heights) == grid.rows == 3
    assert len(grid.cells) == 15


def test_update_without_begin_is_ignored(session, controller) -> None:
    field = session.registry.create(FieldKind.TEXT, "Name", 1, 0.0, 0.0)

    assert controller.update(Point(400.0, 400.0)) is False
    assert field.size == FieldSize(150, 30)


def test_field_deleted_mid_gesture_still_ends_cleanly(session, controller, tracker) -> None:
    field = session.registry.create(FieldKind.TEXT, "Name", 1, 0.0, 0.0)
    controller.begin_box(field.id, Point(0.0, 0.0))
    session.registry.delete(field.id)

    assert controller.update(Point(10.0, 10.0)) is False
    controller.end()

    assert tracker.session is None


def test_only_one_gesture_at_a_time(session, controller, tracker) -> None:
    field = session.registry.create(FieldKind.TABLE, "Table", 1, 0.0, 0.0)
    drag = DragController(session, tracker)

    assert controller.begin_box(field.id, Point(0.0, 0.0))
    assert not controller.begin_cell(field.id, 0, 0, CellResizeMode.VERTICAL, Point(0.0, 0.0))
    assert not drag.begin(PalettePayload(FieldKind.TEXT, "Text"), Point(0.0, 0.0))
    assert tracker.session.kind is GestureKind.RESIZE

    drag.end()
    assert controller.active
    controller.end()
    assert tracker.session is None
