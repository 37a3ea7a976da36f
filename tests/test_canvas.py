from __future__ import annotations

import pytest
from PySide6.QtCore import QEvent, QPointF, Qt
from PySide6.QtGui import QImage, QMouseEvent

from pdflayout.interaction.drag import DragController
from pdflayout.interaction.resize import ResizeController
from pdflayout.model.field import FieldKind, FieldSize
from pdflayout.model.geometry import SurfaceRect
from pdflayout.viewer.canvas import PageCanvas


def _page(width: int, height: int) -> QImage:
    image = QImage(width, height, QImage.Format.Format_RGB888)
    image.fill(Qt.GlobalColor.white)
    return image


def _mouse(kind: QEvent.Type, x: float, y: float, held: bool) -> QMouseEvent:
    button = Qt.MouseButton.LeftButton if kind != QEvent.Type.MouseMove else Qt.MouseButton.NoButton
    buttons = Qt.MouseButton.LeftButton if held else Qt.MouseButton.NoButton
    point = QPointF(x, y)
    return QMouseEvent(kind, point, point, button, buttons, Qt.KeyboardModifier.NoModifier)


@pytest.fixture
def canvas(session, tracker) -> PageCanvas:
    widget = PageCanvas(
        session,
        DragController(session, tracker),
        ResizeController(session.registry, tracker),
        session.config,
    )
    yield widget
    widget.deleteLater()


@pytest.fixture
def table(session):
    # 3x4 grid of 100x30 cells inside a 300x150 box at (60, 80) on a 600x800 page.
    field = session.registry.create(FieldKind.TABLE, "Items", 1, 10.0, 10.0)
    session.registry.update_settings(field.id, {"columns": 3})
    return field


def test_pages_stack_with_gap_and_follow_zoom(session, canvas) -> None:
    reported: list[int] = []
    canvas.content_ready.connect(lambda count: reported.append(count))
    zoom = session.config.zoom

    canvas.set_pages([_page(600, 800), _page(400, 600)], zoom)

    assert reported == [2]
    assert canvas.page_rects() == {
        1: SurfaceRect(0.0, 0.0, 600.0, 800.0),
        2: SurfaceRect(100.0, 816.0, 400.0, 600.0),
    }

    canvas.set_pages([_page(1200, 1600), _page(800, 1200)], zoom * 2)

    assert reported == [2, 2]
    assert canvas.scale == pytest.approx(2.0)
    assert canvas.page_rects()[2] == SurfaceRect(200.0, 1616.0, 800.0, 1200.0)


def test_hit_test_separates_handles_boundaries_and_cells(session, canvas, table) -> None:
    canvas.set_pages([_page(600, 800)], session.config.zoom)

    def hit(x: float, y: float):
        result = canvas._hit_test(QPointF(x, y))
        return None if result is None else (result.area, result.row, result.col)

    assert hit(360.0, 230.0) == ("resize", None, None)
    assert hit(160.0, 95.0) == ("column", 0, 0)
    assert hit(110.0, 110.0) == ("row", 0, 0)
    assert hit(360.0, 95.0) == ("cell", 0, 2)
    assert hit(210.0, 125.0) == ("cell", 1, 1)
    assert hit(110.0, 210.0) == ("body", None, None)
    assert hit(5.0, 700.0) is None


def test_hit_test_scales_with_render_zoom(session, canvas, table) -> None:
    canvas.set_pages([_page(1200, 1600)], session.config.zoom * 2)

    result = canvas._hit_test(QPointF(320.0, 190.0))

    assert (result.field_id, result.area, result.col) == (table.id, "column", 0)
    assert canvas.field_rect(table).getRect() == pytest.approx((120.0, 160.0, 600.0, 300.0))


def test_handle_drag_resizes_while_button_held(session, canvas, tracker, table) -> None:
    canvas.set_pages([_page(600, 800)], session.config.zoom)

    canvas.mousePressEvent(_mouse(QEvent.Type.MouseButtonPress, 360.0, 230.0, held=True))
    canvas.mouseMoveEvent(_mouse(QEvent.Type.MouseMove, 380.0, 240.0, held=True))
    canvas.mouseReleaseEvent(_mouse(QEvent.Type.MouseButtonRelease, 380.0, 240.0, held=False))

    assert table.size == FieldSize(320.0, 160.0)
    assert tracker.session is None


def test_lost_release_ends_resize_on_next_hover(session, canvas, tracker, table) -> None:
    canvas.set_pages([_page(600, 800)], session.config.zoom)

    canvas.mousePressEvent(_mouse(QEvent.Type.MouseButtonPress, 360.0, 230.0, held=True))
    assert tracker.session is not None
    canvas.mouseMoveEvent(_mouse(QEvent.Type.MouseMove, 500.0, 500.0, held=False))
    canvas.mouseMoveEvent(_mouse(QEvent.Type.MouseMove, 550.0, 600.0, held=False))

    assert tracker.session is None
    assert table.size == FieldSize(300, 150)
