from __future__ import annotations

import pytest

from pdflayout.config import LayoutConfig
from pdflayout.interaction.drag import (
    DragController,
    MoveFieldPayload,
    PalettePayload,
    decode_payload,
    encode_payload,
)
from pdflayout.model.field import FieldKind, PagePosition
from pdflayout.model.geometry import CoordinateSpace, Point, SurfaceRect
from pdflayout.pdf.writer import field_widgets
from pdflayout.state.session import LayoutSession


@pytest.fixture
def controller(session, tracker) -> DragController:
    return DragController(session, tracker)


def test_palette_drop_creates_field_on_resolved_page(session, controller, page_rects) -> None:
    payload = PalettePayload(FieldKind.DATE, "Date")

    assert controller.drop(payload, Point(200.0, 1020.0), page_rects) is True

    (field,) = session.registry.fields()
    assert field.kind is FieldKind.DATE
    assert field.title == "Date"
    assert field.position.page_index == 2
    assert field.position.x == pytest.approx(25.0)
    assert field.position.y == pytest.approx(25.0)
    assert session.selection.selected_field_id == field.id


def test_move_drop_updates_position_only(session, controller, page_rects) -> None:
    field = session.registry.create(FieldKind.TABLE, "Table", 1, 10.0, 10.0)
    session.selection.select_cell(field.id, "2-2")
    size_before = field.size

    assert controller.drop(MoveFieldPayload(field.id), Point(350.0, 400.0), page_rects) is True

    assert field.position == PagePosition(1, pytest.approx(50.0), pytest.approx(50.0))
    assert field.size == size_before
    assert field.kind is FieldKind.TABLE
    assert field.settings.selected_cell == "2-2"


def test_drop_outside_every_page_is_a_noop(session, controller, page_rects) -> None:
    field = session.registry.create(FieldKind.TEXT, "Name", 1, 10.0, 10.0)

    assert controller.drop(MoveFieldPayload(field.id), Point(300.0, 810.0), page_rects) is False
    assert controller.drop(PalettePayload(FieldKind.TEXT, "Text"), Point(5.0, 5.0), page_rects) is False
    assert controller.drop(PalettePayload(FieldKind.TEXT, "Text"), Point(300.0, 300.0), {}) is False

    assert field.position == PagePosition(1, 10.0, 10.0)
    assert len(session.registry) == 1


def test_move_of_unknown_field_is_a_noop(session, controller, page_rects) -> None:
    assert controller.drop(MoveFieldPayload(77), Point(300.0, 300.0), page_rects) is False
    assert len(session.registry) == 0


def test_nothing_changes_until_drop(session, controller, tracker, page_rects) -> None:
    field = session.registry.create(FieldKind.TEXT, "Name", 1, 10.0, 10.0)
    payload = MoveFieldPayload(field.id)

    assert controller.begin(payload, Point(110.0, 80.0))
    controller.update(Point(400.0, 500.0))
    assert field.position == PagePosition(1, 10.0, 10.0)
    assert tracker.session.current == Point(400.0, 500.0)

    controller.drop(payload, Point(400.0, 500.0), page_rects)
    assert tracker.session is None


def test_delete_target_removes_field_and_selection(session, controller) -> None:
    field = session.registry.create(FieldKind.TEXT, "Name", 1, 10.0, 10.0)
    controller.begin(MoveFieldPayload(field.id), Point(0.0, 0.0))

    assert controller.drop_on_delete_target(MoveFieldPayload(field.id)) is True

    assert field.id not in session.registry
    assert session.selection.selected_field_id is None
    assert not controller.active


def test_delete_target_ignores_palette_items(session, controller) -> None:
    session.registry.create(FieldKind.TEXT, "Name", 1, 10.0, 10.0)

    assert controller.drop_on_delete_target(PalettePayload(FieldKind.TEXT, "Text")) is False
    assert len(session.registry) == 1


def test_pixel_space_session_stores_page_local_pixels(qapp, tracker, page_rects) -> None:
    session = LayoutSession(LayoutConfig(coordinate_space=CoordinateSpace.PIXEL))
    controller = DragController(session, tracker)

    controller.drop(PalettePayload(FieldKind.TEXT, "Text"), Point(150.0, 900.0), page_rects)

    (field,) = session.registry.fields()
    assert field.position == PagePosition(2, 100.0, 80.0)


def test_clamping_session_keeps_field_on_page(qapp, tracker, page_rects) -> None:
    session = LayoutSession(LayoutConfig(clamp_positions=True))
    controller = DragController(session, tracker)
    field = session.registry.create(FieldKind.TEXT, "Name", 1, 10.0, 10.0)

    controller.drop(MoveFieldPayload(field.id), Point(650.0, 800.0), page_rects)

    assert field.position == PagePosition(1, 100.0, 100.0)


@pytest.mark.parametrize(
    "payload",
    [MoveFieldPayload(12), PalettePayload(FieldKind.MULTILINE, "Notes")],
)
def test_payload_codec_round_trip(payload) -> None:
    assert decode_payload(encode_payload(payload)) == payload


def test_payload_shape_decides_variant() -> None:
    assert decode_payload(b'{"id": 3, "kind": "text", "label": "Text"}') == MoveFieldPayload(3)
    assert decode_payload('{"kind": "table", "label": "Table"}') == PalettePayload(FieldKind.TABLE, "Table")


@pytest.mark.parametrize(
    "raw",
    [b"", b"not json", b"[1, 2]", b'{"id": "3"}', b'{"id": true}', b'{"kind": "checkbox"}', b"{}"],
)
def test_malformed_payloads_decode_to_none(raw: bytes) -> None:
    assert decode_payload(raw) is None


def test_pixel_space_drop_at_other_zoom_lands_on_same_page_spot(qapp, tracker) -> None:
    config = LayoutConfig(coordinate_space=CoordinateSpace.PIXEL)
    session = LayoutSession(config)
    controller = DragController(session, tracker)
    render_zoom = 2.5
    # 612x792 pt page rendered at 2.5 pixels per point.
    page = SurfaceRect(0.0, 0.0, 612.0 * render_zoom, 792.0 * render_zoom)

    controller.drop(
        PalettePayload(FieldKind.TEXT, "Text"),
        Point(page.width / 2, page.height / 2),
        {1: page},
        scale=render_zoom / config.zoom,
    )

    (field,) = session.registry.fields()
    assert field.position == PagePosition(1, pytest.approx(382.5), pytest.approx(495.0))
    (box,) = field_widgets(field, 612.0, 792.0, zoom=config.zoom, space=CoordinateSpace.PIXEL)
    assert box.x == pytest.approx(306.0)
    assert box.y == pytest.approx(792.0 - 396.0 - box.height)
