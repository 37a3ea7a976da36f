"""Field palette and delete drop target."""

from __future__ import annotations

from PySide6.QtCore import QMimeData, Qt
from PySide6.QtGui import QColor, QDrag
from PySide6.QtWidgets import QLabel, QListWidget, QListWidgetItem

from pdflayout.interaction.drag import (
    PAYLOAD_MIME_TYPE,
    DragController,
    MoveFieldPayload,
    PalettePayload,
    decode_payload,
    encode_payload,
)
from pdflayout.model.field import KIND_SPECS, FieldKind
from pdflayout.model.geometry import Point

KIND_ROLE = Qt.ItemDataRole.UserRole + 1


class PalettePanel(QListWidget):
    def __init__(self, drag_controller: DragController) -> None:
        super().__init__()
        self._drag = drag_controller
        self.setDragEnabled(True)
        self.setSelectionMode(QListWidget.SelectionMode.SingleSelection)

        for kind, spec in KIND_SPECS.items():
            item = QListWidgetItem(spec.label)
            item.setData(KIND_ROLE, kind.value)
            color = QColor(spec.color)
            color.setAlpha(80)
            item.setBackground(color)
            self.addItem(item)

    def startDrag(self, supported_actions) -> None:  # type: ignore[override]
        del supported_actions
        item = self.currentItem()
        if item is None:
            return
        payload = PalettePayload(kind=FieldKind(item.data(KIND_ROLE)), label=item.text())
        mime = QMimeData()
        mime.setData(PAYLOAD_MIME_TYPE, encode_payload(payload))
        drag = QDrag(self)
        drag.setMimeData(mime)

        if not self._drag.begin(payload, Point(0.0, 0.0)):
            return
        try:
            drag.exec(Qt.DropAction.CopyAction)
        finally:
            self._drag.end()


class DeleteArea(QLabel):
    def __init__(self, drag_controller: DragController) -> None:
        super().__init__("Drop here to delete")
        self._drag = drag_controller
        self.setAcceptDrops(True)
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setMinimumHeight(48)
        self._set_highlight(False)

    def dragEnterEvent(self, event) -> None:  # type: ignore[override]
        payload = self._payload(event)
        if isinstance(payload, MoveFieldPayload):
            self._set_highlight(True)
            event.acceptProposedAction()

    def dragLeaveEvent(self, event) -> None:  # type: ignore[override]
        del event
        self._set_highlight(False)

    def dropEvent(self, event) -> None:  # type: ignore[override]
        self._set_highlight(False)
        payload = self._payload(event)
        if payload is not None and self._drag.drop_on_delete_target(payload):
            event.acceptProposedAction()
        else:
            event.ignore()

    def _payload(self, event):
        mime = event.mimeData()
        if not mime.hasFormat(PAYLOAD_MIME_TYPE):
            return None
        return decode_payload(bytes(mime.data(PAYLOAD_MIME_TYPE)))

    def _set_highlight(self, active: bool) -> None:
        color = "red" if active else "#FFCCCB"
        self.setStyleSheet(f"background-color: {color}; border: 1px dashed #c62828;")
