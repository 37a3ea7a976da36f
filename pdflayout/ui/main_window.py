"""Main application window for PDF preview, field layout, and export."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QFileDialog,
    QMainWindow,
    QMessageBox,
    QScrollArea,
    QSplitter,
    QToolBar,
    QVBoxLayout,
    QWidget,
)

from pdflayout.config import LayoutConfig
from pdflayout.export.layout import LayoutExportError, write_layout
from pdflayout.interaction.drag import DragController
from pdflayout.interaction.gesture import GestureTracker
from pdflayout.interaction.resize import ResizeController
from pdflayout.model.document import PdfDocument
from pdflayout.pdf.loader import PdfLoadError, load_pdf
from pdflayout.pdf.renderer import PdfRenderError, render_document_pages
from pdflayout.pdf.writer import PdfWriteError, write_fillable_pdf
from pdflayout.state.session import LayoutSession
from pdflayout.ui.palette import DeleteArea, PalettePanel
from pdflayout.ui.settings_panel import SettingsPanel
from pdflayout.viewer.canvas import PageCanvas

logger = logging.getLogger(__name__)

MIN_ZOOM = 0.25
MAX_ZOOM = 5.0


class MainWindow(QMainWindow):
    def __init__(self, config: LayoutConfig | None = None) -> None:
        super().__init__()
        self.setWindowTitle("PDF Field Layout")
        self.resize(1400, 900)

        self._config = config or LayoutConfig()
        self._document: PdfDocument | None = None
        self._zoom = self._config.zoom

        self.session = LayoutSession(self._config)
        tracker = GestureTracker()
        self.drag_controller = DragController(self.session, tracker)
        self.resize_controller = ResizeController(self.session.registry, tracker)

        self.palette = PalettePanel(self.drag_controller)
        self.delete_area = DeleteArea(self.drag_controller)
        self.settings_panel = SettingsPanel(self.session)

        self.canvas = PageCanvas(self.session, self.drag_controller, self.resize_controller, self._config)
        self.canvas.content_ready.connect(self._on_content_ready)

        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(False)
        self.scroll_area.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.scroll_area.setWidget(self.canvas)

        sidebar = QWidget()
        sidebar_layout = QVBoxLayout(sidebar)
        sidebar_layout.addWidget(self.palette, 1)
        sidebar_layout.addWidget(self.delete_area)
        sidebar_layout.addWidget(self.settings_panel, 2)

        splitter = QSplitter()
        splitter.addWidget(sidebar)
        splitter.addWidget(self.scroll_area)
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 4)
        self.setCentralWidget(splitter)

        registry = self.session.registry
        registry.field_added.connect(self._show_field_count)
        registry.field_removed.connect(self._show_field_count)

        self._build_toolbar()
        self.statusBar().showMessage("Ready")

    def _build_toolbar(self) -> None:
        toolbar = QToolBar("Main Toolbar")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        open_action = QAction("Open PDF", self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.triggered.connect(self.open_pdf)
        toolbar.addAction(open_action)

        export_action = QAction("Export Layout", self)
        export_action.setShortcut(QKeySequence.StandardKey.Save)
        export_action.triggered.connect(self.export_layout)
        toolbar.addAction(export_action)

        fillable_action = QAction("Save Fillable PDF", self)
        fillable_action.triggered.connect(self.save_fillable_pdf)
        toolbar.addAction(fillable_action)

        toolbar.addSeparator()

        delete_action = QAction("Delete Field", self)
        delete_action.triggered.connect(self.delete_selected_field)
        toolbar.addAction(delete_action)

        toolbar.addSeparator()

        zoom_out_action = QAction("Zoom Out", self)
        zoom_out_action.setShortcut(QKeySequence.StandardKey.ZoomOut)
        zoom_out_action.triggered.connect(lambda: self.set_zoom(self._zoom - self._config.zoom_step))
        toolbar.addAction(zoom_out_action)

        zoom_in_action = QAction("Zoom In", self)
        zoom_in_action.setShortcut(QKeySequence.StandardKey.ZoomIn)
        zoom_in_action.triggered.connect(lambda: self.set_zoom(self._zoom + self._config.zoom_step))
        toolbar.addAction(zoom_in_action)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._close_document()
        super().closeEvent(event)

    def open_pdf(self, file_path: str | Path | None = None) -> None:
        if not file_path:
            file_path, _ = QFileDialog.getOpenFileName(
                self,
                "Open PDF",
                str(Path.home()),
                "PDF Files (*.pdf)",
            )
        if not file_path:
            return

        self._close_document()
        try:
            self._document = load_pdf(file_path)
        except PdfLoadError as exc:
            QMessageBox.critical(self, "Open Failed", str(exc))
            return

        self.session.reset(document_name=self._document.name, page_count=self._document.page_count)
        self._render_pages()
        self.statusBar().showMessage(f"Loaded: {file_path}")

    def export_layout(self) -> None:
        if self._document is None:
            QMessageBox.information(self, "No Document", "Open a PDF first.")
            return

        output_path, _ = QFileDialog.getSaveFileName(
            self,
            "Export Layout",
            str(self._document.path.with_name(self._config.export_filename)),
            "JSON Files (*.json)",
        )
        if not output_path:
            return

        try:
            write_layout(self.session, output_path)
        except LayoutExportError as exc:
            QMessageBox.critical(self, "Export Failed", str(exc))
            return
        self.statusBar().showMessage(f"Exported layout: {output_path}")

    def save_fillable_pdf(self) -> None:
        if self._document is None:
            QMessageBox.information(self, "No Document", "Open a PDF first.")
            return

        output_path, _ = QFileDialog.getSaveFileName(
            self,
            "Save Fillable PDF",
            str(self._document.path.with_stem(f"{self._document.path.stem}_fillable")),
            "PDF Files (*.pdf)",
        )
        if not output_path:
            return

        try:
            count = write_fillable_pdf(
                source_path=self._document.working_path,
                output_path=output_path,
                fields=self.session.registry.fields(),
                zoom=self._config.zoom,
                space=self.session.mapper.space,
            )
        except PdfWriteError as exc:
            QMessageBox.critical(self, "Save Failed", str(exc))
            return
        self.statusBar().showMessage(f"Saved {count} form field(s): {output_path}")

    def delete_selected_field(self) -> None:
        field_id = self.session.selection.selected_field_id
        if field_id is None or not self.session.registry.delete(field_id):
            self.statusBar().showMessage("No selected field to delete.")

    def set_zoom(self, zoom: float) -> None:
        zoom = max(MIN_ZOOM, min(MAX_ZOOM, zoom))
        if zoom == self._zoom:
            return
        self._zoom = zoom
        self._render_pages()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        if event.key() == Qt.Key.Key_Delete:
            self.delete_selected_field()
            event.accept()
            return
        super().keyPressEvent(event)

    def _render_pages(self) -> None:
        if self._document is None:
            self.canvas.clear_pages()
            return

        try:
            images = render_document_pages(self._document.handle, zoom=self._zoom)
        except PdfRenderError as exc:
            QMessageBox.critical(self, "Render Failed", str(exc))
            return
        self.canvas.set_pages(images, zoom=self._zoom)

    def _on_content_ready(self, page_count: int) -> None:
        self.session.page_count = page_count
        self.statusBar().showMessage(f"{page_count} page(s) at {self._zoom:.0%}")

    def _show_field_count(self, *args) -> None:
        del args
        self.statusBar().showMessage(f"{len(self.session.registry)} field(s)")

    def _close_document(self) -> None:
        if self._document is not None:
            self._document.close()
            self._document = None
        self.session.reset()
        self.canvas.clear_pages()
