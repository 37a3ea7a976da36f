"""Settings editor for the selected field and table cell."""

from __future__ import annotations

from PySide6.QtGui import QDoubleValidator
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QFormLayout,
    QLabel,
    QLineEdit,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from pdflayout.model.field import FieldKind, LayoutField
from pdflayout.model.table import CellType
from pdflayout.state.session import LayoutSession


class SettingsPanel(QWidget):
    def __init__(self, session: LayoutSession) -> None:
        super().__init__()
        self._session = session
        self._populating = False

        self._empty_label = QLabel("No field selected")

        self.title_edit = QLineEdit()
        self.title_edit.textEdited.connect(self._on_title_edited)
        self.kind_edit = QLineEdit()
        self.kind_edit.setReadOnly(True)
        self.required_check = QCheckBox("Required")
        self.required_check.toggled.connect(lambda checked: self._apply({"required": checked}))

        self.min_edit = QLineEdit()
        self.min_edit.setValidator(QDoubleValidator())
        self.min_edit.textEdited.connect(lambda text: self._apply_number("minimum", text))
        self.max_edit = QLineEdit()
        self.max_edit.setValidator(QDoubleValidator())
        self.max_edit.textEdited.connect(lambda text: self._apply_number("maximum", text))

        self.max_lines_spin = QSpinBox()
        self.max_lines_spin.setRange(0, 999)
        self.max_lines_spin.setSpecialValueText("Unlimited")
        self.max_lines_spin.valueChanged.connect(lambda value: self._apply({"max_lines": value or None}))

        self.rows_spin = QSpinBox()
        self.rows_spin.setRange(1, 100)
        self.rows_spin.valueChanged.connect(lambda value: self._apply({"rows": value}))
        self.columns_spin = QSpinBox()
        self.columns_spin.setRange(1, 100)
        self.columns_spin.valueChanged.connect(lambda value: self._apply({"columns": value}))

        self.cell_title_edit = QLineEdit()
        self.cell_title_edit.setPlaceholderText("Cell Title")
        self.cell_title_edit.textEdited.connect(self._on_cell_title_edited)
        self.cell_type_combo = QComboBox()
        for cell_type in CellType:
            self.cell_type_combo.addItem(cell_type.value.capitalize(), cell_type.value)
        self.cell_type_combo.currentIndexChanged.connect(self._on_cell_type_changed)

        self._common = _section(("Title", self.title_edit), ("Type", self.kind_edit))
        self._number = _section(("Min Value", self.min_edit), ("Max Value", self.max_edit))
        self._multiline = _section(("Max Lines", self.max_lines_spin))
        self._table = _section(("Rows", self.rows_spin), ("Columns", self.columns_spin))
        self._cell = _section(("Selected Cell", self.cell_title_edit), ("Cell Type", self.cell_type_combo))

        layout = QVBoxLayout(self)
        layout.addWidget(QLabel("<b>Field Settings</b>"))
        layout.addWidget(self._empty_label)
        for section in (self._common, self._number, self._multiline, self._table, self._cell):
            layout.addWidget(section)
        layout.addWidget(self.required_check)
        layout.addStretch(1)

        session.selection.selection_changed.connect(self.refresh)
        session.registry.field_changed.connect(self._on_field_changed)
        session.registry.cleared.connect(self.refresh)
        self.refresh()

    def refresh(self, *args) -> None:
        del args
        field = self._session.selected_field()
        self._populating = True
        try:
            self._show_for(field)
            if field is not None:
                self._populate(field)
        finally:
            self._populating = False

    def _show_for(self, field: LayoutField | None) -> None:
        kind = field.kind if field is not None else None
        self._empty_label.setVisible(field is None)
        self._common.setVisible(field is not None)
        self.required_check.setVisible(field is not None)
        self._number.setVisible(kind is FieldKind.NUMBER)
        self._multiline.setVisible(kind is FieldKind.MULTILINE)
        self._table.setVisible(kind is FieldKind.TABLE)
        self._cell.setVisible(kind is FieldKind.TABLE and self._session.selected_cell() is not None)

    def _populate(self, field: LayoutField) -> None:
        settings = field.settings
        if self.title_edit.text() != field.title:
            self.title_edit.setText(field.title)
        self.kind_edit.setText(field.kind.value)
        self.required_check.setChecked(settings.required)
        _sync_number(self.min_edit, settings.minimum)
        _sync_number(self.max_edit, settings.maximum)
        self.max_lines_spin.setValue(settings.max_lines or 0)
        if field.grid is not None:
            self.rows_spin.setValue(field.grid.rows)
            self.columns_spin.setValue(field.grid.columns)
        cell = self._session.selected_cell()
        if cell is not None:
            if self.cell_title_edit.text() != cell.title:
                self.cell_title_edit.setText(cell.title)
            self.cell_type_combo.setCurrentIndex(self.cell_type_combo.findData(cell.cell_type.value))

    def _apply(self, partial: dict) -> None:
        field = self._session.selected_field()
        if self._populating or field is None:
            return
        self._session.registry.update_settings(field.id, partial)

    def _apply_number(self, key: str, text: str) -> None:
        if not text:
            self._apply({key: None})
            return
        try:
            value = float(text)
        except ValueError:
            return
        self._apply({key: value})

    def _on_title_edited(self, text: str) -> None:
        field = self._session.selected_field()
        if field is not None:
            self._session.registry.update_title(field.id, text)

    def _on_cell_title_edited(self, text: str) -> None:
        field = self._session.selected_field()
        key = self._session.selection.selected_cell()
        if field is not None and key is not None:
            self._session.update_cell_title(field.id, key, text)

    def _on_cell_type_changed(self, index: int) -> None:
        field = self._session.selected_field()
        key = self._session.selection.selected_cell()
        if self._populating or field is None or key is None or index < 0:
            return
        self._session.update_cell_type(field.id, key, self.cell_type_combo.itemData(index))

    def _on_field_changed(self, field_id: int) -> None:
        if field_id == self._session.selection.selected_field_id:
            self.refresh()


def _sync_number(edit: QLineEdit, value: float | None) -> None:
    try:
        shown = float(edit.text()) if edit.text() else None
    except ValueError:
        shown = None
    if shown != value:
        edit.setText("" if value is None else f"{value:g}")


def _section(*rows: tuple[str, QWidget]) -> QWidget:
    container = QWidget()
    form = QFormLayout(container)
    form.setContentsMargins(0, 0, 0, 0)
    for label, widget in rows:
        form.addRow(label, widget)
    return container
