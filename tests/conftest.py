from __future__ import annotations

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import fitz
import pytest
from PySide6.QtWidgets import QApplication

from pdflayout.config import LayoutConfig
from pdflayout.interaction.gesture import GestureTracker
from pdflayout.model.geometry import SurfaceRect
from pdflayout.state.session import LayoutSession


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def session(qapp) -> LayoutSession:
    return LayoutSession(LayoutConfig(), document_name="invoice.pdf")


@pytest.fixture
def tracker() -> GestureTracker:
    return GestureTracker()


@pytest.fixture
def page_rects() -> dict[int, SurfaceRect]:
    # Two 600x800 pages stacked with a 20px gap, offset 50px from the left.
    return {
        1: SurfaceRect(50.0, 0.0, 600.0, 800.0),
        2: SurfaceRect(50.0, 820.0, 600.0, 800.0),
    }


@pytest.fixture
def blank_pdf(tmp_path):
    path = tmp_path / "blank.pdf"
    document = fitz.open()
    document.new_page(width=612, height=792)
    document.new_page(width=612, height=792)
    document.save(path)
    document.close()
    return path
