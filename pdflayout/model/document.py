"""Source PDF handle and metadata for a layout session."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path

import fitz

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PdfDocument:
    path: Path
    working_path: Path
    handle: fitz.Document

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def page_count(self) -> int:
        return self.handle.page_count

    def page_size_pt(self, page_index: int) -> tuple[float, float]:
        """Media box size of a 1-based page, in PDF points."""
        page = self.handle.load_page(page_index - 1)
        return float(page.rect.width), float(page.rect.height)

    def close(self) -> None:
        if not self.handle.is_closed:
            self.handle.close()
        if self.working_path != self.path and self.working_path.exists():
            try:
                os.remove(self.working_path)
            except OSError as exc:
                logger.warning("Could not remove working copy %s: %s", self.working_path, exc)
