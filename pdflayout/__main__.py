"""Desktop entry point: ``python -m pdflayout [file.pdf]``."""

from __future__ import annotations

import sys

from PySide6.QtWidgets import QApplication

from pdflayout.config import configure_logging, load_config
from pdflayout.ui.main_window import MainWindow


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv if argv is None else argv
    config = load_config()
    configure_logging(config.log_level)

    app = QApplication(argv)
    window = MainWindow(config)
    window.show()
    if len(argv) > 1:
        window.open_pdf(argv[1])
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
