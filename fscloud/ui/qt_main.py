import faulthandler
import os
import sys

from PySide6.QtWidgets import QApplication

from ..config import load_settings
from ..utils import append_log_line, get_logger
from .qt_app import MainWindow


def main() -> int:
    logger = get_logger("fscloud.qt")
    settings = load_settings()
    if os.getenv("FSCLOUD_FAULTHANDLER", "1") not in ("0", "false", "FALSE"):
        fault_log = os.path.join(os.getcwd(), "fscloud_fault.log")
        try:
            fh = open(fault_log, "a", buffering=1, encoding="utf-8")
            faulthandler.enable(file=fh, all_threads=True)
            append_log_line(fault_log, "faulthandler enabled")
            logger.debug("Faulthandler enabled -> %s", fault_log)
        except OSError as exc:
            logger.info("Faulthandler enable failed: %s", exc)
    app = QApplication(sys.argv)
    win = MainWindow(settings)
    win.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
