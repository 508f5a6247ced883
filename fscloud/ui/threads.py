from typing import Any, Callable, Optional

from PySide6.QtCore import QObject, QRunnable, QThread, QThreadPool, QTimer, Qt, Signal, Slot

from ..utils import get_logger


class WorkerSignals(QObject):
    finished = Signal()
    error = Signal(Exception)
    result = Signal(object)


class Worker(QRunnable):
    def __init__(self, fn: Callable[[], Any]) -> None:
        super().__init__()
        self.fn = fn
        self.signals = WorkerSignals()
        self.logger = get_logger("fscloud.qt")

    @Slot()
    def run(self) -> None:
        self.logger.debug("Worker start thread=%s", QThread.currentThread())
        try:
            result = self.fn()
        except Exception as exc:
            self.logger.debug("Worker error thread=%s exc=%s", QThread.currentThread(), exc)
            self.signals.error.emit(exc)
        else:
            self.logger.debug("Worker result thread=%s", QThread.currentThread())
            self.signals.result.emit(result)
        finally:
            self.logger.debug("Worker finished thread=%s", QThread.currentThread())
            self.signals.finished.emit()


class TaskRunner:
    """Runs work on the global thread pool; callbacks land on the GUI thread."""

    def __init__(self) -> None:
        self.pool = QThreadPool.globalInstance()
        self.logger = get_logger("fscloud.qt")
        self._workers = set()

    def run(
        self,
        fn: Callable[[], Any],
        on_result: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        on_finished: Optional[Callable[[], None]] = None,
    ) -> Worker:
        worker = Worker(fn)
        self._workers.add(worker)
        if on_result:
            worker.signals.result.connect(on_result, Qt.QueuedConnection)
        if on_error:
            worker.signals.error.connect(on_error, Qt.QueuedConnection)
        if on_finished:
            worker.signals.finished.connect(on_finished, Qt.QueuedConnection)
        worker.signals.finished.connect(lambda: self._workers.discard(worker), Qt.QueuedConnection)
        self.logger.debug("TaskRunner start worker thread=%s", QThread.currentThread())
        self.pool.start(worker)
        return worker


class ScheduledCall:
    def __init__(self, timer: QTimer) -> None:
        self._timer: Optional[QTimer] = timer
        timer.timeout.connect(self._release)

    def _release(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.deleteLater()

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._release()


class QtScheduler:
    """Single-shot QTimer scheduling for the search debounce."""

    def __init__(self, parent: Optional[QObject] = None) -> None:
        self.parent = parent

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledCall:
        timer = QTimer(self.parent)
        timer.setSingleShot(True)
        timer.setInterval(delay_ms)
        timer.timeout.connect(callback)
        call = ScheduledCall(timer)
        timer.start()
        return call
