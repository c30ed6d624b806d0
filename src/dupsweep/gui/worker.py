"""
Qt worker runnable — follows modern Qt pattern: QRunnable + QThreadPool.
Wraps any scan command (duplicates, large files, disk usage) so its scan runs off the UI thread.
"""
from typing import Optional

from PySide6.QtCore import QRunnable, QObject, Signal, QMutex, QMutexLocker

from dupsweep.commands import ScanCommand
from dupsweep.core.progress import ProgressChannel


class WorkerSignals(QObject):
    """Separate QObject to hold signals (QRunnable cannot emit signals directly)."""
    progress = Signal(str, float)  # label, fraction (-1.0 when the scan has no overall fraction)
    finished = Signal(object)      # scan result
    error = Signal(str)


class ScanWorker(QRunnable):
    """
    Worker runnable that executes a scan command in thread pool.
    stop() cancels the command's token, so the scan winds down at its next check.
    Automatically deleted after execution (setAutoDelete=True).

    With a `channel`, progress events are published to it instead of the
    progress signal, and the UI polls the channel on its own timer.
    """
    def __init__(self, command: ScanCommand, channel: Optional[ProgressChannel] = None):
        super().__init__()
        self.command = command
        self.channel = channel
        self.signals = WorkerSignals()
        self._stopped = False
        self._mutex = QMutex()
        self.setAutoDelete(True)

    def stop(self):
        """Sets the stopped flag and cancels the running scan."""
        with QMutexLocker(self._mutex):
            self._stopped = True
        self.command.cancel()

    def is_stopped(self) -> bool:
        """Returns True if the worker has been requested to stop."""
        with QMutexLocker(self._mutex):
            return self._stopped

    def safe_progress_emit(self, label: str, fraction: float = -1.0):
        """Emits progress signal safely with mutex protection."""
        with QMutexLocker(self._mutex):
            if self._stopped:
                return
            if self.channel is not None:
                self.channel.publish(label, float(fraction))
            else:
                try:
                    self.signals.progress.emit(label, float(fraction))
                except RuntimeError:
                    pass

    def run(self):
        """Main execution method. Runs in thread pool thread."""
        try:
            if self.is_stopped():
                return

            result = self.command.execute(progress_callback=self.safe_progress_emit)

            if not self.is_stopped():
                self.signals.finished.emit(result)
        except Exception as e:
            if not self.is_stopped():
                self.signals.error.emit(f"{type(e).__name__}: {str(e)}")
