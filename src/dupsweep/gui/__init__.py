"""
Qt integration for dupsweep. Requires the [gui] extra (PySide6).
"""
from .worker import ScanWorker, WorkerSignals

__all__ = ["ScanWorker", "WorkerSignals"]
