"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/progress.py
Progress delivery for long-running scans.

ProgressReporter wraps a caller callback so that:
  • the reported fraction never decreases
  • the scan phase never moves backwards (no "collecting" after "hashing")
  • a failing callback never breaks the scan
ProgressChannel is a bounded queue a scan can write to without ever blocking.
"""
import logging
import queue
from typing import Callable, List, Optional, Tuple

from dupsweep.core.models import ScanPhase

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, float], None]
LabelCallback = Callable[[str], None]


class ProgressReporter:
    """Monotonic, exception-safe adapter around a `(label, fraction)` callback."""

    def __init__(self, callback: Optional[ProgressCallback] = None):
        self._callback = callback
        self._fraction = 0.0
        self._phase = ScanPhase.IDLE

    @property
    def fraction(self) -> float:
        return self._fraction

    @property
    def phase(self) -> ScanPhase:
        return self._phase

    def enter_phase(self, phase: ScanPhase) -> bool:
        """Moves to `phase`. Returns False (and stays put) if that would go backwards."""
        if phase < self._phase:
            logger.debug(f"Ignoring phase regression {self._phase.name} -> {phase.name}")
            return False
        logger.debug(f"Entering phase: {phase.display_name}")
        self._phase = phase
        return True

    def report(self, label: str, fraction: Optional[float] = None) -> None:
        if fraction is not None:
            fraction = min(max(fraction, 0.0), 1.0)
            self._fraction = max(self._fraction, fraction)
        if self._callback is None:
            return
        try:
            self._callback(label, self._fraction)
        except Exception:
            logger.exception("Progress callback failed")

    def label_callback(self, fraction: float = 0.0) -> LabelCallback:
        """
        Adapts this reporter to a label-only callback (as used by traversal),
        reporting every label at `fraction`.
        """
        def _report(label: str) -> None:
            self.report(label, fraction)
        return _report

    def sub_range(self, start: float, end: float, done: int, total: int) -> float:
        """Maps `done / total` into the [start, end] band of the overall fraction."""
        if total <= 0:
            return end
        return start + (end - start) * (done / total)


def safe_label_callback(callback: Optional[LabelCallback]) -> Optional[LabelCallback]:
    """Wraps a label-only callback so its exceptions are logged, not raised."""
    if callback is None:
        return None

    def _report(label: str) -> None:
        try:
            callback(label)
        except Exception:
            logger.exception("Progress callback failed")
    return _report


class ProgressChannel:
    """
    Bounded single-producer/single-consumer event queue.

    The scan side calls `publish` (usable directly as a progress callback);
    events that do not fit are dropped instead of blocking the scan.
    """

    def __init__(self, maxsize: int = 256):
        if maxsize <= 0:
            raise ValueError("Channel size must be positive")
        self._queue: "queue.Queue[Tuple]" = queue.Queue(maxsize=maxsize)
        self.dropped = 0

    def publish(self, *event) -> None:
        try:
            self._queue.put_nowait(tuple(event))
        except queue.Full:
            self.dropped += 1

    __call__ = publish

    def get(self, timeout: Optional[float] = None) -> Optional[Tuple]:
        """Blocks up to `timeout` seconds for the next event; None if there is none."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> List[Tuple]:
        events = []
        while True:
            try:
                events.append(self._queue.get_nowait())
            except queue.Empty:
                return events
