"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/cancellation.py
Cancellation token shared between a scan session and its worker.
"""
import threading


class CancellationToken:
    """
    Set-only flag checked by traversal and hashing loops.
    Safe to set and read from any thread.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def __call__(self) -> bool:
        # Lets a token stand in for the `stopped_flag` callables used elsewhere.
        return self._event.is_set()

    def __repr__(self):
        return f"<CancellationToken cancelled={self.cancelled}>"
