"""Cancellation token for long-running work started from a line callback.

A callback that blocks (sleeping, waiting on a subprocess, polling) takes a
:class:`Cancellation` and checks it; the application's interrupt handler
calls :meth:`Cancellation.cancel`. Nothing depends on which thread is blocked.
"""

from __future__ import annotations

import threading

from termline.errors import Cancelled


class Cancellation:
    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Sleep up to *timeout* seconds; returns True if cancelled meanwhile."""
        return self._event.wait(timeout)

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise Cancelled("operation cancelled")

    def reset(self) -> None:
        self._event.clear()
