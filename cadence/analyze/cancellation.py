"""
cadence.analyze.cancellation - Cooperative cancellation for long analyses.
"""

from __future__ import annotations

import threading

from cadence.exceptions import AnalysisCancelledError


class CancellationToken:
    """Flag shared between a caller and a running analysis.

    The engine checks it between stages and the pitch tracker between
    frame blocks, so a cancel takes effect within one block of work.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise AnalysisCancelledError("Analysis cancelled")
