"""Rate limiting for "show candidates" notifications."""
from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer

from mentionkit.core.logging import get_logger

logger = get_logger(__name__)

ShowCallback = Callable[[str, str], None]
CurrentFilter = Callable[[], Optional[tuple[str, str]]]


class CooldownTimer:
    """Single-shot, re-armable timer backed by ``QTimer``.

    ``start`` always replaces any pending shot, so at most one callback is
    outstanding per timer.
    """

    def __init__(self, parent: QObject | None = None) -> None:
        self._timer = QTimer(parent)
        self._timer.setSingleShot(True)
        self._callback: Callable[[], None] | None = None
        self._timer.timeout.connect(self._on_timeout)

    def start(self, interval: float, callback: Callable[[], None]) -> None:
        if self._timer.isActive():
            self._timer.stop()
        self._callback = callback
        self._timer.start(max(0, int(interval * 1000)))

    def cancel(self) -> None:
        self._timer.stop()
        self._callback = None

    def is_active(self) -> bool:
        return self._timer.isActive()

    def _on_timeout(self) -> None:
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()


class CooldownController:
    """Coalesce filter-string changes into at most one callback per interval.

    The first change while idle is sent immediately and arms the timer.
    Changes that arrive while the timer is pending are not sent; on expiry the
    *current* filter (read through ``current_filter``) is sent if it differs
    from the last one sent, which re-arms the timer.
    """

    def __init__(
        self,
        show: ShowCallback,
        current_filter: CurrentFilter,
        *,
        interval: float = 0.5,
        timer: CooldownTimer | None = None,
        on_expiry: Callable[[], None] | None = None,
    ) -> None:
        self._show = show
        self._current_filter = current_filter
        self.interval = interval
        self.timer = timer or CooldownTimer()
        self.last_sent: str | None = None
        self._on_expiry = on_expiry or self.fire

    def filter_changed(self, filter_string: str, trigger: str) -> None:
        if self.timer.is_active():
            return
        self._send(filter_string, trigger)

    def fire(self) -> None:
        """Handle timer expiry."""

        current = self._current_filter()
        if current is None:
            return
        filter_string, trigger = current
        if filter_string == self.last_sent:
            return
        self._send(filter_string, trigger)

    def forget_last_sent(self) -> None:
        """Treat the next filter as new; call when the candidate list is hidden."""

        self.last_sent = None

    def reset(self) -> None:
        self.timer.cancel()
        self.last_sent = None

    def _send(self, filter_string: str, trigger: str) -> None:
        self.last_sent = filter_string
        logger.debug("Showing mention candidates for %r (%s)", filter_string, trigger)
        self._show(filter_string, trigger)
        self.timer.start(self.interval, self._on_expiry)
