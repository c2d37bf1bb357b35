"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import os
from typing import Any, Callable

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402

from mentionkit.mentions.listener import MentionListener  # noqa: E402
from mentionkit.mentions.options import MentionOptions  # noqa: E402
from mentionkit.mentions.ranges import TextRange  # noqa: E402

_qt_app = QApplication.instance() or QApplication([])


@pytest.fixture(scope="session")
def qt_app():
    """Provide a shared QApplication instance for widget tests."""

    return _qt_app


class ManualTimer:
    """Cooldown timer that only fires when a test says so."""

    def __init__(self) -> None:
        self.callback: Callable[[], None] | None = None
        self.interval: float | None = None
        self.starts = 0

    def start(self, interval: float, callback: Callable[[], None]) -> None:
        self.interval = interval
        self.callback = callback
        self.starts += 1

    def cancel(self) -> None:
        self.callback = None

    def is_active(self) -> bool:
        return self.callback is not None

    def fire(self) -> None:
        callback, self.callback = self.callback, None
        if callback is not None:
            callback()


class MemoryHost:
    """In-memory text host that behaves like a simple text widget.

    ``styles`` holds one style dict per character; inserted characters take
    the current typing style.
    """

    def __init__(self, text: str = "") -> None:
        self.buffer = text
        self.caret = TextRange(len(text))
        self.typing_style: dict[str, Any] = {}
        self.styles: list[dict[str, Any]] = [{} for _ in text]
        self.scrolled: list[TextRange] = []
        self.listener: MentionListener | None = None

    # MentionHost
    def text(self) -> str:
        return self.buffer

    def selection(self) -> TextRange:
        return self.caret

    def set_selection(self, text_range: TextRange) -> None:
        self.caret = text_range

    def replace(self, text_range: TextRange, text: str) -> None:
        start, end = text_range.location, text_range.end
        self.buffer = self.buffer[:start] + text + self.buffer[end:]
        self.styles[start:end] = [dict(self.typing_style) for _ in text]
        self.caret = TextRange(start + len(text))

    def apply_style(self, style: dict[str, Any], text_range: TextRange) -> None:
        for index in range(text_range.location, text_range.end):
            self.styles[index] = {**self.styles[index], **style}

    def reset_typing_style(self, style: dict[str, Any]) -> None:
        self.typing_style = dict(style)

    def scroll_into_view(self, text_range: TextRange) -> None:
        self.scrolled.append(text_range)

    # Simulated user input
    def edit(self, text_range: TextRange, text: str) -> bool:
        """Run an edit the way a widget would; return True if the host applied it."""

        assert self.listener is not None
        if not self.listener.should_change_text(text_range, text):
            return False
        self.replace(text_range, text)
        self.listener.did_change()
        self.listener.did_change_selection()
        return True

    def type(self, text: str) -> None:
        for char in text:
            self.edit(self.caret, char)

    def backspace(self) -> None:
        if self.caret.length:
            self.edit(self.caret, "")
        elif self.caret.location:
            self.edit(TextRange(self.caret.location - 1, 1), "")

    def select(self, text_range: TextRange) -> None:
        assert self.listener is not None
        self.caret = text_range
        self.listener.did_change_selection()

    def style_at(self, index: int) -> dict[str, Any]:
        return self.styles[index]


class Recorder:
    """Collects listener callbacks."""

    def __init__(self) -> None:
        self.shown: list[tuple[str, str]] = []
        self.hidden = 0
        self.handle_return = False
        self.return_presses = 0

    def show(self, filter_string: str, trigger: str) -> None:
        self.shown.append((filter_string, trigger))

    def hide(self) -> None:
        self.hidden += 1

    def on_return(self) -> bool:
        self.return_presses += 1
        return self.handle_return


@pytest.fixture
def manual_timer() -> ManualTimer:
    return ManualTimer()


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def make_listener(manual_timer: ManualTimer, recorder: Recorder):
    """Build a listener over a ``MemoryHost`` seeded with ``text``."""

    def factory(text: str = "", **option_values: Any) -> tuple[MentionListener, MemoryHost]:
        host = MemoryHost(text)
        listener = MentionListener(
            host,
            hide_mentions=recorder.hide,
            did_handle_mention_on_return=recorder.on_return,
            show_mentions_list=recorder.show,
            options=MentionOptions(**option_values),
            timer=manual_timer,
        )
        host.listener = listener
        return listener, host

    return factory
