"""Capabilities the listener needs from the widget that owns the text."""
from __future__ import annotations

from typing import Any, Protocol

from mentionkit.mentions.options import StyleTag
from mentionkit.mentions.ranges import TextRange


class MentionHost(Protocol):
    """The editable buffer, caret and styling surface.

    Ranges are expressed in Python string indices over ``text()``.
    """

    def text(self) -> str: ...

    def selection(self) -> TextRange: ...

    def set_selection(self, text_range: TextRange) -> None: ...

    def replace(self, text_range: TextRange, text: str) -> None:
        """Replace the range and leave the caret after the inserted text."""

    def apply_style(self, style: StyleTag, text_range: TextRange) -> None: ...

    def reset_typing_style(self, style: StyleTag) -> None:
        """Use ``style`` for the next characters the user types."""

    def scroll_into_view(self, text_range: TextRange) -> None: ...


class MentionDelegate:
    """Optional downstream observer for host notifications.

    The listener handles every notification first, then forwards it here.
    Subclass and override the hooks of interest; the defaults allow
    everything and ignore the rest.
    """

    def should_change_text(self, host: MentionHost, text_range: TextRange, text: str) -> bool:
        return True

    def did_change(self, host: MentionHost) -> None:
        return None

    def did_change_selection(self, host: MentionHost) -> None:
        return None

    def should_begin_editing(self, host: MentionHost) -> bool:
        return True

    def should_end_editing(self, host: MentionHost) -> bool:
        return True

    def did_begin_editing(self, host: MentionHost) -> None:
        return None

    def did_end_editing(self, host: MentionHost) -> None:
        return None

    def should_interact_with_url(self, host: MentionHost, url: Any, text_range: TextRange) -> bool:
        return True

    def should_interact_with_attachment(
        self, host: MentionHost, attachment: Any, text_range: TextRange
    ) -> bool:
        return True
