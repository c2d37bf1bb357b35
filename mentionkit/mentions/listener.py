"""Keeps mentions consistent with the buffer while the user edits it.

``MentionListener`` sits between a text host and its optional delegate. The
host reports every edit *before* applying it (``should_change_text``) and
reports selection and text changes afterwards; the listener decides whether
to let the host apply the edit, keeps the :class:`MentionStore` in step with
the buffer, and tells the host when to show or hide its candidate list.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Iterable, Iterator, List, Tuple, Union

from mentionkit.core.logging import get_logger
from mentionkit.mentions.cooldown import CooldownController, CooldownTimer
from mentionkit.mentions.host import MentionDelegate, MentionHost
from mentionkit.mentions.mention import Mention, display_name
from mentionkit.mentions.options import MentionOptions, verify_setup
from mentionkit.mentions.ranges import TextRange
from mentionkit.mentions.store import MentionStore
from mentionkit.mentions.trigger import detect_mention

logger = get_logger(__name__)

RangeLike = Union[TextRange, Tuple[int, int]]


def as_range(value: RangeLike) -> TextRange:
    if isinstance(value, TextRange):
        return value
    location, length = value
    return TextRange(int(location), int(length))


class MentionListener:
    """Edit coordinator for one text host.

    Parameters
    ----------
    host:
        The widget that owns the text, caret and styling.
    hide_mentions:
        Called whenever the caret is not inside a candidate mention.
    did_handle_mention_on_return:
        Called when return is pressed inside a candidate mention. Return
        ``True`` if the host committed a mention itself (no newline is
        inserted) or ``False`` to let the newline through.
    show_mentions_list:
        Called with ``(filter_string, trigger)``, rate limited by
        ``options.cooldown_interval``.
    options:
        Triggers, spacing and styles. Verified once; a bad combination raises
        :class:`~mentionkit.mentions.options.MentionSetupError`.
    delegate:
        Receives every notification after the listener has handled it.
    timer:
        Cooldown timer; defaults to a ``QTimer`` backed one.
    """

    def __init__(
        self,
        host: MentionHost,
        *,
        hide_mentions: Callable[[], None],
        did_handle_mention_on_return: Callable[[], bool],
        show_mentions_list: Callable[[str, str], None],
        options: MentionOptions | None = None,
        delegate: MentionDelegate | None = None,
        timer: CooldownTimer | None = None,
    ) -> None:
        self.options = options or MentionOptions()
        verify_setup(self.options)
        self.host = host
        self.delegate = delegate
        self._hide_mentions = hide_mentions
        self._did_handle_mention_on_return = did_handle_mention_on_return
        self._store = MentionStore()
        self._suspended = 0

        self.current_mention_range: TextRange | None = None
        self.filter_string: str | None = None
        self.trigger: str | None = None
        self.mention_enabled = False

        self._cooldown = CooldownController(
            show_mentions_list,
            self._current_filter,
            interval=self.options.cooldown_interval,
            timer=timer,
            on_expiry=self.cooldown_timer_fired,
        )
        self.reset()

    # Public API --------------------------------------------------------
    @property
    def mentions(self) -> List[Mention]:
        """Committed mentions ordered by location."""

        return self._store.mentions

    def mention_at(self, index: int) -> Mention | None:
        return self._store.mention_at(index)

    @property
    def string_currently_being_filtered(self) -> str | None:
        return self._cooldown.last_sent

    def reset(self) -> None:
        """Drop every mention and restyle the whole buffer with the default style."""

        self._store.clear()
        self._clear_candidate()
        self._cooldown.reset()
        default = self.options.default_text_style
        with self._suspend():
            text = self.host.text()
            if text:
                self.host.apply_style(default, TextRange(0, len(text)))
            self.host.reset_typing_style(default)
        logger.debug("Mention listener reset")

    def insert_existing_mentions(
        self, existing: Iterable[tuple[Any, RangeLike]]
    ) -> list[tuple[Any, TextRange]]:
        """Register mentions over text already in the buffer.

        Entries that are empty, out of bounds or overlapping another mention
        are rejected, logged and returned; the rest are styled as mentions.
        """

        text = self.host.text()
        rejected: list[tuple[Any, TextRange]] = []
        for payload, value in existing:
            text_range = as_range(value)
            if self._store.insert_existing([(payload, text_range)], text):
                logger.warning("Rejected existing mention %r at %s", display_name(payload), text_range)
                rejected.append((payload, text_range))
                continue
            with self._suspend():
                self.host.apply_style(self.options.mention_text_style(payload), text_range)
        return rejected

    def add_mention(self, payload: Any) -> bool:
        """Commit ``payload`` over the candidate mention under the caret.

        Returns ``False`` when there is no candidate or it no longer fits the
        buffer.
        """

        text_range = self.current_mention_range
        if text_range is None:
            logger.debug("No mention candidate under the caret; ignoring add_mention")
            return False

        name = display_name(payload)
        if self.options.keep_trigger and self.trigger:
            name = self.trigger + name
        inserted = name + (" " if self.options.space_after_mention else "")
        buffer = self.host.text()
        if not name or not text_range.fits(len(buffer)):
            logger.debug("Candidate %s no longer fits the buffer", text_range)
            return False

        for mention in self._store.mentions_being_edited(text_range):
            self._clear_mention(mention)
        new_range = self._store.add(
            payload,
            text_range,
            len(buffer),
            append_trailing_space=self.options.space_after_mention,
            text=name,
        )
        if new_range is None:
            return False

        default = self.options.default_text_style
        with self._suspend():
            self.host.replace(text_range, inserted)
            self.host.apply_style(default, TextRange(text_range.location, len(inserted)))
            self.host.apply_style(self.options.mention_text_style(payload), new_range)
            self.host.set_selection(TextRange(text_range.location + len(inserted)))
            self.host.reset_typing_style(default)

        logger.debug("Added mention %r at %s", name, new_range)
        self._hide()
        return True

    # Host notifications ------------------------------------------------
    def should_change_text(self, value: RangeLike, text: str) -> bool:
        """Called before the host applies ``text`` over ``value``.

        Returns whether the host should apply the edit itself. When the
        listener returns ``False`` for a paste or an edit into a mention it
        has already applied the edit.
        """

        if self._suspended:
            return True
        text_range = as_range(value)

        if not self.host.text():
            self.reset()
        else:
            with self._suspend():
                self.host.reset_typing_style(self.options.default_text_style)

        if text == "\n" and self.mention_enabled and self._did_handle_mention_on_return():
            self._hide()
            self._forward_should_change(text_range, text)
            return False

        if len(text) > 1:
            self._apply_edit(text_range, text, scroll=True)
            self._forward_should_change(text_range, text)
            return False

        if self._store.mentions_being_edited(text_range):
            self._apply_edit(text_range, text)
            self._forward_should_change(text_range, text)
            return False

        allowed = self._forward_should_change(text_range, text)
        if allowed:
            self._store.adjust_all(text_range.location, text_range.length, len(text))
        return allowed

    def did_change(self) -> None:
        if self._suspended:
            return
        text = self.host.text()
        if not text:
            self.reset()
        else:
            caret = self.host.selection().location
            if caret > 1 and text[caret - 2:caret] == ". ":
                with self._suspend():
                    self.host.apply_style(self.options.default_text_style, TextRange(caret - 2, 2))
        if self.delegate:
            self.delegate.did_change(self.host)

    def did_change_selection(self) -> None:
        if self._suspended:
            return
        self._detect()
        if self.delegate:
            self.delegate.did_change_selection(self.host)

    def cooldown_timer_fired(self) -> None:
        self._cooldown.fire()

    def should_begin_editing(self) -> bool:
        return self.delegate.should_begin_editing(self.host) if self.delegate else True

    def should_end_editing(self) -> bool:
        return self.delegate.should_end_editing(self.host) if self.delegate else True

    def did_begin_editing(self) -> None:
        if self.delegate:
            self.delegate.did_begin_editing(self.host)

    def did_end_editing(self) -> None:
        if self.delegate:
            self.delegate.did_end_editing(self.host)

    def should_interact_with_url(self, url: Any, value: RangeLike) -> bool:
        if self.delegate:
            return self.delegate.should_interact_with_url(self.host, url, as_range(value))
        return True

    def should_interact_with_attachment(self, attachment: Any, value: RangeLike) -> bool:
        if self.delegate:
            return self.delegate.should_interact_with_attachment(self.host, attachment, as_range(value))
        return True

    # Internals ---------------------------------------------------------
    @contextmanager
    def _suspend(self) -> Iterator[None]:
        """Ignore host notifications caused by the listener's own edits."""

        self._suspended += 1
        try:
            yield
        finally:
            self._suspended -= 1

    def _apply_edit(self, text_range: TextRange, text: str, *, scroll: bool = False) -> None:
        for mention in self._store.mentions_being_edited(text_range):
            self._clear_mention(mention)
        with self._suspend():
            self.host.replace(text_range, text)
            if text:
                self.host.apply_style(
                    self.options.default_text_style, TextRange(text_range.location, len(text))
                )
            if scroll:
                self.host.scroll_into_view(self.host.selection())
        self._store.adjust_all(text_range.location, text_range.length, len(text))
        self._detect()

    def _clear_mention(self, mention: Mention) -> None:
        self._store.remove(mention)
        with self._suspend():
            self.host.apply_style(self.options.default_text_style, mention.range)
        logger.debug("Cleared mention %r at %s", mention.text, mention.range)

    def _detect(self) -> None:
        match = detect_mention(
            self.host.text(),
            self.host.selection(),
            self.options.triggers,
            search_spaces=self.options.search_spaces,
        )
        if match is None:
            self._hide()
            return
        self.current_mention_range = match.range
        self.filter_string = match.filter_string
        self.trigger = match.trigger
        self.mention_enabled = True
        self._cooldown.filter_changed(match.filter_string, match.trigger)

    def _current_filter(self) -> tuple[str, str] | None:
        if not self.mention_enabled or self.filter_string is None or self.trigger is None:
            return None
        return self.filter_string, self.trigger

    def _hide(self) -> None:
        self._clear_candidate()
        self._cooldown.forget_last_sent()
        self._hide_mentions()

    def _clear_candidate(self) -> None:
        self.current_mention_range = None
        self.filter_string = None
        self.trigger = None
        self.mention_enabled = False

    def _forward_should_change(self, text_range: TextRange, text: str) -> bool:
        if self.delegate:
            return self.delegate.should_change_text(self.host, text_range, text)
        return True
