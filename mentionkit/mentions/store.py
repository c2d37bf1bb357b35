"""Ordered collection of committed mentions."""
from __future__ import annotations

from bisect import bisect_left
from dataclasses import replace
from typing import Any, Iterable, Iterator, List

from mentionkit.core.logging import get_logger
from mentionkit.mentions.mention import Mention, display_name
from mentionkit.mentions.ranges import TextRange, overlaps, shift

logger = get_logger(__name__)


class MentionStore:
    """Keeps mentions sorted by location and never lets two of them overlap."""

    def __init__(self) -> None:
        self._mentions: list[Mention] = []

    def __len__(self) -> int:
        return len(self._mentions)

    def __iter__(self) -> Iterator[Mention]:
        return iter(list(self._mentions))

    def __bool__(self) -> bool:
        return bool(self._mentions)

    @property
    def mentions(self) -> List[Mention]:
        return list(self._mentions)

    def clear(self) -> None:
        self._mentions.clear()

    # Insertion ---------------------------------------------------------
    def insert(self, mention: Mention) -> bool:
        """Insert ``mention`` in location order; refuse it if it overlaps another."""

        if mention.range.length < 1:
            return False
        if self.mentions_being_edited(mention.range):
            return False
        index = bisect_left(self._locations(), mention.range.location)
        self._mentions.insert(index, mention)
        return True

    def add(
        self,
        payload: Any,
        preceding_range: TextRange,
        buffer_length: int,
        *,
        append_trailing_space: bool = False,
        text: str | None = None,
    ) -> TextRange | None:
        """Record a mention that replaces the text in ``preceding_range``.

        Mentions after the replaced text are shifted by the change in length.
        ``text`` overrides the payload display name as the mention text.
        The caller performs the matching buffer edit. Returns the new
        mention's range, or ``None`` when ``preceding_range`` does not fit the
        buffer.
        """

        name = text if text is not None else display_name(payload)
        if not name or not preceding_range.fits(buffer_length):
            logger.debug("Ignoring mention %r for range %s", name, preceding_range)
            return None

        replacement_length = len(name) + (1 if append_trailing_space else 0)
        self.adjust_all(preceding_range.location, preceding_range.length, replacement_length)
        new_range = TextRange(preceding_range.location, len(name))
        self.insert(Mention(range=new_range, text=name, payload=payload))
        return new_range

    def insert_existing(
        self, existing: Iterable[tuple[Any, TextRange]], text: str
    ) -> list[tuple[Any, TextRange]]:
        """Seed mentions over text that is already in the buffer.

        Entries that are empty, fall outside ``text`` or overlap a mention
        (already stored or earlier in ``existing``) are rejected and returned.
        """

        rejected: list[tuple[Any, TextRange]] = []
        for payload, text_range in existing:
            if text_range.length < 1 or not text_range.fits(len(text)):
                rejected.append((payload, text_range))
                continue
            mention = Mention(range=text_range, text=text_range.slice(text), payload=payload)
            if not self.insert(mention):
                rejected.append((payload, text_range))
        return rejected

    # Removal -----------------------------------------------------------
    def remove(self, mention: Mention) -> bool:
        for index, candidate in enumerate(self._mentions):
            if candidate is mention:
                del self._mentions[index]
                return True
        return False

    # Lookup ------------------------------------------------------------
    def mention_being_edited(self, edit_range: TextRange) -> Mention | None:
        """Return the first mention (lowest location) that ``edit_range`` reaches into."""

        edited = self.mentions_being_edited(edit_range)
        return edited[0] if edited else None

    def mentions_being_edited(self, edit_range: TextRange) -> list[Mention]:
        # Only mentions starting before the edit ends can overlap it; walk
        # backwards until mentions end before the edit starts.
        limit = edit_range.end if edit_range.length else edit_range.location
        index = bisect_left(self._locations(), limit)
        edited: list[Mention] = []
        for mention in reversed(self._mentions[:index]):
            if mention.range.end <= edit_range.location:
                break
            if overlaps(mention.range, edit_range):
                edited.append(mention)
        edited.reverse()
        return edited

    def mention_at(self, point: int) -> Mention | None:
        for mention in self._mentions:
            if mention.range.contains(point):
                return mention
        return None

    # Adjustment --------------------------------------------------------
    def adjust_all(self, edit_location: int, edit_old_length: int, edit_new_length: int) -> list[Mention]:
        """Shift every mention for a replacement edit and drop the ones it reaches into.

        Returns the dropped mentions.
        """

        kept: list[Mention] = []
        dropped: list[Mention] = []
        for mention in self._mentions:
            shifted = shift(mention.range, edit_location, edit_old_length, edit_new_length)
            if shifted is None:
                dropped.append(mention)
            elif shifted == mention.range:
                kept.append(mention)
            else:
                kept.append(replace(mention, range=shifted))
        self._mentions = kept
        if dropped:
            logger.debug("Edit at %d dropped %d mention(s)", edit_location, len(dropped))
        return dropped

    def _locations(self) -> list[int]:
        return [mention.range.location for mention in self._mentions]
