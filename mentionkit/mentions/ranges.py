"""Half-open text ranges and the arithmetic used to keep them in sync with edits."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TextRange:
    """A ``[location, location + length)`` span over buffer indices."""

    location: int
    length: int = 0

    @property
    def end(self) -> int:
        return self.location + self.length

    def contains(self, point: int) -> bool:
        return contains(self, point)

    def fits(self, buffer_length: int) -> bool:
        """Return True if the range lies inside a buffer of ``buffer_length``."""

        return self.location >= 0 and self.length >= 0 and self.end <= buffer_length

    def slice(self, text: str) -> str:
        return text[self.location:self.end]


def contains(text_range: TextRange, point: int) -> bool:
    return text_range.location <= point < text_range.end


def overlaps(a: TextRange, b: TextRange) -> bool:
    """Return True if two ranges share text.

    A zero-length range (an insertion point) overlaps a range only when it sits
    strictly inside it; insertion points on either boundary do not.
    """

    if a.length == 0 and b.length == 0:
        return False
    if a.length == 0:
        return b.location < a.location < b.end
    if b.length == 0:
        return a.location < b.location < a.end
    return a.location < b.end and b.location < a.end


def shift(
    text_range: TextRange, edit_location: int, edit_old_length: int, edit_new_length: int
) -> TextRange | None:
    """Return ``text_range`` after replacing ``edit_old_length`` units at ``edit_location``.

    Returns ``None`` when the edit reaches into the range; the range can no
    longer be trusted and must be dropped rather than shifted.
    """

    edit = TextRange(edit_location, edit_old_length)
    if overlaps(text_range, edit):
        return None
    if edit.end <= text_range.location:
        delta = edit_new_length - edit_old_length
        return TextRange(text_range.location + delta, text_range.length)
    return text_range
