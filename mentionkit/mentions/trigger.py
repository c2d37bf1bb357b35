"""Detect whether the caret sits inside a mention that is still being typed."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from mentionkit.mentions.ranges import TextRange

BOUNDARY_CHARACTERS = (" ", "\n")


@dataclass(frozen=True)
class TriggerMatch:
    """A candidate mention under the caret.

    ``range`` covers the raw typed text (trigger included) that a committed
    mention will replace; ``filter_string`` is that text with the trigger and
    newlines stripped.
    """

    trigger: str
    trigger_location: int
    range: TextRange
    filter_string: str


def find_trigger(text: str, triggers: Sequence[str]) -> tuple[int, str] | None:
    """Return the rightmost trigger occurrence in ``text`` as ``(location, trigger)``.

    When two triggers end up at the same location the longer one wins.
    """

    best: tuple[int, str] | None = None
    for trigger in triggers:
        location = text.rfind(trigger)
        if location < 0:
            continue
        if best is None or location > best[0] or (location == best[0] and len(trigger) > len(best[1])):
            best = (location, trigger)
    return best


def detect_mention(
    text: str,
    selection: TextRange,
    triggers: Sequence[str],
    *,
    search_spaces: bool = False,
) -> TriggerMatch | None:
    """Return the candidate mention for ``selection`` or ``None`` outside a trigger context."""

    selection_end = min(max(selection.end, 0), len(text))
    prefix = text[:selection_end]

    found = find_trigger(prefix, triggers)
    if found is None:
        return None
    location, trigger = found

    # A trigger only counts at the start of the buffer or after whitespace,
    # so "name@example.com" never opens a mention.
    boundary = " "
    if location > 0:
        boundary = prefix[location - 1]
        if boundary not in BOUNDARY_CHARACTERS:
            return None

    if search_spaces:
        mention_string = prefix[location:]
    else:
        typed = prefix.split(boundary)[-1].split(" ")[-1]
        mention_string = typed if trigger in typed else ""

    if not mention_string:
        return None

    match_location = prefix.rfind(mention_string)
    filter_string = mention_string.replace(trigger, "").replace("\n", "")
    return TriggerMatch(
        trigger=trigger,
        trigger_location=location,
        range=TextRange(match_location, len(mention_string)),
        filter_string=filter_string,
    )
