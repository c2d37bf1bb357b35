"""Mention records and the payload contract supplied by hosts."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol, runtime_checkable

from mentionkit.mentions.ranges import TextRange


@runtime_checkable
class CreateMention(Protocol):
    """Anything with a display ``name`` can be committed as a mention."""

    @property
    def name(self) -> str: ...


@dataclass(frozen=True)
class MentionPayload:
    """Convenience payload: a display name plus an opaque identifying object."""

    name: str
    object: Any = None


@dataclass(frozen=True, eq=False)
class Mention:
    """A committed mention span.

    ``text`` is captured when the mention is created and never re-read from
    the buffer; edits either shift ``range`` or drop the mention.
    Equality is identity so two mentions of the same person stay distinct.
    """

    range: TextRange
    text: str
    payload: Any = field(default=None)

    @property
    def name(self) -> str:
        return display_name(self.payload) or self.text


def display_name(payload: Any) -> str:
    """Return the text a payload should be shown as.

    Objects expose ``name``; plain mappings may carry a ``"name"`` key.
    """

    if isinstance(payload, Mapping):
        return str(payload.get("name", ""))
    return str(getattr(payload, "name", ""))
