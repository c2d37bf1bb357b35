"""Mention tracking for editable text."""
from __future__ import annotations

from .mentions import (
    CreateMention,
    Mention,
    MentionDelegate,
    MentionListener,
    MentionOptions,
    MentionPayload,
    MentionSetupError,
    MentionStore,
    TextRange,
)

__all__ = [
    "CreateMention",
    "Mention",
    "MentionDelegate",
    "MentionListener",
    "MentionOptions",
    "MentionPayload",
    "MentionSetupError",
    "MentionStore",
    "TextRange",
]
