"""Mention model, range bookkeeping and the edit coordinator."""
from __future__ import annotations

from .host import MentionDelegate, MentionHost
from .listener import MentionListener
from .mention import CreateMention, Mention, MentionPayload
from .options import MentionOptions, MentionSetupError, verify_setup
from .ranges import TextRange
from .store import MentionStore
from .trigger import TriggerMatch, detect_mention

__all__ = [
    "CreateMention",
    "Mention",
    "MentionDelegate",
    "MentionHost",
    "MentionListener",
    "MentionOptions",
    "MentionPayload",
    "MentionSetupError",
    "MentionStore",
    "TextRange",
    "TriggerMatch",
    "detect_mention",
    "verify_setup",
]
