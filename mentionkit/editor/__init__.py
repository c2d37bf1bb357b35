"""Qt widgets hosting mention editing."""
from __future__ import annotations

from typing import TYPE_CHECKING

from .formats import char_format_for

if TYPE_CHECKING:  # pragma: no cover - only used for static analysis
    from .mention_edit import MentionTextEdit

__all__ = ["MentionTextEdit", "char_format_for"]


def __getattr__(name: str):
    """Lazily import the widget module."""

    if name == "MentionTextEdit":
        from .mention_edit import MentionTextEdit

        return MentionTextEdit
    raise AttributeError(f"module 'mentionkit.editor' has no attribute {name!r}")
