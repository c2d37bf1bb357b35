"""Listener configuration and the one-time setup check."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping

from mentionkit.core.config import ConfigManager

StyleTag = Dict[str, Any]
MentionStyleFactory = Callable[[Any], StyleTag]

KNOWN_STYLE_ATTRIBUTES = frozenset(
    {"foreground", "background", "bold", "italic", "underline", "font_family", "font_size"}
)

DEFAULT_TEXT_STYLE: StyleTag = {"foreground": "#000000"}
DEFAULT_MENTION_STYLE: StyleTag = {"foreground": "#0000ff"}


class MentionSetupError(ValueError):
    """Raised when listener options cannot produce consistent styling."""


def _default_mention_style(_payload: Any) -> StyleTag:
    return dict(DEFAULT_MENTION_STYLE)


def constant_style(style: Mapping[str, Any]) -> MentionStyleFactory:
    """Return a mention style factory that ignores the payload."""

    frozen = dict(style)
    return lambda _payload: dict(frozen)


@dataclass
class MentionOptions:
    triggers: List[str] = field(default_factory=lambda: ["@"])
    space_after_mention: bool = False
    keep_trigger: bool = False
    search_spaces: bool = False
    cooldown_interval: float = 0.5
    default_text_style: StyleTag = field(default_factory=lambda: dict(DEFAULT_TEXT_STYLE))
    mention_text_style: MentionStyleFactory = _default_mention_style

    @classmethod
    def from_config(cls, config: ConfigManager, **overrides: Any) -> "MentionOptions":
        """Build options from the ``mentions`` settings section.

        Keyword ``overrides`` take precedence over configured values.
        """

        section = config.mention_settings()
        values: dict[str, Any] = {}
        if "triggers" in section:
            values["triggers"] = [str(trigger) for trigger in section["triggers"] or []]
        if "space_after_mention" in section:
            values["space_after_mention"] = bool(section["space_after_mention"])
        if "keep_trigger" in section:
            values["keep_trigger"] = bool(section["keep_trigger"])
        if "search_spaces" in section:
            values["search_spaces"] = bool(section["search_spaces"])
        if "cooldown_interval" in section:
            values["cooldown_interval"] = float(section["cooldown_interval"])
        if isinstance(section.get("default_style"), dict):
            values["default_text_style"] = dict(section["default_style"])
        if isinstance(section.get("mention_style"), dict):
            values["mention_text_style"] = constant_style(section["mention_style"])
        values.update(overrides)
        return cls(**values)


def verify_setup(options: MentionOptions) -> None:
    """Reject option sets that would leave text styled wrongly.

    Every attribute a mention style sets must also be set by the default
    style, otherwise clearing a mention could not undo it.
    """

    if not options.triggers or any(not trigger for trigger in options.triggers):
        raise MentionSetupError("At least one non-empty trigger is required")
    if options.cooldown_interval < 0:
        raise MentionSetupError(f"cooldown_interval must be >= 0, got {options.cooldown_interval}")

    default_keys = set(options.default_text_style)
    mention_keys = set(options.mention_text_style(None))
    unknown = (default_keys | mention_keys) - KNOWN_STYLE_ATTRIBUTES
    if unknown:
        raise MentionSetupError(f"Unknown style attributes: {', '.join(sorted(unknown))}")
    missing = mention_keys - default_keys
    if missing:
        raise MentionSetupError(
            "Default text style must set every attribute the mention style sets; missing "
            + ", ".join(sorted(missing))
        )
