from __future__ import annotations

import logging
from pathlib import Path

import pytest

import mentionkit.core.config as config_mod
from mentionkit.core.logging import configure_logging, get_logger
from mentionkit.mentions.options import (
    DEFAULT_MENTION_STYLE,
    MentionOptions,
    MentionSetupError,
    constant_style,
    verify_setup,
)


@pytest.fixture
def isolated_config(monkeypatch, tmp_path: Path) -> Path:
    # Redirect config paths to an isolated temp directory
    config_root = tmp_path / "config"
    monkeypatch.setattr(config_mod, "CONFIG_DIR", config_root)
    monkeypatch.setattr(config_mod, "USER_SETTINGS_PATH", config_root / "settings.yaml")
    return config_root


def test_default_options_pass_setup() -> None:
    verify_setup(MentionOptions())


@pytest.mark.parametrize(
    "options",
    [
        MentionOptions(triggers=[]),
        MentionOptions(triggers=["@", ""]),
        MentionOptions(cooldown_interval=-1),
        MentionOptions(default_text_style={"colour": "red"}),
        MentionOptions(mention_text_style=constant_style({"foreground": "#00f", "bold": True})),
    ],
    ids=["no-triggers", "empty-trigger", "negative-interval", "unknown-attribute", "unrestorable-style"],
)
def test_verify_setup_rejects_bad_options(options: MentionOptions) -> None:
    with pytest.raises(MentionSetupError):
        verify_setup(options)


def test_mention_style_may_set_fewer_attributes_than_default() -> None:
    options = MentionOptions(
        default_text_style={"foreground": "#000000", "bold": False},
        mention_text_style=constant_style({"bold": True}),
    )

    verify_setup(options)


def test_config_manager_loads_packaged_defaults(isolated_config: Path) -> None:
    manager = config_mod.ConfigManager()

    section = manager.mention_settings()
    assert section["triggers"] == ["@"]
    assert section["cooldown_interval"] == 0.5
    assert not manager.user_settings_path.exists()


def test_config_manager_uses_user_settings(isolated_config: Path) -> None:
    manager = config_mod.ConfigManager()
    manager.set("mentions", {**manager.mention_settings(), "triggers": ["@", "#"]})
    manager.save()

    reloaded = config_mod.ConfigManager()
    assert reloaded.mention_settings()["triggers"] == ["@", "#"]
    assert config_mod.USER_SETTINGS_PATH.exists()


def test_user_settings_are_deep_merged(isolated_config: Path) -> None:
    isolated_config.mkdir(parents=True)
    (isolated_config / "settings.yaml").write_text(
        "mentions:\n  space_after_mention: true\n  mention_style:\n    foreground: '#ff0000'\n",
        encoding="utf-8",
    )

    section = config_mod.ConfigManager().mention_settings()

    assert section["space_after_mention"] is True
    assert section["triggers"] == ["@"]
    assert section["mention_style"] == {"foreground": "#ff0000"}


def test_options_from_config(isolated_config: Path) -> None:
    manager = config_mod.ConfigManager()
    manager.set(
        "mentions",
        {
            "triggers": ["@", "#"],
            "search_spaces": True,
            "cooldown_interval": 0,
            "mention_style": {"foreground": "#ff0000"},
        },
    )

    options = MentionOptions.from_config(manager, keep_trigger=True)

    assert options.triggers == ["@", "#"]
    assert options.search_spaces
    assert options.cooldown_interval == 0.0
    assert options.keep_trigger
    assert not options.space_after_mention
    assert options.mention_text_style(object()) == {"foreground": "#ff0000"}
    verify_setup(options)


def test_options_from_defaults_match_builtin_styles(isolated_config: Path) -> None:
    options = MentionOptions.from_config(config_mod.ConfigManager())

    assert options.mention_text_style(None) == DEFAULT_MENTION_STYLE
    assert options.default_text_style == MentionOptions().default_text_style


def test_configure_logging_writes_package_records(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "mentionkit.log"
    package_logger = logging.getLogger("mentionkit")
    saved_handlers = list(package_logger.handlers)
    saved_level = package_logger.level
    package_logger.handlers.clear()
    try:
        configure_logging(logging.DEBUG, log_file=log_file)
        get_logger("mentionkit.tests").debug("hello from the store")
        for handler in package_logger.handlers:
            handler.flush()
        assert "hello from the store" in log_file.read_text(encoding="utf-8")
        assert "[DEBUG] mentionkit.tests" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in package_logger.handlers:
            handler.close()
        package_logger.handlers[:] = saved_handlers
        package_logger.setLevel(saved_level)
