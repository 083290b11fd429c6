"""Tests for loading rescribe configuration."""

import pytest
from pydantic import ValidationError

from git_rescribe.config import DEFAULT_EDITOR, RescribeConfig


@pytest.fixture(autouse=True)
def clean_editor_env(monkeypatch):
    for name in ("GIT_EDITOR", "EDITOR", "VISUAL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = RescribeConfig.load()

    assert config.skip_confirmation is False
    assert config.update_head is True
    assert config.editor == DEFAULT_EDITOR
    assert config.short_hash_length == 7


def test_git_config_values(temp_git_repo):
    with temp_git_repo.config_writer() as writer:
        writer.set_value("rescribe", "yes", "true")
        writer.set_value("rescribe", "editor", "nano")

    config = RescribeConfig.load(temp_git_repo)

    assert config.skip_confirmation is True
    assert config.editor == "nano"


def test_environment_editor_precedence(temp_git_repo, monkeypatch):
    with temp_git_repo.config_writer() as writer:
        writer.set_value("rescribe", "editor", "nano")
    monkeypatch.setenv("VISUAL", "emacs")
    monkeypatch.setenv("GIT_EDITOR", "code --wait")

    assert RescribeConfig.load(temp_git_repo).editor == "code --wait"


def test_overrides_win_and_none_is_ignored(temp_git_repo):
    with temp_git_repo.config_writer() as writer:
        writer.set_value("rescribe", "yes", "true")

    config = RescribeConfig.load(temp_git_repo, skip_confirmation=None, edit=False)
    assert config.skip_confirmation is True
    assert config.edit is False

    config = RescribeConfig.load(temp_git_repo, skip_confirmation=False)
    assert config.skip_confirmation is False


def test_short_hash_length_bounds():
    with pytest.raises(ValidationError):
        RescribeConfig(short_hash_length=4)
    with pytest.raises(ValidationError):
        RescribeConfig(short_hash_length=41)


def test_config_is_frozen():
    config = RescribeConfig()
    with pytest.raises(ValidationError):
        config.editor = "nano"
