"""Fixtures for git-rescribe tests."""

import tempfile
from pathlib import Path

import pytest
from git import Repo

from helpers import FakeObjectStore, commit_file, date
from git_rescribe.core.object_store import GitObjectStore


@pytest.fixture
def temp_git_repo():
    """Create an empty git repository with a test identity."""
    with tempfile.TemporaryDirectory() as temp_dir:
        repo = Repo.init(temp_dir)
        with repo.config_writer() as config:
            config.set_value("user", "name", "Test User")
            config.set_value("user", "email", "test@example.com")
            config.set_value("commit", "gpgsign", "false")
            config.set_value("log", "showSignature", "false")
        yield repo
        repo.close()


@pytest.fixture
def linear_repo(temp_git_repo):
    """Repository with three commits: first, second, third."""
    for hour, name in enumerate(["first", "second", "third"], start=10):
        commit_file(temp_git_repo, f"{name}.txt", f"{name}\n", f"Add {name}", when=date(hour))
    return temp_git_repo


@pytest.fixture
def store(linear_repo):
    return GitObjectStore(linear_repo)


@pytest.fixture
def fake_store(tmp_path):
    return FakeObjectStore(git_dir=tmp_path)


@pytest.fixture
def repo_path(linear_repo) -> Path:
    return Path(linear_repo.working_tree_dir)
