from __future__ import annotations

import pytest
from pydantic import ValidationError

from branchstatus.config import DEFAULT_CONVENTIONS, Conventions, load_conventions
from branchstatus.errors import BranchStatusError, ConfigError


def test_defaults_match_git_layout():
    conventions = Conventions()
    assert conventions.remote_name == "origin"
    assert conventions.primary_branch == "master"
    assert conventions.local_prefix == "refs/heads/"
    assert conventions.remote_prefix == "refs/remotes/origin/"
    assert conventions == DEFAULT_CONVENTIONS


def test_load_conventions_without_overrides():
    assert load_conventions({}) == Conventions()


def test_load_conventions_reads_process_env(monkeypatch):
    monkeypatch.setenv("BRANCHSTATUS_PRIMARY_BRANCH", "main")
    monkeypatch.delenv("BRANCHSTATUS_REMOTE", raising=False)
    conventions = load_conventions()
    assert conventions.primary_branch == "main"
    assert conventions.remote_name == "origin"


def test_load_conventions_overrides_are_stripped():
    conventions = load_conventions(
        {"BRANCHSTATUS_REMOTE": " upstream ", "BRANCHSTATUS_PRIMARY_BRANCH": "trunk\n"}
    )
    assert conventions.remote_name == "upstream"
    assert conventions.primary_branch == "trunk"
    assert conventions.remote_prefix == "refs/remotes/upstream/"


@pytest.mark.parametrize(
    "env",
    [
        {"BRANCHSTATUS_REMOTE": ""},
        {"BRANCHSTATUS_REMOTE": "my remote"},
        {"BRANCHSTATUS_PRIMARY_BRANCH": "/main"},
        {"BRANCHSTATUS_PRIMARY_BRANCH": "main/"},
    ],
)
def test_invalid_overrides_raise_config_error(env):
    with pytest.raises(ConfigError) as excinfo:
        load_conventions(env)
    assert isinstance(excinfo.value, BranchStatusError)


def test_conventions_are_frozen():
    conventions = Conventions()
    with pytest.raises(ValidationError):
        conventions.remote_name = "upstream"
