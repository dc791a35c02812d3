from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

import pytest
from git import Actor, RemoteReference, Repo


ACTOR = Actor("Test", "test@example.com")


def pytest_sessionstart(session):  # type: ignore[override]
    root = Path(__file__).resolve().parents[1]
    src = root / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))
    # Ensure console scripts load in editable style as well
    os.environ.setdefault("PYTHONPATH", str(src))


def commit_file(repo: Repo, name: str, content: Optional[str] = None, message: Optional[str] = None) -> str:
    """Write a file, commit it on the checked-out branch and return the hexsha."""
    path = Path(repo.working_tree_dir) / name
    path.write_text(content if content is not None else f"{name}\n")
    repo.index.add([name])
    commit = repo.index.commit(message or f"Add {name}", author=ACTOR, committer=ACTOR)
    return commit.hexsha


def track(repo: Repo, branch: str, remote_branch: Optional[str] = None) -> None:
    """Configure ``branch`` to track ``origin/<remote_branch>`` (the ref need not exist)."""
    remote_ref = RemoteReference(repo, f"refs/remotes/origin/{remote_branch or branch}")
    repo.heads[branch].set_tracking_branch(remote_ref)


def set_remote_ref(repo: Repo, branch: str, hexsha: str) -> None:
    repo.git.update_ref(f"refs/remotes/origin/{branch}", hexsha)


@pytest.fixture
def repo(tmp_path: Path) -> Repo:
    """Repository with one commit on ``master`` and an ``origin`` remote configured."""
    repo_path = tmp_path / "repo"
    repo_path.mkdir()
    repo = Repo.init(repo_path)

    with repo.config_writer() as config:
        config.set_value("user", "name", "Test")
        config.set_value("user", "email", "test@example.com")

    commit_file(repo, "README.md", "# Repo\n", "Initial commit")

    # Pin the primary branch name regardless of init.defaultBranch
    repo.git.branch("-M", "master")

    repo.create_remote("origin", str(tmp_path / "origin.git"))
    yield repo
    repo.close()


@pytest.fixture
def solo_repo(tmp_path: Path) -> Repo:
    """Repository with one commit on ``master`` and no remote at all."""
    repo_path = tmp_path / "solo"
    repo_path.mkdir()
    repo = Repo.init(repo_path)
    commit_file(repo, "README.md", "# Solo\n", "Initial commit")
    repo.git.branch("-M", "master")
    yield repo
    repo.close()
