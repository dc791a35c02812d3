"""Tracking configuration, remote deletion and ahead/behind counts.

Tracking is looked up by short branch name through the ``branch.<name>``
config section, the way ``git status`` does it. A missing tracking setup is
never an error: callers get ``None`` and treat both divergence flags as false.
A branch whose remote is ``.`` tracks another local branch; it has an upstream
to compare against but no remote-tracking branch.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from git import Head, Repo

from .config import DEFAULT_CONVENTIONS, Conventions
from .constants import R_HEADS, R_REMOTES
from .errors import REPOSITORY_READ_ERRORS, RepositoryAccessError
from .observability import log_debug
from .refs import find_ref, is_local_name, local_name_for, remote_name_for, short_name_for

# `branch.<name>.remote` value for an upstream in the same repository
LOCAL_REMOTE = "."


@dataclass(frozen=True)
class TrackingStatus:
    """Ahead/behind counts of a local branch against its upstream branch."""

    upstream_branch: str
    ahead_count: int
    behind_count: int

    @property
    def has_unpushed_commits(self) -> bool:
        return self.ahead_count > 0

    @property
    def has_remote_commits(self) -> bool:
        return self.behind_count > 0


def _branch_config(
    repo: Repo, short_name: str, conventions: Conventions
) -> Optional[Tuple[str, str]]:
    """(remote, merge) from the ``branch.<name>`` section, or None if either is unset."""
    head = Head(repo, local_name_for(short_name, conventions))
    try:
        reader = head.config_reader()
        if not (reader.has_option("remote") and reader.has_option("merge")):
            return None
        # get_value coerces numeric-looking values
        remote = str(reader.get_value("remote"))
        merge = str(reader.get_value("merge"))
    except REPOSITORY_READ_ERRORS as e:
        raise RepositoryAccessError(f"Cannot read tracking config for {short_name}: {e}") from e
    return remote, merge


def tracking_branch_for(
    repo: Repo, short_name: str, conventions: Conventions = DEFAULT_CONVENTIONS
) -> Optional[str]:
    """Full name of the remote-tracking branch configured for a local branch.

    None when nothing is configured or the upstream is a local branch. Only
    the configuration is consulted; the returned ref may not exist.
    """
    config = _branch_config(repo, short_name, conventions)
    if config is None:
        return None
    remote, merge = config
    if remote == LOCAL_REMOTE:
        return None
    # Maps to refs/remotes/<remote>/<branch> without consulting the remote's fetch refspecs
    merge_name = merge[len(R_HEADS):] if merge.startswith(R_HEADS) else merge
    return f"{R_REMOTES}{remote}/{merge_name}"


def upstream_branch_for(
    repo: Repo, short_name: str, conventions: Conventions = DEFAULT_CONVENTIONS
) -> Optional[str]:
    """Full name of the ref a local branch is compared against.

    The merge ref itself for a local upstream, otherwise the remote-tracking
    branch.
    """
    config = _branch_config(repo, short_name, conventions)
    if config is not None and config[0] == LOCAL_REMOTE:
        return config[1]
    return tracking_branch_for(repo, short_name, conventions)


def is_remote_deleted(
    repo: Repo, full_name: str, conventions: Conventions = DEFAULT_CONVENTIONS
) -> bool:
    """Whether a local branch was tracking a remote branch that no longer exists.

    1. It is a local branch
    2. It is configured to track a remote branch
    3. But no ref exists under the canonical remote for its short name

    Remote refs are never "remote deleted".
    """
    if not is_local_name(full_name, conventions):
        return False

    short_name = short_name_for(full_name, conventions)
    is_being_tracked = tracking_branch_for(repo, short_name, conventions) is not None
    has_no_remote_ref = find_ref(repo, remote_name_for(short_name, conventions)) is None
    return is_being_tracked and has_no_remote_ref


def _count_commits(repo: Repo, rev_range: str) -> int:
    return len(list(repo.iter_commits(rev_range)))


def tracking_status_of(
    repo: Repo, short_name: str, conventions: Conventions = DEFAULT_CONVENTIONS
) -> Optional[TrackingStatus]:
    """Compare a local branch with the branch it tracks.

    Args:
        repo: Repository to inspect
        short_name: Branch name without namespace prefix

    Returns:
        TrackingStatus, or None when the local branch is missing, has no
        tracking config, or its tracked ref does not resolve

    Raises:
        RepositoryAccessError: If refs or commits cannot be read
    """
    local_ref = find_ref(repo, local_name_for(short_name, conventions))
    if local_ref is None:
        return None

    tracked_name = upstream_branch_for(repo, short_name, conventions)
    if tracked_name is None:
        log_debug("[TRACKING] No tracking config", branch=short_name)
        return None

    tracked_ref = find_ref(repo, tracked_name)
    if tracked_ref is None:
        log_debug("[TRACKING] Tracked ref missing", branch=short_name, tracked=tracked_name)
        return None

    try:
        local_sha = repo.commit(local_ref.path).hexsha
        tracked_sha = repo.commit(tracked_ref.path).hexsha
        ahead = _count_commits(repo, f"{tracked_sha}..{local_sha}")
        behind = _count_commits(repo, f"{local_sha}..{tracked_sha}")
    except REPOSITORY_READ_ERRORS as e:
        raise RepositoryAccessError(f"Cannot compare {short_name} with {tracked_name}: {e}") from e

    return TrackingStatus(
        upstream_branch=tracked_name,
        ahead_count=ahead,
        behind_count=behind,
    )
