"""Point-in-time status of a single branch.

``BranchStatus.from_ref()`` reads everything it needs from the repository in
one pass and returns an immutable snapshot:

1. Ref resolution: local/remote side, short name, which counterparts exist
2. Tracking: configured tracking branch and ahead/behind counts
3. Remote deletion and current-branch checks
4. Ancestry: tip commit and whether it is merged into another local branch

Any read failure aborts the whole construction with ``RepositoryAccessError``;
a partially computed snapshot is never returned. Two snapshots are equal when
they describe the same ref of the same repository, however stale either is.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from git import Commit, Reference, Repo

from .ancestry import CommitWalker
from .config import DEFAULT_CONVENTIONS, Conventions
from .errors import RefNotFoundError
from .observability import log_debug, timeit
from .refs import (
    current_branch_name,
    find_ref,
    is_local_name,
    is_remote_name,
    list_local_branches,
    list_remote_branches,
    local_name_for,
    remote_name_for,
    short_name_for,
)
from .tracking import TrackingStatus, is_remote_deleted, tracking_status_of


@dataclass(frozen=True, eq=False)
class BranchStatus:
    """Status of one ref at one point in time."""

    ref: Reference
    full_name: str
    repo_dir: Path
    has_local_ref: bool
    has_remote_ref: bool
    has_tracked_ref: bool
    is_remote_deleted: bool
    is_current_branch: bool
    has_unpushed_commits: bool
    has_remote_commits: bool
    is_merged: bool
    latest_commit: Commit
    tracking: Optional[TrackingStatus] = None
    conventions: Conventions = field(default=DEFAULT_CONVENTIONS, repr=False)

    @cached_property
    def short_name(self) -> str:
        return short_name_for(self.full_name, self.conventions)

    @property
    def is_local(self) -> bool:
        return is_local_name(self.full_name, self.conventions)

    @property
    def is_remote(self) -> bool:
        return is_remote_name(self.full_name, self.conventions)

    @property
    def is_primary_branch(self) -> bool:
        return self.short_name == self.conventions.primary_branch

    @property
    def local_branch_name_for(self) -> str:
        return local_name_for(self.short_name, self.conventions)

    @property
    def remote_branch_name_for(self) -> str:
        return remote_name_for(self.short_name, self.conventions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BranchStatus):
            return NotImplemented
        return self.repo_dir == other.repo_dir and self.full_name == other.full_name

    def __hash__(self) -> int:
        return hash((self.repo_dir, self.full_name))

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view for reporting."""
        return {
            "full_name": self.full_name,
            "short_name": self.short_name,
            "is_local": self.is_local,
            "is_remote": self.is_remote,
            "is_current_branch": self.is_current_branch,
            "has_local_ref": self.has_local_ref,
            "has_remote_ref": self.has_remote_ref,
            "has_tracked_ref": self.has_tracked_ref,
            "is_remote_deleted": self.is_remote_deleted,
            "has_unpushed_commits": self.has_unpushed_commits,
            "has_remote_commits": self.has_remote_commits,
            "ahead_count": self.tracking.ahead_count if self.tracking else 0,
            "behind_count": self.tracking.behind_count if self.tracking else 0,
            "is_merged": self.is_merged,
            "latest_commit": self.latest_commit.hexsha,
        }

    @classmethod
    def from_ref(
        cls,
        repo: Repo,
        ref: Reference,
        conventions: Optional[Conventions] = None,
    ) -> "BranchStatus":
        """Compute the status of ``ref``.

        Raises:
            RepositoryAccessError: If the repository cannot be read or the ref
                does not point at a valid commit
        """
        conventions = conventions or DEFAULT_CONVENTIONS
        full_name = ref.path
        short_name = short_name_for(full_name, conventions)

        with timeit("branch_status.build", ref=full_name) as info:
            has_local_ref = find_ref(repo, local_name_for(short_name, conventions)) is not None
            has_remote_ref = find_ref(repo, remote_name_for(short_name, conventions)) is not None
            # The tracked ref is the counterpart on the opposite side
            if is_remote_name(full_name, conventions):
                has_tracked_ref = has_local_ref
            else:
                has_tracked_ref = has_remote_ref

            tracking = tracking_status_of(repo, short_name, conventions)
            remote_deleted = is_remote_deleted(repo, full_name, conventions)
            is_current = full_name == current_branch_name(repo)
            latest_commit, merged = compute_merge_status(repo, ref, conventions)
            info["is_merged"] = merged

        return cls(
            ref=ref,
            full_name=full_name,
            repo_dir=Path(repo.git_dir).resolve(),
            has_local_ref=has_local_ref,
            has_remote_ref=has_remote_ref,
            has_tracked_ref=has_tracked_ref,
            is_remote_deleted=remote_deleted,
            is_current_branch=is_current,
            has_unpushed_commits=tracking.has_unpushed_commits if tracking else False,
            has_remote_commits=tracking.has_remote_commits if tracking else False,
            is_merged=merged,
            latest_commit=latest_commit,
            tracking=tracking,
            conventions=conventions,
        )


def compute_merge_status(
    repo: Repo, ref: Reference, conventions: Conventions = DEFAULT_CONVENTIONS
) -> Tuple[Commit, bool]:
    """Resolve the tip of ``ref`` and decide whether it is merged.

    The primary branch is always merged. Any other branch is merged when its
    tip is an ancestor of, or equal to, the tip of another local branch.

    Returns:
        (tip commit, is_merged)
    """
    with CommitWalker(repo) as walker:
        latest_commit = walker.parse_commit(ref)

        if short_name_for(ref.path, conventions) == conventions.primary_branch:
            return latest_commit, True

        others = [head for head in list_local_branches(repo) if head.path != ref.path]
        witness = walker.find_merge_witness(latest_commit, others)
        if witness is not None:
            log_debug("[ANCESTRY] Merged", ref=ref.path, into=witness.path)
        return latest_commit, witness is not None


def resolve_branch_ref(
    repo: Repo, name: str, conventions: Conventions = DEFAULT_CONVENTIONS
) -> Reference:
    """Find a branch ref by full name, or by short name (local first, then remote).

    Raises:
        RefNotFoundError: If nothing matches
    """
    if name.startswith("refs/"):
        candidates = [name]
    else:
        candidates = [local_name_for(name, conventions), remote_name_for(name, conventions)]

    for candidate in candidates:
        ref = find_ref(repo, candidate)
        if ref is not None:
            return ref
    raise RefNotFoundError(f"No branch named {name!r}")


def get_branch_status(
    repo: Repo,
    ref: Union[str, Reference],
    conventions: Optional[Conventions] = None,
) -> BranchStatus:
    """Snapshot a branch given as a ref object or a (full or short) name."""
    conventions = conventions or DEFAULT_CONVENTIONS
    if isinstance(ref, str):
        ref = resolve_branch_ref(repo, ref, conventions)
    return BranchStatus.from_ref(repo, ref, conventions)


def collect_branch_statuses(
    repo: Repo, conventions: Optional[Conventions] = None
) -> List[BranchStatus]:
    """Snapshots of every local branch, then every branch of the canonical remote."""
    conventions = conventions or DEFAULT_CONVENTIONS
    refs: List[Reference] = list(list_local_branches(repo))
    refs.extend(list_remote_branches(repo, conventions))
    return [BranchStatus.from_ref(repo, ref, conventions) for ref in refs]
