"""Commit-graph walking for merge detection.

A ``CommitWalker`` is opened once per status computation and shared across
every ancestry query in it, so commits and parent lists read for one branch
are reused for the next. Close it (or use it as a context manager) when the
traversal is done.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Dict, Iterable, Optional, Set, Tuple, Union

from git import Commit, Repo, SymbolicReference

from .errors import REPOSITORY_READ_ERRORS, RepositoryAccessError

Revision = Union[str, Commit, SymbolicReference]


class CommitWalker:
    """Shared commit cache and ancestor-or-equal test over one repository."""

    def __init__(self, repo: Repo) -> None:
        self.repo = repo
        self._commits: Dict[str, Commit] = {}
        self._parents: Dict[str, Tuple[str, ...]] = {}
        self._closed = False

    def __enter__(self) -> "CommitWalker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def cached_commit_count(self) -> int:
        return len(self._parents)

    def close(self) -> None:
        """Release cached commits. The walker cannot be used afterwards."""
        self._commits.clear()
        self._parents.clear()
        self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("CommitWalker has been closed")

    def parse_commit(self, rev: Revision) -> Commit:
        """Resolve a ref, hexsha or commit to a parsed commit.

        Tags are peeled to the commit they point at.

        Raises:
            RepositoryAccessError: If the revision does not name a readable commit
        """
        self._check_open()
        try:
            if isinstance(rev, Commit):
                commit = rev
            elif isinstance(rev, SymbolicReference):
                commit = self.repo.commit(rev.path)
            else:
                commit = self.repo.commit(rev)
            hexsha = commit.hexsha
        except REPOSITORY_READ_ERRORS as e:
            raise RepositoryAccessError(f"Cannot resolve commit {rev}: {e}") from e

        cached = self._commits.get(hexsha)
        if cached is not None:
            return cached
        self._commits[hexsha] = commit
        return commit

    def parents_of(self, hexsha: str) -> Tuple[str, ...]:
        self._check_open()
        parents = self._parents.get(hexsha)
        if parents is None:
            commit = self._commits.get(hexsha)
            try:
                if commit is None:
                    commit = self.repo.commit(hexsha)
                parents = tuple(parent.hexsha for parent in commit.parents)
            except REPOSITORY_READ_ERRORS as e:
                raise RepositoryAccessError(f"Cannot read parents of {hexsha}: {e}") from e
            self._parents[hexsha] = parents
        return parents

    def is_merged_into(self, base: Revision, tip: Revision) -> bool:
        """Whether ``base`` is an ancestor of, or the same commit as, ``tip``.

        Walks parent edges breadth-first from ``tip``; each commit is visited
        once per query.
        """
        base_sha = self.parse_commit(base).hexsha
        tip_sha = self.parse_commit(tip).hexsha

        seen: Set[str] = {tip_sha}
        queue: Deque[str] = deque([tip_sha])
        while queue:
            current = queue.popleft()
            if current == base_sha:
                return True
            for parent in self.parents_of(current):
                if parent not in seen:
                    seen.add(parent)
                    queue.append(parent)
        return False

    def find_merge_witness(self, base: Revision, tips: Iterable[Revision]) -> Optional[Revision]:
        """First of ``tips`` that ``base`` is merged into, or None."""
        for tip in tips:
            if self.is_merged_into(base, tip):
                return tip
        return None
