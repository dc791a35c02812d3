"""Ref classification and lookup.

Names are classified by their namespace prefix alone: ``refs/heads/`` is a
local branch, ``refs/remotes/<remote>/`` a branch of the canonical remote.
Lookups go through GitPython and distinguish "no such ref" (``None``) from a
repository that cannot be read (``RepositoryAccessError``).
"""

from __future__ import annotations

from typing import List, Optional

from git import GitCommandError, Head, Reference, Repo

from .config import DEFAULT_CONVENTIONS, Conventions
from .errors import REPOSITORY_READ_ERRORS, RepositoryAccessError

# `git show-ref --verify --quiet` exits 1 for a missing ref, 128 for fatal errors
_SHOW_REF_MISSING = 1


def is_local_name(full_name: str, conventions: Conventions = DEFAULT_CONVENTIONS) -> bool:
    return full_name.startswith(conventions.local_prefix)


def is_remote_name(full_name: str, conventions: Conventions = DEFAULT_CONVENTIONS) -> bool:
    return full_name.startswith(conventions.remote_prefix)


def short_name_for(full_name: str, conventions: Conventions = DEFAULT_CONVENTIONS) -> str:
    """Strip the local or remote namespace prefix from a full ref name.

    A name under neither namespace is returned unchanged.
    """
    if is_local_name(full_name, conventions):
        return full_name[len(conventions.local_prefix):]
    if is_remote_name(full_name, conventions):
        return full_name[len(conventions.remote_prefix):]
    return full_name


def local_name_for(short_name: str, conventions: Conventions = DEFAULT_CONVENTIONS) -> str:
    return conventions.local_prefix + short_name


def remote_name_for(short_name: str, conventions: Conventions = DEFAULT_CONVENTIONS) -> str:
    return conventions.remote_prefix + short_name


def find_ref(repo: Repo, full_name: str) -> Optional[Reference]:
    """Look up a ref by its exact full name.

    Args:
        repo: Repository to search
        full_name: Fully qualified name such as ``refs/heads/main``

    Returns:
        The reference (``Head``, ``RemoteReference`` or ``Reference``), or None
        if no ref has that name

    Raises:
        RepositoryAccessError: If the ref store cannot be read
    """
    try:
        repo.git.show_ref("--verify", "--quiet", full_name)
    except GitCommandError as e:
        if e.status == _SHOW_REF_MISSING:
            return None
        raise RepositoryAccessError(f"Cannot read ref {full_name}: {e}") from e

    try:
        ref = Reference.from_path(repo, full_name)
        ref.object  # a ref to a missing object is malformed, not absent
    except REPOSITORY_READ_ERRORS as e:
        raise RepositoryAccessError(f"Malformed ref {full_name}: {e}") from e
    return ref


def list_local_branches(repo: Repo) -> List[Head]:
    """All local branch heads, in ref-name order."""
    try:
        return list(repo.heads)
    except REPOSITORY_READ_ERRORS as e:
        raise RepositoryAccessError(f"Cannot list local branches: {e}") from e


def list_remote_branches(
    repo: Repo, conventions: Conventions = DEFAULT_CONVENTIONS
) -> List[Reference]:
    """Branches of the canonical remote, in ref-name order.

    The symbolic ``refs/remotes/<remote>/HEAD`` is not a branch and is skipped.
    """
    try:
        refs = [
            ref for ref in repo.refs
            if is_remote_name(ref.path, conventions)
            and short_name_for(ref.path, conventions) != "HEAD"
        ]
    except REPOSITORY_READ_ERRORS as e:
        raise RepositoryAccessError(f"Cannot list remote branches: {e}") from e
    return sorted(refs, key=lambda ref: ref.path)


def current_branch_name(repo: Repo) -> Optional[str]:
    """Full name of the checked-out branch, or None for a detached HEAD."""
    try:
        head = repo.head
        if head.is_detached:
            return None
        return head.reference.path
    except REPOSITORY_READ_ERRORS as e:
        raise RepositoryAccessError(f"Cannot resolve HEAD: {e}") from e
