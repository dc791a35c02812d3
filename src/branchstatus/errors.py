"""Exceptions raised while computing branch status."""

from __future__ import annotations

import configparser

from git.exc import GitCommandError, ODBError


class BranchStatusError(Exception):
    """Base exception for branch status failures."""


class RepositoryAccessError(BranchStatusError):
    """Raised when the ref store or object store cannot be read.

    Malformed refs (object ids that do not resolve to a commit, corrupt
    history) are reported the same way.
    """


class RefNotFoundError(BranchStatusError, LookupError):
    """Raised when a requested ref name does not resolve to any ref."""


class ConfigError(BranchStatusError):
    """Configuration loading or validation error."""

    pass


# Failures GitPython reports while reading refs, config or objects
REPOSITORY_READ_ERRORS = (GitCommandError, ODBError, configparser.Error, ValueError, OSError)
