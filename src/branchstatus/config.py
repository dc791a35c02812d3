"""Ref naming conventions used by the status computation.

The defaults mirror git's stock layout: a single ``origin`` remote whose
branches live under ``refs/remotes/origin/`` and a ``master`` primary branch.
Environment overrides exist for repositories that use other names.
"""

from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .constants import MASTER, ORIGIN, R_HEADS, R_REMOTES
from .errors import ConfigError

ENV_REMOTE = "BRANCHSTATUS_REMOTE"
ENV_PRIMARY_BRANCH = "BRANCHSTATUS_PRIMARY_BRANCH"


class Conventions(BaseModel):
    """Namespace conventions for one status computation."""

    model_config = {"frozen": True}

    remote_name: str = Field(
        default=ORIGIN,
        description="Name of the canonical remote whose branches are tracked",
    )
    primary_branch: str = Field(
        default=MASTER,
        description="Short name of the primary branch (always considered merged)",
    )

    @field_validator("remote_name", "primary_branch")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be empty")
        if any(ch.isspace() for ch in v):
            raise ValueError(f"must not contain whitespace: {v!r}")
        if v.startswith("/") or v.endswith("/"):
            raise ValueError(f"must not start or end with '/': {v!r}")
        return v

    @property
    def local_prefix(self) -> str:
        return R_HEADS

    @property
    def remote_prefix(self) -> str:
        return f"{R_REMOTES}{self.remote_name}/"


DEFAULT_CONVENTIONS = Conventions()


def load_conventions(env: Optional[dict] = None) -> Conventions:
    """Build conventions from environment overrides.

    Args:
        env: Mapping to read instead of ``os.environ`` (used by tests)

    Returns:
        Validated Conventions; defaults for any unset variable

    Raises:
        ConfigError: If an override is invalid
    """
    source = os.environ if env is None else env
    values = {}
    remote = source.get(ENV_REMOTE)
    if remote is not None:
        values["remote_name"] = remote.strip()
    primary = source.get(ENV_PRIMARY_BRANCH)
    if primary is not None:
        values["primary_branch"] = primary.strip()

    try:
        return Conventions(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid branch conventions: {e}") from e
