"""branchstatus: read-only synchronization status of git branches."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("branchstatus")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"  # Fallback for editable installs without metadata

from .ancestry import CommitWalker  # noqa: F401
from .config import Conventions, load_conventions  # noqa: F401
from .errors import (  # noqa: F401
    BranchStatusError,
    ConfigError,
    RefNotFoundError,
    RepositoryAccessError,
)
from .status import BranchStatus, collect_branch_statuses, get_branch_status  # noqa: F401
from .tracking import TrackingStatus  # noqa: F401

__all__ = [
    "BranchStatus",
    "BranchStatusError",
    "CommitWalker",
    "ConfigError",
    "Conventions",
    "RefNotFoundError",
    "RepositoryAccessError",
    "TrackingStatus",
    "collect_branch_statuses",
    "get_branch_status",
    "load_conventions",
    "__version__",
]
