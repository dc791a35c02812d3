#!/usr/bin/env python3
"""branchstatus CLI - report branch synchronization status as JSON."""
from __future__ import annotations

import argparse
import json
import sys

from git import InvalidGitRepositoryError, NoSuchPathError, Repo

from .config import load_conventions
from .errors import BranchStatusError
from .observability import log_error
from .status import collect_branch_statuses, get_branch_status


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(
        prog="branchstatus",
        description="Read-only synchronization status of git branches",
    )
    ap.add_argument("--repo", default=".", help="Repository path (default: current directory)")

    sub = ap.add_subparsers(dest="cmd")

    p_show = sub.add_parser("show", help="Status of one branch")
    p_show.add_argument("ref", help="Branch name, short (feature) or full (refs/heads/feature)")

    sub.add_parser("list", help="Status of every local branch and every branch of the remote")

    args = ap.parse_args(argv)

    if not args.cmd:
        ap.print_help()
        sys.exit(2)

    try:
        repo = Repo(args.repo, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError):
        print(f"Not a git repository: {args.repo}", file=sys.stderr)
        sys.exit(1)

    try:
        conventions = load_conventions()
        if args.cmd == "show":
            payload = get_branch_status(repo, args.ref, conventions).to_dict()
        else:
            payload = [status.to_dict() for status in collect_branch_statuses(repo, conventions)]
    except BranchStatusError as e:
        log_error("[CLI] Status failed", cmd=args.cmd, error=str(e))
        print(f"branchstatus {args.cmd}: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        repo.close()

    print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
