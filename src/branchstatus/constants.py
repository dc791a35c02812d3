"""Ref namespace conventions shared by every status computation."""

from __future__ import annotations

# Namespace prefixes (must match git's own layout)
R_HEADS = "refs/heads/"
R_REMOTES = "refs/remotes/"

# The single canonical remote and the primary integration branch
ORIGIN = "origin"
MASTER = "master"
