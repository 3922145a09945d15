"""Thin wrappers around git CLI commands."""

from __future__ import annotations

import os
import re
import subprocess
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Iterable

from . import render
from .exceptions import GitCommandError

# `git worktree add --relative-paths` first shipped in git 2.48
RELATIVE_PATHS_MIN_VERSION = (2, 48)

_VERSION_RE = re.compile(r"(\d+)\.(\d+)")


def run_git(
    args: Iterable[str],
    *,
    cwd: Path | None = None,
    raise_on_error: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Execute a git command and optionally raise on failure."""

    cmd = ["git", *args]
    render.command(cmd)
    proc = subprocess.run(
        cmd,
        cwd=str(cwd) if cwd else None,
        capture_output=True,
        text=True,
        check=False,
    )
    if raise_on_error and proc.returncode != 0:
        raise GitCommandError(cmd, proc.returncode, proc.stderr)
    return proc


def parse_version(text: str) -> tuple[int, int] | None:
    """Extract `(major, minor)` from `git version 2.48.1` style output."""

    match = _VERSION_RE.search(text)
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def git_version() -> tuple[int, int] | None:
    proc = run_git(["--version"], raise_on_error=False)
    if proc.returncode != 0:
        return None
    return parse_version(proc.stdout)


def branch_exists(path: Path, branch: str) -> bool:
    proc = run_git(
        ["show-ref", "--verify", "--quiet", f"refs/heads/{branch}"],
        cwd=path,
        raise_on_error=False,
    )
    return proc.returncode == 0


def worktree_add_args(repo_root: Path, target: Path, branch: str, relative_paths: bool) -> list[str]:
    args = ["worktree", "add"]
    if relative_paths:
        args.append("--relative-paths")
    args.extend([os.path.relpath(target, repo_root), branch])
    return args


@dataclass
class GitWorktrees:
    """VCS worktree provider bound to one repository."""

    repo_root: Path

    @cached_property
    def supports_relative_paths(self) -> bool:
        version = git_version()
        return version is not None and version >= RELATIVE_PATHS_MIN_VERSION

    def branch_create(self, branch: str) -> bool:
        """Create ``branch`` from HEAD. Returns False if it already exists."""

        if branch_exists(self.repo_root, branch):
            return False
        run_git(["branch", branch], cwd=self.repo_root)
        return True

    def worktree_add(self, target: Path, branch: str, relative_paths: bool) -> None:
        run_git(worktree_add_args(self.repo_root, target, branch, relative_paths), cwd=self.repo_root)

    def worktree_remove(self, target: Path, force: bool = True) -> None:
        args = ["worktree", "remove"]
        if force:
            args.append("--force")
        args.append(str(target))
        run_git(args, cwd=self.repo_root)
