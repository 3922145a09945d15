"""Filesystem helpers for dev-container."""

from __future__ import annotations

import re
import shutil
from pathlib import Path
from typing import Iterable, Iterator

from .exceptions import NotInRepositoryError
from .models import Identity, RepoContext


_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify_branch(raw: str) -> str:
    """Canonical branch id: lowercase, `[a-z0-9]` runs joined by single hyphens.

    Returns an empty string when ``raw`` holds no ASCII alphanumerics; callers
    must treat that as an invalid branch name.
    """

    return _NON_ALNUM.sub("-", raw.lower()).strip("-")


def find_repo_root(start: Path | None = None) -> Path:
    """Walk upward from ``start`` until a directory containing `.git` is found.

    `.git` may be a directory (main checkout) or a file (linked worktree).
    """

    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if candidate == Path(candidate.anchor):
            break
        if (candidate / ".git").exists():
            return candidate
    raise NotInRepositoryError()


def resolve_identity(repo: RepoContext, branch: str, port: int) -> Identity:
    return Identity(
        branch=branch,
        port=port,
        worktree_path=repo.worktrees_dir / str(port) / branch,
        container_name=repo.container_name(branch),
        image_name=repo.image_name,
    )


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def iter_files_named(root: Path, names: Iterable[str], max_depth: int) -> Iterator[Path]:
    """Yield files under ``root`` whose name is in ``names``.

    Depth counts like `find -maxdepth`: a file directly in ``root`` is depth 1.
    `.git` directories are never entered.
    """

    wanted = set(names)

    def walk(directory: Path, depth: int) -> Iterator[Path]:
        if depth > max_depth:
            return
        try:
            children = sorted(directory.iterdir())
        except OSError:
            return
        for child in children:
            if child.is_dir() and not child.is_symlink():
                if child.name != ".git":
                    yield from walk(child, depth + 1)
            elif child.name in wanted and child.is_file():
                yield child

    yield from walk(root, 1)


def copy_local_settings(
    repo_root: Path, worktree: Path, names: Iterable[str], max_depth: int
) -> tuple[list[Path], list[Path]]:
    """Copy local override files into the same relative spot under ``worktree``.

    Files whose destination directory does not exist in the worktree are
    skipped. Returns the relative paths that were copied and those skipped.
    """

    copied: list[Path] = []
    skipped: list[Path] = []
    for source in iter_files_named(repo_root, names, max_depth):
        relative = source.relative_to(repo_root)
        destination = worktree / relative
        if not destination.parent.is_dir():
            skipped.append(relative)
            continue
        shutil.copy2(source, destination)
        copied.append(relative)
    return copied, skipped
