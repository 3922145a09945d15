"""Protocol definitions for the external collaborators."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from .models import ContainerState, Credentials, Identity


class WorktreeProvider(Protocol):
    """VCS operations the lifecycle manager relies on."""

    @property
    def supports_relative_paths(self) -> bool:
        """Whether the host toolchain can write relative worktree links."""
        ...

    def branch_create(self, branch: str) -> bool:
        """Create a branch from HEAD; return False if it already existed."""
        ...

    def worktree_add(self, target: Path, branch: str, relative_paths: bool) -> None:
        ...

    def worktree_remove(self, target: Path, force: bool = True) -> None:
        ...


class Runtime(Protocol):
    """Container runtime operations. Builds and runs are opaque to the caller."""

    def inspect(self, name: str) -> ContainerState:
        ...

    def build(self, repo_root: Path, identity: Identity, credentials: Credentials) -> str:
        ...

    def run(self, repo_root: Path, identity: Identity, credentials: Credentials) -> str:
        ...

    def start(self, name: str) -> None:
        ...

    def stop(self, name: str) -> None:
        ...

    def rm(self, name: str) -> None:
        ...

    def exec_interactive(self, name: str, user: str, shell: str) -> int:
        ...
