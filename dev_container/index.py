"""Filesystem-backed registry of branch slots.

Layout: `{worktrees_dir}/{port}/{branch}/`. The directory tree is the only
persisted state; the highest port directory doubles as the allocation ledger.

Lookups and allocation are read-then-act with no locking, so two invocations
racing on the same repository can pick the same port. All access goes through
`WorktreeIndex` so a file lock can be added here without touching callers.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator

from .exceptions import ValidationError
from .fs import ensure_directory
from .models import RepoContext, WorktreeSlot
from .protocols import WorktreeProvider


def parse_port(name: str) -> int | None:
    """Port number of a slot directory name, or None for unrelated entries."""

    if not name.isascii() or not name.isdigit():
        return None
    return int(name)


def parse_start_port(raw: str, *, minimum: int = 1024, maximum: int = 65535) -> int:
    value = raw.strip()
    if not value.isascii() or not value.isdigit():
        raise ValidationError("Invalid port number. Please enter a numeric value.")
    port = int(value)
    if port < minimum or port > maximum:
        raise ValidationError(f"Port must be between {minimum} and {maximum}")
    return port


@dataclass
class WorktreeIndex:
    repo: RepoContext
    vcs: WorktreeProvider

    @property
    def root(self) -> Path:
        return self.repo.worktrees_dir

    def exists(self) -> bool:
        return self.root.is_dir()

    def port_dirs(self) -> list[tuple[int, Path]]:
        """Numerically sorted port slot directories; other entries are ignored."""

        if not self.exists():
            return []
        slots: list[tuple[int, Path]] = []
        for child in self.root.iterdir():
            port = parse_port(child.name)
            if port is not None and child.is_dir():
                slots.append((port, child))
        return sorted(slots)

    def iter_slots(self) -> Iterator[WorktreeSlot]:
        for port, port_dir in self.port_dirs():
            for branch_dir in sorted(port_dir.iterdir()):
                if branch_dir.is_dir():
                    yield WorktreeSlot(port=port, branch=branch_dir.name, path=branch_dir)

    def list(self) -> list[WorktreeSlot]:
        return list(self.iter_slots())

    def find(self, branch: str) -> WorktreeSlot | None:
        for port, port_dir in self.port_dirs():
            candidate = port_dir / branch
            if candidate.is_dir():
                return WorktreeSlot(port=port, branch=branch, path=candidate)
        return None

    def allocate_port(
        self,
        ask_start_port: Callable[[], str],
        *,
        minimum: int = 1024,
        maximum: int = 65535,
    ) -> int:
        """Next port: one past the highest existing slot.

        With no slots at all there is no precedent, so the operator picks the
        starting port. Gaps left by removed slots are never backfilled.
        """

        ports = [port for port, _ in self.port_dirs()]
        if not ports:
            return parse_start_port(ask_start_port(), minimum=minimum, maximum=maximum)
        port = max(ports) + 1
        if port > maximum:
            raise ValidationError(f"No ports left: {max(ports)} is the highest slot and the limit is {maximum}")
        return port

    def create_port_dir(self, port: int) -> Path:
        port_dir = self.root / str(port)
        ensure_directory(port_dir)
        return port_dir

    def remove(self, slot: WorktreeSlot) -> bool:
        """Force-remove the slot's worktree, then its port directory if empty.

        Returns True when the port directory was reclaimed.
        """

        self.vcs.worktree_remove(slot.path, force=True)
        return self.reclaim(slot.port_dir)

    @staticmethod
    def reclaim(port_dir: Path) -> bool:
        if not port_dir.is_dir() or any(port_dir.iterdir()):
            return False
        port_dir.rmdir()
        return True
