"""Dataclasses shared across modules."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path


class ContainerState(str, enum.Enum):
    """Lifecycle state of a branch container as reported by the runtime."""

    ABSENT = "absent"
    STOPPED = "stopped"
    RUNNING = "running"


@dataclass(frozen=True)
class Mount:
    """Extra bind mount passed to `run`."""

    source: Path
    target: str
    mode: str = "rw"

    def as_arg(self) -> str:
        return f"{self.source}:{self.target}:{self.mode}"


@dataclass(frozen=True)
class Settings:
    """Constants the lifecycle manager needs, resolved once at startup."""

    home: Path
    container_port: int = 8000
    dev_user: str = "dev"
    shell: str = "bash"
    runtime: str = "docker"
    dockerfile_name: str = "Dockerfile.dev"
    local_settings_names: tuple[str, ...] = ("appsettings.Local.json",)
    local_settings_depth: int = 5
    min_port: int = 1024
    max_port: int = 65535
    mounts: tuple[Mount, ...] = ()


@dataclass(frozen=True)
class Credentials:
    """Opaque strings injected into the image build and the container."""

    gitconfig: str = ""
    github_token: str = ""
    github_username: str = ""
    claude_credentials: str = ""
    claude_json: str = ""


@dataclass(frozen=True)
class RepoContext:
    """Repository root plus the sibling directory holding its worktrees."""

    root: Path

    @property
    def name(self) -> str:
        return self.root.name

    @property
    def worktrees_dir(self) -> Path:
        return self.root.parent / f"{self.name}.worktrees"

    @property
    def image_name(self) -> str:
        return f"{self.name}-dev"

    def container_name(self, branch: str) -> str:
        return f"{self.name}-{branch}"


@dataclass(frozen=True)
class WorktreeSlot:
    """A branch slot: `{worktrees_dir}/{port}/{branch}`."""

    port: int
    branch: str
    path: Path

    @property
    def port_dir(self) -> Path:
        return self.path.parent


@dataclass(frozen=True)
class Identity:
    """Every name derived for one branch of one repository."""

    branch: str
    port: int
    worktree_path: Path
    container_name: str
    image_name: str

    @property
    def display_path(self) -> str:
        """Worktree path relative to the repository's parent directory."""

        return "/".join(self.worktree_path.parts[-3:])
