"""In-memory stand-ins for git and the container runtime."""

from __future__ import annotations

import shutil
from pathlib import Path

from dev_container.exceptions import ContainerCommandError
from dev_container.lifecycle import LifecycleManager
from dev_container.models import ContainerState, Credentials, Identity, RepoContext, Settings


class FakeVcs:
    def __init__(self, *, supports_relative_paths: bool = True, branches=(), checkout_dirs=()):
        self.supports_relative_paths = supports_relative_paths
        self.branches = set(branches)
        self.checkout_dirs = tuple(checkout_dirs)
        self.added: list[tuple[Path, str, bool]] = []
        self.removed: list[Path] = []

    def branch_create(self, branch: str) -> bool:
        if branch in self.branches:
            return False
        self.branches.add(branch)
        return True

    def worktree_add(self, target: Path, branch: str, relative_paths: bool) -> None:
        self.added.append((target, branch, relative_paths))
        target.mkdir()
        (target / ".git").write_text("gitdir: ../../../repo/.git/worktrees/x\n")
        for name in self.checkout_dirs:
            (target / name).mkdir(parents=True)

    def worktree_remove(self, target: Path, force: bool = True) -> None:
        self.removed.append(target)
        shutil.rmtree(target)


class FakeRuntime:
    def __init__(self) -> None:
        self.states: dict[str, ContainerState] = {}
        self.calls: list[tuple[str, str]] = []

    def inspect(self, name: str) -> ContainerState:
        return self.states.get(name, ContainerState.ABSENT)

    def build(self, repo_root: Path, identity: Identity, credentials: Credentials) -> str:
        self.calls.append(("build", identity.image_name))
        return identity.image_name

    def run(self, repo_root: Path, identity: Identity, credentials: Credentials) -> str:
        self.calls.append(("run", identity.container_name))
        self.states[identity.container_name] = ContainerState.RUNNING
        return "0123456789ab"

    def start(self, name: str) -> None:
        self.calls.append(("start", name))
        self.states[name] = ContainerState.RUNNING

    def stop(self, name: str) -> None:
        self.calls.append(("stop", name))
        self.states[name] = ContainerState.STOPPED

    def rm(self, name: str) -> None:
        if name not in self.states:
            raise ContainerCommandError(["docker", "rm", name], 1, f"Error: No such container: {name}")
        self.calls.append(("rm", name))
        del self.states[name]

    def exec_interactive(self, name: str, user: str, shell: str) -> int:
        self.calls.append(("exec", name))
        return 0

    def names(self, action: str) -> list[str]:
        return [name for verb, name in self.calls if verb == action]


def make_repo(parent: Path, name: str = "proj", dockerfile: str | None = "FROM ubuntu:24.04\n") -> RepoContext:
    root = parent / name
    (root / ".git").mkdir(parents=True)
    if dockerfile is not None:
        (root / "Dockerfile.dev").write_text(dockerfile)
    return RepoContext(root=root)


class Operator:
    """Scripted answers for confirmations and the starting-port prompt."""

    def __init__(self, answer: bool = True, start_port: str = "9000") -> None:
        self.answer = answer
        self.start_port = start_port
        self.confirmations: list[str] = []
        self.port_prompts = 0

    def confirm(self, message: str) -> bool:
        self.confirmations.append(message)
        return self.answer

    def ask_start_port(self) -> str:
        self.port_prompts += 1
        return self.start_port


def make_manager(repo: RepoContext, vcs: FakeVcs, runtime: FakeRuntime, operator: Operator) -> LifecycleManager:
    return LifecycleManager(
        repo=repo,
        settings=Settings(home=repo.root.parent / "home"),
        vcs=vcs,
        runtime=runtime,
        load_credentials=Credentials,
        confirm=operator.confirm,
        ask_start_port=operator.ask_start_port,
    )
