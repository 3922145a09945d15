"""High-level orchestration: list, create-or-attach, kill."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from . import render
from .config import require_dockerfile
from .docker import is_debian_base
from .exceptions import UserAbort, ValidationError, WorktreeNotFoundError
from .fs import copy_local_settings, resolve_identity, slugify_branch
from .index import WorktreeIndex
from .models import ContainerState, Credentials, Identity, RepoContext, Settings, WorktreeSlot
from .protocols import Runtime, WorktreeProvider
from .state import ContainerAction, TeardownAction, attach_action, teardown_action


def normalize_branch(raw: str) -> str:
    branch = slugify_branch(raw)
    if not branch:
        raise ValidationError("Invalid branch name")
    return branch


@dataclass
class LifecycleManager:
    repo: RepoContext
    settings: Settings
    vcs: WorktreeProvider
    runtime: Runtime
    load_credentials: Callable[[], Credentials]
    confirm: Callable[[str], bool]
    ask_start_port: Callable[[], str]

    def __post_init__(self) -> None:
        self.index = WorktreeIndex(self.repo, self.vcs)

    # -- list --------------------------------------------------------------

    def rows(self) -> list[tuple[WorktreeSlot, ContainerState]]:
        slots = self.index.list()
        return [(slot, self.runtime.inspect(self.repo.container_name(slot.branch))) for slot in slots]

    def cmd_list(self) -> None:
        if not self.index.exists():
            render.info(f"No worktrees found in {self.repo.worktrees_dir.name}/")
            return
        render.show_slots(self.rows())

    # -- create-or-attach --------------------------------------------------

    def create_or_attach(self, raw: str) -> Identity:
        dockerfile = require_dockerfile(self.repo, self.settings)
        branch = normalize_branch(raw)
        slot = self.index.find(branch)
        if slot is not None:
            return self.run(slot)
        return self.create(branch, dockerfile)

    def run(self, slot: WorktreeSlot) -> Identity:
        identity = resolve_identity(self.repo, slot.branch, slot.port)
        state = self.runtime.inspect(identity.container_name)
        action = attach_action(state)
        if action is ContainerAction.PROVISION:
            self._provision(identity)
        elif action is ContainerAction.START:
            render.info(f"Starting stopped container '{identity.container_name}'...")
            self.runtime.start(identity.container_name)
        else:
            render.info(f"Container '{identity.container_name}' already running")
        self._attach(identity)
        return identity

    def create(self, branch: str, dockerfile: Path) -> Identity:
        port = self.index.allocate_port(
            self.ask_start_port,
            minimum=self.settings.min_port,
            maximum=self.settings.max_port,
        )
        identity = resolve_identity(self.repo, branch, port)
        render.show_create_summary(identity, self.settings.container_port)
        if not self.confirm("Continue?"):
            raise UserAbort()

        render.info(f"Creating branch '{branch}'...")
        if not self.vcs.branch_create(branch):
            render.info(f"Branch '{branch}' already exists, using existing branch")

        render.info(f"Creating worktree at {identity.display_path}...")
        self.index.create_port_dir(port)
        relative = self.vcs.supports_relative_paths and not is_debian_base(dockerfile)
        self.vcs.worktree_add(identity.worktree_path, branch, relative)

        render.info("Copying local settings files...")
        copied, skipped = copy_local_settings(
            self.repo.root,
            identity.worktree_path,
            self.settings.local_settings_names,
            self.settings.local_settings_depth,
        )
        for relative_path in copied:
            render.info(f"  Copied {relative_path}")
        for relative_path in skipped:
            render.warning(f"  Skipped {relative_path}: no matching directory in the worktree")

        self._provision(identity)
        render.console.print()
        render.success("Container ready!")
        self._attach(identity)
        return identity

    def _provision(self, identity: Identity) -> None:
        credentials = self.load_credentials()
        render.info(f"Building image '{identity.image_name}'...")
        self.runtime.build(self.repo.root, identity, credentials)
        render.info(f"Starting container '{identity.container_name}'...")
        self.runtime.run(self.repo.root, identity, credentials)

    def _attach(self, identity: Identity) -> None:
        render.show_port_mapping(identity.port, self.settings.container_port)
        self.runtime.exec_interactive(identity.container_name, self.settings.dev_user, self.settings.shell)

    # -- kill --------------------------------------------------------------

    def kill(self, raw: str) -> Identity:
        branch = normalize_branch(raw)
        slot = self.index.find(branch)
        if slot is None:
            raise WorktreeNotFoundError(f"No worktree found for branch '{branch}'")
        identity = resolve_identity(self.repo, branch, slot.port)
        render.show_kill_summary(identity)
        if not self.confirm("Are you sure?"):
            raise UserAbort()

        # Container goes first so nothing keeps running in a deleted directory.
        name = identity.container_name
        action = teardown_action(self.runtime.inspect(name))
        if action is TeardownAction.STOP_AND_REMOVE:
            render.info(f"Stopping container '{name}'...")
            self.runtime.stop(name)
        if action is TeardownAction.SKIP:
            render.info(f"No container found for '{name}'")
        else:
            render.info(f"Removing container '{name}'...")
            self.runtime.rm(name)

        render.info("Removing git worktree...")
        if self.index.remove(slot):
            render.info(f"Removed empty port directory '{slot.port}'")

        render.console.print()
        render.success(f"Killed '{branch}' (port {slot.port})")
        return identity
