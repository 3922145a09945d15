"""Wrappers around the container runtime CLI (docker or podman)."""

from __future__ import annotations

import os
import re
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from . import render
from .exceptions import ContainerCommandError
from .models import ContainerState, Credentials, Identity, Settings
from .state import classify

_FROM_RE = re.compile(r"^FROM\s+(\S+)", re.IGNORECASE)


def dockerfile_base_image(dockerfile: Path) -> str | None:
    """Return the image named by the first `FROM` line, if any."""

    try:
        lines = dockerfile.read_text().splitlines()
    except OSError:
        return None
    for line in lines:
        match = _FROM_RE.match(line)
        if match:
            return match.group(1)
    return None


def is_debian_base(dockerfile: Path) -> bool:
    """True for `debian`, `debian:tag`, `registry/debian` and `registry/debian:tag`.

    Debian stable ships a git that cannot read relative worktree links.
    """

    image = dockerfile_base_image(dockerfile)
    if not image:
        return False
    name = image.rsplit("/", 1)[-1].split(":", 1)[0]
    return name == "debian"


def build_args(identity: Identity, credentials: Credentials) -> list[str]:
    values = {
        "GITCONFIG": credentials.gitconfig,
        "GITHUB_USERNAME": credentials.github_username,
        "HOST_PROJECT_PATH": str(identity.worktree_path),
        "HOST_UID": str(os.getuid()),
        "HOST_GID": str(os.getgid()),
    }
    args: list[str] = []
    for key, value in values.items():
        args.extend(["--build-arg", f"{key}={value}"])
    return args


@dataclass
class ContainerRuntime:
    """Container runtime collaborator. State is always re-queried, never cached."""

    settings: Settings

    def _run(
        self,
        args: Iterable[str],
        *,
        capture: bool = True,
        raise_on_error: bool = True,
    ) -> subprocess.CompletedProcess[str]:
        cmd = [self.settings.runtime, *args]
        render.command(cmd)
        proc = subprocess.run(cmd, capture_output=capture, text=True, check=False)
        if raise_on_error and proc.returncode != 0:
            raise ContainerCommandError(cmd, proc.returncode, proc.stderr if capture else None)
        return proc

    def inspect(self, name: str) -> ContainerState:
        proc = self._run(["inspect", "--type", "container", "-f", "{{.State.Running}}", name], raise_on_error=False)
        return classify(proc.stdout if proc.returncode == 0 else None)

    def build(self, repo_root: Path, identity: Identity, credentials: Credentials) -> str:
        """Build (and overwrite) the shared repository image."""

        args = ["build", "-f", str(repo_root / self.settings.dockerfile_name)]
        token_file: str | None = None
        try:
            if credentials.github_token:
                fd, token_file = tempfile.mkstemp(prefix="dev-container-token-")
                with open(fd, "w") as handle:
                    handle.write(credentials.github_token)
                args.extend(["--secret", f"id=github_token,src={token_file}"])
            args.extend(build_args(identity, credentials))
            args.extend(["-t", identity.image_name, str(repo_root)])
            self._run(args, capture=False)
        finally:
            if token_file:
                Path(token_file).unlink(missing_ok=True)
        return identity.image_name

    def run_args(self, repo_root: Path, identity: Identity, credentials: Credentials) -> list[str]:
        worktree = str(identity.worktree_path)
        args = [
            "run",
            "--init",
            "-d",
            "--name",
            identity.container_name,
            "-p",
            f"{identity.port}:{self.settings.container_port}",
            "-e",
            f"CLAUDE_CODE_CREDENTIALS={credentials.claude_credentials}",
            "-e",
            f"CLAUDE_JSON={credentials.claude_json}",
            "-v",
            f"{repo_root}:{repo_root}",
            "-v",
            f"{worktree}:{worktree}",
        ]
        for mount in self.settings.mounts:
            if mount.source.exists():
                args.extend(["-v", mount.as_arg()])
        args.extend(["-w", worktree, identity.image_name, "tail", "-f", "/dev/null"])
        return args

    def run(self, repo_root: Path, identity: Identity, credentials: Credentials) -> str:
        proc = self._run(self.run_args(repo_root, identity, credentials))
        return proc.stdout.strip()

    def start(self, name: str) -> None:
        self._run(["start", name])

    def stop(self, name: str) -> None:
        self._run(["stop", name])

    def rm(self, name: str) -> None:
        self._run(["rm", name])

    def exec_interactive(self, name: str, user: str, shell: str) -> int:
        proc = self._run(["exec", "-it", "-u", user, name, shell], capture=False, raise_on_error=False)
        return proc.returncode
