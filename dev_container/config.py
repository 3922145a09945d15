"""Load settings, credentials and repository context for runtime."""

from __future__ import annotations

import os
import platform
import shutil
import subprocess
from pathlib import Path
from typing import Mapping

from .exceptions import MissingDockerfileError, ValidationError
from .fs import find_repo_root
from .models import Credentials, Mount, RepoContext, Settings

KEYCHAIN_SERVICE = "Claude Code-credentials"


def load_settings(env: Mapping[str, str] | None = None, home: Path | None = None) -> Settings:
    env = os.environ if env is None else env
    home = home or Path.home()
    defaults = Settings(home=home)
    container_port = _int_env(env, "DEV_CONTAINER_PORT", defaults.container_port)
    if not 1 <= container_port <= 65535:
        raise ValidationError(f"DEV_CONTAINER_PORT must be between 1 and 65535, got {container_port}")
    runtime = env.get("DEV_CONTAINER_RUNTIME") or defaults.runtime
    container_home = f"/home/{defaults.dev_user}"
    mounts = (
        Mount(home / ".claude" / "projects", f"{container_home}/.claude/projects"),
        Mount(home / ".claude" / "history.jsonl", f"{container_home}/.claude/history.jsonl"),
    )
    return Settings(home=home, container_port=container_port, runtime=runtime, mounts=mounts)


def load_credentials(settings: Settings, env: Mapping[str, str] | None = None) -> Credentials:
    """Gather the opaque strings handed to the image build and container.

    Every source is optional; anything missing becomes an empty string.
    """

    env = os.environ if env is None else env
    return Credentials(
        gitconfig=env.get("GITCONFIG", ""),
        github_token=env.get("GITHUB_TOKEN_DOTFILES", ""),
        github_username=env.get("GITHUB_USERNAME", ""),
        claude_credentials=_claude_credentials(settings.home, env),
        claude_json=_read_text(settings.home / ".claude.json"),
    )


def load_repo(start: Path | None = None) -> RepoContext:
    return RepoContext(root=find_repo_root(start))


def require_dockerfile(repo: RepoContext, settings: Settings) -> Path:
    dockerfile = repo.root / settings.dockerfile_name
    if not dockerfile.is_file():
        raise MissingDockerfileError(f"{settings.dockerfile_name} not found at repository root")
    return dockerfile


def _claude_credentials(home: Path, env: Mapping[str, str]) -> str:
    if platform.system() == "Darwin":
        return _keychain_password(KEYCHAIN_SERVICE, env.get("USER", ""))
    return _read_text(home / ".claude" / ".credentials.json")


def _keychain_password(service: str, account: str) -> str:
    if not shutil.which("security"):
        return ""
    proc = subprocess.run(
        ["security", "find-generic-password", "-s", service, "-a", account, "-w"],
        capture_output=True,
        text=True,
        check=False,
    )
    if proc.returncode != 0:
        return ""
    return proc.stdout.strip()


def _read_text(path: Path) -> str:
    try:
        return path.read_text()
    except OSError:
        return ""


def _int_env(env: Mapping[str, str], var: str, default: int) -> int:
    raw = env.get(var)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValidationError(f"Environment variable {var} must be an integer, got {raw!r}") from exc
