"""Typer CLI entrypoint for dev-container."""

from __future__ import annotations

from functools import partial
from typing import Optional

import typer

from . import __version__, interactive, render
from .config import load_credentials, load_repo, load_settings
from .docker import ContainerRuntime
from .exceptions import DevContainerError, UserAbort, ValidationError
from .git import GitWorktrees
from .lifecycle import LifecycleManager
from .models import RepoContext
from .templates import COMMAND_NAME, completion_script, write_dockerfile

app = typer.Typer(
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"], "ignore_unknown_options": True},
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{COMMAND_NAME} {__version__}")
        raise typer.Exit()


@app.command()
def main(
    words: Optional[list[str]] = typer.Argument(
        None,
        metavar="[BRANCH | kill BRANCH | init BASE_IMAGE | completion SHELL]",
        show_default=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Echo every git and container command."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the dev-container version and exit.",
    ),
) -> None:
    """Isolated dev environments from git worktrees + containers.

    Each branch gets its own worktree and container with a unique port.

    \b
    (no args)           List all worktrees and their container status
    <branch>            Create or attach to container for branch (auto-slugified)
    kill <branch>       Stop container, remove worktree and folder for branch
    init <base-image>   Generate skeleton Dockerfile.dev (or .example if exists)
    completion <shell>  Output shell completion code (bash or zsh)

    \b
    Worktrees live in ../{repo}.worktrees/{port}/{branch}/ next to the repository.
    Set GITCONFIG, GITHUB_TOKEN_DOTFILES and GITHUB_USERNAME to pass them to the build.
    """
    _ = version  # handled via callback
    render.set_verbose(verbose)
    try:
        dispatch(words or [])
    except UserAbort as exc:
        render.info(str(exc))
        raise typer.Exit(exc.exit_code) from exc
    except DevContainerError as exc:
        render.error(str(exc))
        raise typer.Exit(exc.exit_code) from exc


def dispatch(words: list[str]) -> None:
    if not words:
        build_manager(load_repo()).cmd_list()
        return
    command, rest = words[0], words[1:]
    if command == "kill":
        repo = load_repo()
        label = " ".join(rest)
        if not label.strip():
            raise ValidationError(f"Usage: {COMMAND_NAME} kill <branch>")
        build_manager(repo).kill(label)
    elif command == "init":
        if not rest:
            raise ValidationError(f"Usage: {COMMAND_NAME} init <base-image>")
        cmd_init(rest[0])
    elif command == "completion":
        if not rest:
            raise ValidationError(f"Usage: {COMMAND_NAME} completion [bash|zsh]")
        typer.echo(completion_script(rest[0]), nl=False)
    else:
        build_manager(load_repo()).create_or_attach(" ".join(words))


def build_manager(repo: RepoContext) -> LifecycleManager:
    settings = load_settings()
    return LifecycleManager(
        repo=repo,
        settings=settings,
        vcs=GitWorktrees(repo.root),
        runtime=ContainerRuntime(settings),
        load_credentials=partial(load_credentials, settings),
        confirm=interactive.confirm,
        ask_start_port=interactive.ask_start_port,
    )


def cmd_init(base_image: str) -> None:
    repo = load_repo()
    settings = load_settings()
    target = write_dockerfile(repo.root, base_image, settings.dockerfile_name)
    if target.name != settings.dockerfile_name:
        render.info(f"{settings.dockerfile_name} already exists, created {target.name} instead")
    render.success(f"Created {target.name}")
    render.console.print("Edit the file to add your project-specific setup, then run:")
    render.console.print(f"  [cyan]{COMMAND_NAME} <branch-name>[/cyan]")


def run() -> None:
    app()


__all__ = ["app", "run"]
