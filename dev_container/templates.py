"""Text emitted by `init` and `completion`."""

from __future__ import annotations

from pathlib import Path

from .exceptions import ValidationError

COMMAND_NAME = "dev-container"

DOCKERFILE_TEMPLATE = """\
# Dockerfile.dev - Generated by {command}
# Minimum requirement: a 'dev' user with bash

FROM {base_image}

# === SYSTEM PACKAGES ===
# Add packages your project needs
# RUN apt-get update && apt-get install -y ...

# === BUILD ARGS (passed by {command}) ===
ARG GITCONFIG=""         # Contents of host ~/.gitconfig
ARG GITHUB_USERNAME=""   # For dotfiles repo (optional)
ARG HOST_PROJECT_PATH="" # Worktree path, for path parity with host
ARG HOST_UID=1000        # Host user's UID (for volume permission parity)
ARG HOST_GID=1000        # Host user's GID

# === DEV USER (required by {command}) ===
RUN groupadd -g $HOST_GID dev && useradd -m -s /bin/bash -u $HOST_UID -g $HOST_GID dev

# === YOUR PROJECT TOOLS ===
# Add your language runtimes, build tools, etc.

USER dev

# === OPTIONAL: Dotfiles with chezmoi ===
# RUN --mount=type=secret,id=github_token,mode=0444 \\
#     GITHUB_TOKEN=$(cat /run/secrets/github_token 2>/dev/null || true) && \\
#     if [ -n "$GITHUB_TOKEN" ] && [ -n "$GITHUB_USERNAME" ]; then \\
#         sh -c "$(curl -fsLS get.chezmoi.io/lb)" -- init --apply \\
#         https://${{GITHUB_TOKEN}}@github.com/${{GITHUB_USERNAME}}/dotfiles.git; \\
#     fi

# === RUNTIME ENV VARS (available in container) ===
# CLAUDE_CODE_CREDENTIALS - Claude auth JSON
# CLAUDE_JSON            - Contents of ~/.claude.json (skips onboarding)

WORKDIR /home/dev
"""

BASH_COMPLETION = """\
_dev_container_complete() {{
    local cur="${{COMP_WORDS[COMP_CWORD]}}"
    local branches=$(git branch --format='%(refname:short)' 2>/dev/null)
    COMPREPLY=($(compgen -W "kill init completion $branches" -- "$cur"))
}}
complete -F _dev_container_complete {command}
"""

ZSH_COMPLETION = """\
_dev_container_complete() {{
    local branches=(${{(f)"$(git branch --format='%(refname:short)' 2>/dev/null)"}})
    compadd kill init completion
    compadd -a branches
}}
compdef _dev_container_complete {command}
"""

_COMPLETIONS = {"bash": BASH_COMPLETION, "zsh": ZSH_COMPLETION}


def render_dockerfile(base_image: str) -> str:
    return DOCKERFILE_TEMPLATE.format(base_image=base_image, command=COMMAND_NAME)


def write_dockerfile(repo_root: Path, base_image: str, name: str = "Dockerfile.dev") -> Path:
    """Write the skeleton, falling back to `<name>.example` rather than overwrite."""

    target = repo_root / name
    if target.exists():
        target = repo_root / f"{name}.example"
    target.write_text(render_dockerfile(base_image))
    return target


def completion_script(shell: str) -> str:
    try:
        template = _COMPLETIONS[shell]
    except KeyError as exc:
        raise ValidationError(f"Usage: {COMMAND_NAME} completion [bash|zsh]") from exc
    return template.format(command=COMMAND_NAME)
