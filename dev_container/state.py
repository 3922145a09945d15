"""Container state classification.

The runtime owns container state. Every decision re-queries it and runs the
observation through these pure functions; nothing is cached between calls.
"""

from __future__ import annotations

import enum

from .models import ContainerState


class ContainerAction(str, enum.Enum):
    """What the orchestrator must do before attaching."""

    PROVISION = "provision"  # build image, create and start
    START = "start"
    NONE = "none"


class TeardownAction(str, enum.Enum):
    STOP_AND_REMOVE = "stop-and-remove"
    REMOVE = "remove"
    SKIP = "skip"


def classify(running_flag: str | None) -> ContainerState:
    """Map `inspect -f {{.State.Running}}` output to a state.

    ``None`` means the inspect query failed, i.e. no such container.
    """

    if running_flag is None:
        return ContainerState.ABSENT
    if running_flag.strip().lower() == "true":
        return ContainerState.RUNNING
    return ContainerState.STOPPED


def attach_action(state: ContainerState) -> ContainerAction:
    return {
        ContainerState.ABSENT: ContainerAction.PROVISION,
        ContainerState.STOPPED: ContainerAction.START,
        ContainerState.RUNNING: ContainerAction.NONE,
    }[state]


def teardown_action(state: ContainerState) -> TeardownAction:
    return {
        ContainerState.RUNNING: TeardownAction.STOP_AND_REMOVE,
        ContainerState.STOPPED: TeardownAction.REMOVE,
        ContainerState.ABSENT: TeardownAction.SKIP,
    }[state]
