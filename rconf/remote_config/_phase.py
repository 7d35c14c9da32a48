from enum import Enum

from rconf.core.exceptions import (
    BadRequestError,
    IllegalPhaseTransitionError,
)


class DeploymentPhase(str, Enum):
    REQUESTED = "requested"
    DEPLOYING = "deploying"
    DEPLOYED = "deployed"
    CONFIGURED = "configured"
    STARTING = "starting"
    STARTED = "started"
    STOPPING = "stopping"
    STOPPED = "stopped"
    FREEZING = "freezing"
    FROZEN = "frozen"
    DELETING = "deleting"
    DELETED = "deleted"


_FORWARD: dict[DeploymentPhase, set[DeploymentPhase]] = {
    DeploymentPhase.REQUESTED: {DeploymentPhase.DEPLOYING},
    DeploymentPhase.DEPLOYING: {DeploymentPhase.DEPLOYED},
    DeploymentPhase.DEPLOYED: {DeploymentPhase.CONFIGURED},
    DeploymentPhase.CONFIGURED: {DeploymentPhase.STARTING},
    DeploymentPhase.STARTING: {DeploymentPhase.STARTED},
    DeploymentPhase.STARTED: {
        DeploymentPhase.STOPPING,
        DeploymentPhase.FREEZING,
    },
    DeploymentPhase.STOPPING: {DeploymentPhase.STOPPED},
    DeploymentPhase.STOPPED: {DeploymentPhase.STARTING},
    DeploymentPhase.FREEZING: {DeploymentPhase.FROZEN},
    DeploymentPhase.FROZEN: {DeploymentPhase.STARTING},
    DeploymentPhase.DELETING: {DeploymentPhase.DELETED},
    DeploymentPhase.DELETED: set(),
}

PHASE_TRANSITIONS: dict[DeploymentPhase, frozenset[DeploymentPhase]] = {
    phase: frozenset(
        targets
        if phase in (DeploymentPhase.DELETING, DeploymentPhase.DELETED)
        else targets | {DeploymentPhase.DELETING}
    )
    for phase, targets in _FORWARD.items()
}
"""Legal targets per phase. Every phase short of deletion may
move to DELETING."""


def can_transition(
    current: DeploymentPhase | str, target: DeploymentPhase | str
) -> bool:
    return DeploymentPhase(target) in PHASE_TRANSITIONS[
        DeploymentPhase(current)
    ]


def check_transition(
    name: str,
    current: DeploymentPhase | str,
    target: DeploymentPhase | str,
) -> None:
    try:
        target = DeploymentPhase(target)
    except ValueError:
        raise BadRequestError(f"Unknown deployment phase {target}") from None
    if not can_transition(current, target):
        raise IllegalPhaseTransitionError(
            f"Component {name} cannot move from "
            f"{DeploymentPhase(current).value} to {target.value}"
        )
