from .._phase import DeploymentPhase
from ._models import SchemaMigration, VersionRange

_CONSENSUS_NODE_PHASES = {
    "non-deployed": DeploymentPhase.REQUESTED,
    "requested": DeploymentPhase.REQUESTED,
    "initialized": DeploymentPhase.CONFIGURED,
    "setup": DeploymentPhase.CONFIGURED,
    "started": DeploymentPhase.STARTED,
    "frozen": DeploymentPhase.FROZEN,
    "stopped": DeploymentPhase.STOPPED,
}

_COMPONENT_PHASES = {
    "active": DeploymentPhase.STARTED,
    "deleted": DeploymentPhase.DELETED,
}


class RemoteConfigV3Migration(SchemaMigration):
    """Replaces component ``state`` with the lifecycle ``phase``.

    The consensus node state is kept as ``nodeState``.
    """

    @property
    def range(self) -> VersionRange:
        return VersionRange.from_integer_version(2)

    @property
    def version(self) -> int:
        return 3

    def migrate(self, source: dict) -> dict:
        for type, items in (source.get("components") or {}).items():
            for item in (items or {}).values():
                state = item.pop("state", None)
                if type == "consensusNodes":
                    phase = _CONSENSUS_NODE_PHASES.get(
                        state, DeploymentPhase.REQUESTED
                    )
                    if state is not None:
                        item["nodeState"] = state
                else:
                    phase = _COMPONENT_PHASES.get(
                        state, DeploymentPhase.REQUESTED
                    )
                item.setdefault("phase", phase.value)
        source["version"] = self.version
        return source
