from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar

from pydantic import Field

from rconf.core import DataModel

from ._constants import CURRENT_SCHEMA_VERSION
from ._phase import DeploymentPhase


class ComponentType(str, Enum):
    CONSENSUS_NODE = "consensusNodes"
    BLOCK_NODE = "blockNodes"
    RELAY_NODE = "relayNodes"
    MIRROR_NODE = "mirrorNodes"
    HA_PROXY = "haProxies"
    ENVOY_PROXY = "envoyProxies"
    EXPLORER = "explorers"


class Cluster(DataModel):
    """Cluster a deployment spans."""

    name: str
    namespace: str
    deployment: str
    dns_base_domain: str = "cluster.local"
    dns_consensus_node_pattern: str = "network-{nodeAlias}-svc.{namespace}.svc"


class BaseComponent(DataModel):
    """Deployed component.

    ``cluster`` is the key of a cluster in the document cluster map.
    ``id`` is assigned by the registry when the component is added.
    """

    type: ClassVar[ComponentType]

    name: str
    cluster: str
    namespace: str
    phase: DeploymentPhase = DeploymentPhase.REQUESTED
    id: int | None = None


class ConsensusNodeComponent(BaseComponent):
    type: ClassVar[ComponentType] = ComponentType.CONSENSUS_NODE

    node_id: int
    node_state: str | None = None


class BlockNodeComponent(BaseComponent):
    type: ClassVar[ComponentType] = ComponentType.BLOCK_NODE


class RelayNodeComponent(BaseComponent):
    type: ClassVar[ComponentType] = ComponentType.RELAY_NODE

    consensus_node_ids: list[int] = []


class MirrorNodeComponent(BaseComponent):
    type: ClassVar[ComponentType] = ComponentType.MIRROR_NODE


class HaProxyComponent(BaseComponent):
    type: ClassVar[ComponentType] = ComponentType.HA_PROXY


class EnvoyProxyComponent(BaseComponent):
    type: ClassVar[ComponentType] = ComponentType.ENVOY_PROXY


class ExplorerComponent(BaseComponent):
    type: ClassVar[ComponentType] = ComponentType.EXPLORER


COMPONENT_CLASSES: dict[ComponentType, type[BaseComponent]] = {
    ComponentType.CONSENSUS_NODE: ConsensusNodeComponent,
    ComponentType.BLOCK_NODE: BlockNodeComponent,
    ComponentType.RELAY_NODE: RelayNodeComponent,
    ComponentType.MIRROR_NODE: MirrorNodeComponent,
    ComponentType.HA_PROXY: HaProxyComponent,
    ComponentType.ENVOY_PROXY: EnvoyProxyComponent,
    ComponentType.EXPLORER: ExplorerComponent,
}


class MigrationEntry(DataModel):
    """Schema migration applied to a document."""

    version: int
    migrated_at: str
    migrated_by: str
    from_version: int


class RemoteConfigMetadata(DataModel):
    migrations: list[MigrationEntry] = []
    versions: dict[str, str] = {}


class RemoteConfigDocument(DataModel):
    """Persisted description of a deployment's topology."""

    version: int = CURRENT_SCHEMA_VERSION
    metadata: RemoteConfigMetadata = Field(
        default_factory=RemoteConfigMetadata
    )
    clusters: dict[str, Cluster] = {}
    components: dict[ComponentType, dict[int, BaseComponent]] = {}
    command_history: list[str] = []
    last_executed_command: str | None = None
    flags: dict[str, Any] = {}


class RemoteConfigSnapshot(DataModel):
    """Document together with the etag it was read at.

    ``etag`` is None when no document is stored yet.
    """

    document: RemoteConfigDocument
    etag: str | None = None
