from rconf.core.exceptions import (
    ConflictError,
    DanglingClusterReferenceError,
    DocumentValidationError,
    DuplicateComponentError,
    DuplicateComponentIdError,
    IllegalPhaseTransitionError,
    MigrationGapError,
    NotFoundError,
    UnsupportedSchemaVersionError,
    ValidationError,
)

from ._codec import RemoteConfigCodec
from ._constants import COMMON_FLAGS, CURRENT_SCHEMA_VERSION
from ._flags import merge_common_flags
from ._models import (
    BaseComponent,
    BlockNodeComponent,
    Cluster,
    ComponentType,
    ConsensusNodeComponent,
    EnvoyProxyComponent,
    ExplorerComponent,
    HaProxyComponent,
    MigrationEntry,
    MirrorNodeComponent,
    RelayNodeComponent,
    RemoteConfigDocument,
    RemoteConfigMetadata,
    RemoteConfigSnapshot,
)
from ._phase import PHASE_TRANSITIONS, DeploymentPhase, can_transition
from .manager import RemoteConfigManager
from .migrations import SchemaMigration, SchemaMigrationEngine, VersionRange
from .registry import (
    ComponentsRegistry,
    node_id_from_alias,
    parse_component_name,
    render_component_name,
)
from .settings import RemoteConfigSettings

__all__ = [
    "BaseComponent",
    "BlockNodeComponent",
    "COMMON_FLAGS",
    "CURRENT_SCHEMA_VERSION",
    "Cluster",
    "ComponentType",
    "ComponentsRegistry",
    "ConsensusNodeComponent",
    "DeploymentPhase",
    "EnvoyProxyComponent",
    "ExplorerComponent",
    "HaProxyComponent",
    "MigrationEntry",
    "MirrorNodeComponent",
    "PHASE_TRANSITIONS",
    "RelayNodeComponent",
    "RemoteConfigCodec",
    "RemoteConfigDocument",
    "RemoteConfigManager",
    "RemoteConfigMetadata",
    "RemoteConfigSettings",
    "RemoteConfigSnapshot",
    "SchemaMigration",
    "SchemaMigrationEngine",
    "VersionRange",
    "can_transition",
    "merge_common_flags",
    "node_id_from_alias",
    "parse_component_name",
    "render_component_name",
    "ConflictError",
    "DanglingClusterReferenceError",
    "DocumentValidationError",
    "DuplicateComponentError",
    "DuplicateComponentIdError",
    "IllegalPhaseTransitionError",
    "MigrationGapError",
    "NotFoundError",
    "UnsupportedSchemaVersionError",
    "ValidationError",
]
