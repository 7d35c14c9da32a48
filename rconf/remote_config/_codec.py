from __future__ import annotations

from typing import Any

import yaml

from rconf.core.exceptions import BadRequestError

from ._constants import CURRENT_SCHEMA_VERSION
from ._models import (
    COMPONENT_CLASSES,
    BaseComponent,
    Cluster,
    ComponentType,
    ConsensusNodeComponent,
    MigrationEntry,
    RelayNodeComponent,
    RemoteConfigDocument,
    RemoteConfigMetadata,
)


class RemoteConfigCodec:
    """Encode and decode the stored document shape.

    Works on schema ``version`` only. Older documents go through the
    migration engine before they reach ``decode_document``.
    """

    version: int = CURRENT_SCHEMA_VERSION

    @staticmethod
    def dumps(obj: dict) -> bytes:
        return yaml.safe_dump(
            obj, sort_keys=False, default_flow_style=False
        ).encode()

    @staticmethod
    def loads(value: bytes | str) -> dict:
        try:
            obj = yaml.safe_load(value)
        except yaml.YAMLError as e:
            raise BadRequestError(f"Malformed remote config: {e}") from e
        if obj is None:
            return dict()
        if not isinstance(obj, dict):
            raise BadRequestError("Remote config must be a mapping")
        return obj

    @staticmethod
    def encode_cluster(cluster: Cluster) -> dict:
        return {
            "name": cluster.name,
            "namespace": cluster.namespace,
            "deployment": cluster.deployment,
            "dnsBaseDomain": cluster.dns_base_domain,
            "dnsConsensusNodePattern": cluster.dns_consensus_node_pattern,
        }

    @staticmethod
    def decode_cluster(obj: dict) -> Cluster:
        args = dict(
            name=obj["name"],
            namespace=obj["namespace"],
            deployment=obj["deployment"],
        )
        if obj.get("dnsBaseDomain") is not None:
            args["dns_base_domain"] = obj["dnsBaseDomain"]
        if obj.get("dnsConsensusNodePattern") is not None:
            args["dns_consensus_node_pattern"] = obj[
                "dnsConsensusNodePattern"
            ]
        return Cluster(**args)

    @staticmethod
    def encode_component(component: BaseComponent) -> dict:
        obj: dict[str, Any] = {
            "id": component.id,
            "name": component.name,
            "cluster": component.cluster,
            "namespace": component.namespace,
            "phase": component.phase.value,
        }
        if isinstance(component, ConsensusNodeComponent):
            obj["nodeId"] = component.node_id
            if component.node_state is not None:
                obj["nodeState"] = component.node_state
        elif isinstance(component, RelayNodeComponent):
            obj["consensusNodeIds"] = list(component.consensus_node_ids)
        return obj

    @staticmethod
    def decode_component(type: ComponentType, obj: dict) -> BaseComponent:
        args: dict[str, Any] = dict(
            id=obj.get("id"),
            name=obj["name"],
            cluster=obj["cluster"],
            namespace=obj["namespace"],
            phase=obj["phase"],
        )
        if type == ComponentType.CONSENSUS_NODE:
            args["node_id"] = obj["nodeId"]
            args["node_state"] = obj.get("nodeState")
        elif type == ComponentType.RELAY_NODE:
            args["consensus_node_ids"] = obj.get("consensusNodeIds") or []
        return COMPONENT_CLASSES[type](**args)

    @staticmethod
    def encode_migration_entry(entry: MigrationEntry) -> dict:
        return {
            "version": entry.version,
            "migratedAt": entry.migrated_at,
            "migratedBy": entry.migrated_by,
            "fromVersion": entry.from_version,
        }

    @staticmethod
    def decode_migration_entry(obj: dict) -> MigrationEntry:
        return MigrationEntry(
            version=obj["version"],
            migrated_at=str(obj["migratedAt"]),
            migrated_by=obj["migratedBy"],
            from_version=obj["fromVersion"],
        )

    @staticmethod
    def encode_document(document: RemoteConfigDocument) -> dict:
        codec = RemoteConfigCodec
        return {
            "version": document.version,
            "metadata": {
                "migrations": [
                    codec.encode_migration_entry(entry)
                    for entry in document.metadata.migrations
                ],
                "versions": dict(document.metadata.versions),
            },
            "clusters": {
                ref: codec.encode_cluster(cluster)
                for ref, cluster in document.clusters.items()
            },
            "components": {
                type.value: {
                    id: codec.encode_component(component)
                    for id, component in sorted(components.items())
                }
                for type, components in document.components.items()
            },
            "commandHistory": list(document.command_history),
            "lastExecutedCommand": document.last_executed_command,
            "flags": dict(document.flags),
        }

    @staticmethod
    def decode_document(obj: dict) -> RemoteConfigDocument:
        codec = RemoteConfigCodec
        version = obj.get("version", 0)
        if version != codec.version:
            raise BadRequestError(
                f"Cannot decode schema version {version}, "
                f"expected {codec.version}"
            )
        try:
            return codec._decode_document(obj)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise BadRequestError(f"Malformed remote config: {e!r}") from e

    @staticmethod
    def _decode_document(obj: dict) -> RemoteConfigDocument:
        codec = RemoteConfigCodec
        metadata = obj.get("metadata") or {}
        components: dict[ComponentType, dict[int, BaseComponent]] = {}
        for type_name, items in (obj.get("components") or {}).items():
            type = ComponentType(type_name)
            components[type] = {
                int(id): codec.decode_component(type, item)
                for id, item in (items or {}).items()
            }
        return RemoteConfigDocument(
            version=obj["version"],
            metadata=RemoteConfigMetadata(
                migrations=[
                    codec.decode_migration_entry(entry)
                    for entry in metadata.get("migrations") or []
                ],
                versions=metadata.get("versions") or {},
            ),
            clusters={
                ref: codec.decode_cluster(cluster)
                for ref, cluster in (obj.get("clusters") or {}).items()
            },
            components=components,
            command_history=list(obj.get("commandHistory") or []),
            last_executed_command=obj.get("lastExecutedCommand"),
            flags=dict(obj.get("flags") or {}),
        )
