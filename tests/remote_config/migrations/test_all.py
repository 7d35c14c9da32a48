# type: ignore
import copy

import pytest

from rconf.remote_config import (
    CURRENT_SCHEMA_VERSION,
    ComponentType,
    DeploymentPhase,
    MigrationGapError,
    RemoteConfigCodec,
    SchemaMigration,
    SchemaMigrationEngine,
    UnsupportedSchemaVersionError,
    VersionRange,
)
from rconf.remote_config.migrations import (
    RemoteConfigV1Migration,
    RemoteConfigV2Migration,
    RemoteConfigV3Migration,
)

from .._data import NOW, document_v0, document_v1, document_v3


class SkipMigration(SchemaMigration):
    """Jumps from any version in [start, end) straight to target."""

    def __init__(self, start: int, end: int, target: int):
        self._range = VersionRange(start=start, end=end)
        self._version = target

    @property
    def range(self) -> VersionRange:
        return self._range

    @property
    def version(self) -> int:
        return self._version

    def migrate(self, source: dict) -> dict:
        source["skipped"] = True
        return source


def get_engine(migrations=None, current_version=CURRENT_SCHEMA_VERSION):
    return SchemaMigrationEngine(
        migrations=migrations,
        current_version=current_version,
        clock=lambda: NOW,
    )


def test_migrate_v1_to_current():
    engine = get_engine()
    source = copy.deepcopy(document_v1)

    result = engine.migrate(source)

    assert result == document_v3
    assert source == document_v1


def test_migrate_current_is_noop():
    engine = get_engine()
    source = copy.deepcopy(document_v3)

    result = engine.migrate(source)

    assert result == document_v3
    assert engine.migrate(result) == result
    assert not engine.needs_migration(result)


def test_migrated_document_decodes():
    engine = get_engine()
    migrated = RemoteConfigCodec.decode_document(engine.migrate(document_v1))
    authored = RemoteConfigCodec.decode_document(document_v3)

    assert RemoteConfigCodec.encode_document(migrated) == (
        RemoteConfigCodec.encode_document(authored)
    )
    assert RemoteConfigCodec.encode_document(authored) == document_v3
    relay = migrated.components[ComponentType.RELAY_NODE][0]
    assert relay.consensus_node_ids == [0, 1]
    node = migrated.components[ComponentType.CONSENSUS_NODE][1]
    assert node.phase == DeploymentPhase.CONFIGURED
    assert node.node_state == "initialized"


def test_migrate_legacy_document():
    engine = get_engine()

    result = engine.migrate(document_v0)

    assert result["version"] == CURRENT_SCHEMA_VERSION
    metadata = result["metadata"]
    assert metadata["versions"]["cli"] == "0.30.0"
    assert metadata["versions"]["chart"] == "0.42.0"
    assert metadata["versions"]["consensusNode"] == "v0.58.0"
    assert metadata["versions"]["explorerChart"] == "0.0.0"
    assert "namespace" not in metadata
    assert "migration" not in metadata
    assert [entry["version"] for entry in metadata["migrations"]] == [
        0,
        1,
        2,
        3,
    ]
    assert [entry["fromVersion"] for entry in metadata["migrations"]] == [
        0,
        0,
        1,
        2,
    ]
    assert metadata["migrations"][0]["migratedBy"] == "alice@example.com"

    components = result["components"]
    assert set(components) == {
        "consensusNodes",
        "relayNodes",
        "explorers",
    }
    assert components["consensusNodes"][0]["phase"] == "started"
    assert components["relayNodes"][0]["consensusNodeIds"] == [0]
    assert components["relayNodes"][0]["phase"] == "requested"

    document = RemoteConfigCodec.decode_document(result)
    assert len(document.metadata.migrations) == 4
    assert document.components[ComponentType.EXPLORER][0].name == "explorer"


@pytest.mark.parametrize(
    "state, phase",
    [
        ("non-deployed", "requested"),
        ("requested", "requested"),
        ("initialized", "configured"),
        ("setup", "configured"),
        ("started", "started"),
        ("frozen", "frozen"),
        ("stopped", "stopped"),
    ],
)
def test_consensus_node_state_to_phase(state: str, phase: str):
    source = {
        "version": 2,
        "components": {
            "consensusNodes": {
                0: {"id": 0, "name": "node1", "nodeId": 0, "state": state},
            },
        },
    }

    result = RemoteConfigV3Migration().migrate(source)

    node = result["components"]["consensusNodes"][0]
    assert node["phase"] == phase
    assert node["nodeState"] == state
    assert "state" not in node


def test_unsupported_version():
    engine = get_engine()
    with pytest.raises(UnsupportedSchemaVersionError):
        engine.migrate({"version": CURRENT_SCHEMA_VERSION + 1})


def test_migration_gap():
    engine = get_engine(
        migrations=[RemoteConfigV1Migration(), RemoteConfigV3Migration()]
    )
    with pytest.raises(MigrationGapError):
        engine.migrate(document_v1)
    with pytest.raises(MigrationGapError):
        engine.validate_migrations()

    # a document past the gap still migrates
    engine.migrate({"version": 2, "components": {}})


def test_validate_migrations():
    get_engine().validate_migrations()

    engine = get_engine(
        migrations=[
            RemoteConfigV1Migration(),
            RemoteConfigV2Migration(),
            RemoteConfigV3Migration(),
            SkipMigration(1, 2, 3),
        ]
    )
    with pytest.raises(MigrationGapError):
        engine.validate_migrations()


def test_highest_target_wins():
    engine = get_engine(
        migrations=[
            RemoteConfigV1Migration(),
            SkipMigration(0, 2, 2),
            RemoteConfigV3Migration(),
        ]
    )
    engine.validate_migrations()

    result = engine.migrate({"components": {}})

    assert result["skipped"] is True
    assert [
        (entry["fromVersion"], entry["version"])
        for entry in result["metadata"]["migrations"]
    ] == [(0, 2), (2, 3)]


def test_version_range():
    range = VersionRange.from_integer_version(1)
    assert not range.contains(0)
    assert range.contains(1)
    assert not range.contains(2)
    assert str(range) == "[1, 2)"
