from ._models import SchemaMigration, VersionRange

_LEGACY_VERSION_FIELDS = {
    "soloVersion": "cli",
    "soloChartVersion": "chart",
    "hederaPlatformVersion": "consensusNode",
    "hederaMirrorNodeChartVersion": "mirrorNodeChart",
    "hederaExplorerChartVersion": "explorerChart",
    "hederaJsonRpcRelayChartVersion": "jsonRpcRelayChart",
}

_LEGACY_METADATA_FIELDS = [
    "name",
    "namespace",
    "deploymentName",
    "lastUpdatedAt",
    "lastUpdateBy",
    "migration",
]

_LEGACY_COMPONENT_TYPES = {
    "relays": "relayNodes",
    "mirrorNodeExplorers": "explorers",
}


class RemoteConfigV1Migration(SchemaMigration):
    """Introduces the ``version`` field and the migration list.

    Chart and platform versions move from loose metadata fields into
    ``metadata.versions``. Component groups get their current names.
    """

    @property
    def range(self) -> VersionRange:
        return VersionRange.from_integer_version(0)

    @property
    def version(self) -> int:
        return 1

    def migrate(self, source: dict) -> dict:
        legacy = source.get("metadata") or {}
        migrations = []
        if legacy.get("migration"):
            migration = legacy["migration"]
            migrations.append(
                {
                    "version": 0,
                    "migratedAt": str(migration.get("migratedAt")),
                    "migratedBy": migration.get("migratedBy"),
                    "fromVersion": 0,
                }
            )
        metadata = {
            key: value
            for key, value in legacy.items()
            if key not in _LEGACY_VERSION_FIELDS
            and key not in _LEGACY_METADATA_FIELDS
        }
        metadata["migrations"] = migrations
        metadata["versions"] = {
            name: str(legacy.get(field) or "0.0.0")
            for field, name in _LEGACY_VERSION_FIELDS.items()
        }

        components = {}
        for type, items in (source.get("components") or {}).items():
            components[_LEGACY_COMPONENT_TYPES.get(type, type)] = items or {}

        source["metadata"] = metadata
        source["components"] = components
        source["version"] = self.version
        return source
