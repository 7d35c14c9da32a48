from __future__ import annotations

import copy

from rconf.core import Clock, Time, get_logger
from rconf.core.exceptions import (
    MigrationGapError,
    UnsupportedSchemaVersionError,
)

from .._constants import CURRENT_SCHEMA_VERSION, MIGRATION_USER
from ._models import SchemaMigration
from .v1 import RemoteConfigV1Migration
from .v2 import RemoteConfigV2Migration
from .v3 import RemoteConfigV3Migration

logger = get_logger(__name__)


def default_migrations() -> list[SchemaMigration]:
    return [
        RemoteConfigV1Migration(),
        RemoteConfigV2Migration(),
        RemoteConfigV3Migration(),
    ]


class SchemaMigrationEngine:
    """Upgrades serialized documents to the current schema version.

    Documents without a ``version`` field are version 0. The input
    document is never modified.
    """

    migrations: list[SchemaMigration]
    current_version: int
    migrated_by: str
    clock: Clock

    def __init__(
        self,
        migrations: list[SchemaMigration] | None = None,
        current_version: int = CURRENT_SCHEMA_VERSION,
        migrated_by: str = MIGRATION_USER,
        clock: Clock | None = None,
    ):
        self.migrations = (
            migrations if migrations is not None else default_migrations()
        )
        self.current_version = current_version
        self.migrated_by = migrated_by
        self.clock = clock or Time.now

    @staticmethod
    def get_version(document: dict) -> int:
        return int(document.get("version") or 0)

    def needs_migration(self, document: dict) -> bool:
        return self.get_version(document) < self.current_version

    def migrate(self, document: dict) -> dict:
        """Migrate a document to the current version.

        Args:
            document: Serialized document.

        Returns:
            Migrated copy, or the input itself when already current.

        Raises:
            MigrationGapError:
                No migration accepts an intermediate version.
            UnsupportedSchemaVersionError:
                The document is newer than the current version.
        """
        version = self.get_version(document)
        if version > self.current_version:
            raise UnsupportedSchemaVersionError(
                f"Schema version {version} is newer than supported "
                f"version {self.current_version}"
            )
        if version == self.current_version:
            return document

        result = copy.deepcopy(document)
        while version < self.current_version:
            migration = self._select(version)
            result = migration.migrate(copy.deepcopy(result))
            result["version"] = migration.version
            metadata = result.setdefault("metadata", {})
            metadata.setdefault("migrations", []).append(
                {
                    "version": migration.version,
                    "migratedAt": Time.to_datetime(
                        self.clock()
                    ).isoformat(),
                    "migratedBy": self.migrated_by,
                    "fromVersion": version,
                }
            )
            logger.info(
                "Migrated remote config from version %s to %s",
                version,
                migration.version,
            )
            version = migration.version
        return result

    def validate_migrations(self) -> None:
        """Check every version below current has exactly one path up.

        Raises:
            MigrationGapError: A version is not covered, or two
                migrations produce the same version.
        """
        targets: set[int] = set()
        for migration in self.migrations:
            if migration.version in targets:
                raise MigrationGapError(
                    f"More than one migration targets version "
                    f"{migration.version}"
                )
            targets.add(migration.version)
        version = 0
        while version < self.current_version:
            version = self._select(version).version

    def _select(self, version: int) -> SchemaMigration:
        candidates = [
            migration
            for migration in self.migrations
            if migration.range.contains(version)
            and migration.version > version
        ]
        if not candidates:
            raise MigrationGapError(
                f"No migration accepts schema version {version}"
            )
        return max(candidates, key=lambda migration: migration.version)
