from ._models import SchemaMigration, VersionRange
from .engine import SchemaMigrationEngine, default_migrations
from .v1 import RemoteConfigV1Migration
from .v2 import RemoteConfigV2Migration
from .v3 import RemoteConfigV3Migration

__all__ = [
    "RemoteConfigV1Migration",
    "RemoteConfigV2Migration",
    "RemoteConfigV3Migration",
    "SchemaMigration",
    "SchemaMigrationEngine",
    "VersionRange",
    "default_migrations",
]
