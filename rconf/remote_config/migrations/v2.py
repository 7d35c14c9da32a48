from ..registry import node_id_from_alias
from ._models import SchemaMigration, VersionRange


class RemoteConfigV2Migration(SchemaMigration):
    """Re-keys components from their name to a numeric id.

    Consensus nodes take their node id. Other components are numbered
    in stored order. Relays list consensus node ids instead of aliases.
    """

    @property
    def range(self) -> VersionRange:
        return VersionRange.from_integer_version(1)

    @property
    def version(self) -> int:
        return 2

    def migrate(self, source: dict) -> dict:
        components = {}
        for type, items in (source.get("components") or {}).items():
            rekeyed = {}
            for index, (name, item) in enumerate((items or {}).items()):
                item = dict(item)
                item.setdefault("name", name)
                if type == "consensusNodes":
                    id = item["nodeId"]
                else:
                    id = index
                if "consensusNodeAliases" in item:
                    item["consensusNodeIds"] = [
                        node_id_from_alias(alias)
                        for alias in item.pop("consensusNodeAliases") or []
                    ]
                item["id"] = id
                rekeyed[id] = item
            components[type] = rekeyed
        source["components"] = components
        source["version"] = self.version
        return source
