from pathlib import Path

from rconf.storage.config_store import ConfigStore
from rconf.storage.config_store.providers.memory import Memory


class ConfigStoreProvider:
    MEMORY = "memory"
    SQLITE = "sqlite"


def get_component(provider_type: str, path: Path) -> ConfigStore:
    parameters = dict()
    if provider_type == ConfigStoreProvider.SQLITE:
        parameters = {"database": str(path / "config.db")}
    return ConfigStore(
        __provider__=dict(
            type=provider_type,
            parameters=parameters,
        )
    )


def get_components(
    provider_type: str, path: Path, count: int = 2
) -> list[ConfigStore]:
    """Independent components over one backing store."""
    if provider_type == ConfigStoreProvider.MEMORY:
        provider = Memory()
        return [ConfigStore(__provider__=provider) for _ in range(count)]
    return [get_component(provider_type, path) for _ in range(count)]
