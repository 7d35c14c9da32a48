from pathlib import Path

from rconf.coordination.lease import Lease
from rconf.storage.config_store import ConfigStore


class LeaseStoreProvider:
    MEMORY = "memory"
    SQLITE = "sqlite"


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def get_store(provider_type: str, path: Path) -> ConfigStore:
    parameters = dict()
    if provider_type == LeaseStoreProvider.SQLITE:
        parameters = {"database": str(path / "lease.db")}
    return ConfigStore(
        __provider__=dict(
            type=provider_type,
            parameters=parameters,
        )
    )


def get_component(
    provider_type: str,
    path: Path,
    clock: FakeClock,
    duration: float = 30,
) -> Lease:
    return Lease(
        store=get_store(provider_type, path),
        duration=duration,
        clock=clock,
    )
