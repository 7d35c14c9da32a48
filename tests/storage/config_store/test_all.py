# type: ignore
import asyncio
import os

import pytest

from rconf.core import Operation
from rconf.core.exceptions import NotSupportedError
from rconf.storage.config_store import (
    ConfigStore,
    ConflictError,
    MatchCondition,
    NotFoundError,
    StoreFeature,
    UnavailableError,
)
from rconf.storage.config_store.providers.memory import Memory

from ._data import configs
from ._providers import ConfigStoreProvider, get_components
from ._sync_and_async_client import ConfigStoreSyncAndAsyncClient

if os.name == "nt":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

providers = [
    ConfigStoreProvider.MEMORY,
    ConfigStoreProvider.SQLITE,
]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "provider_type",
    providers,
)
@pytest.mark.parametrize(
    "async_call",
    [False, True],
)
async def test_put_get_delete(provider_type: str, async_call: bool, tmp_path):
    client = ConfigStoreSyncAndAsyncClient(
        provider_type=provider_type, async_call=async_call, path=tmp_path
    )
    config = configs[0]
    key = config["id"]
    value = config["value"]

    # get when item doesn't exist
    with pytest.raises(NotFoundError):
        await client.get(key=key)

    # delete when item doesn't exist
    with pytest.raises(NotFoundError):
        await client.delete(key=key)

    # unconditional put when item doesn't exist
    response = await client.put(key=key, value=value)
    result = response.result
    assert result.key.id == key
    assert result.properties.etag is not None
    etag = result.properties.etag

    # get when item exists
    response = await client.get(key=key)
    result = response.result
    assert result.value == value
    assert result.properties.etag == etag
    assert result.properties.updated_time is not None

    # get with dict key
    response = await client.get(key={"id": key})
    assert response.result.value == value

    # unconditional put when item exists
    response = await client.put(key=key, value=b"version: 2\n")
    new_etag = response.result.properties.etag
    assert new_etag != etag
    response = await client.get(key=key)
    assert response.result.value == b"version: 2\n"

    # unconditional delete when item exists
    await client.delete(key=key)
    with pytest.raises(NotFoundError):
        await client.get(key=key)
    await client.close()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "provider_type",
    providers,
)
@pytest.mark.parametrize(
    "async_call",
    [False, True],
)
async def test_conditional_put(provider_type: str, async_call: bool, tmp_path):
    client = ConfigStoreSyncAndAsyncClient(
        provider_type=provider_type, async_call=async_call, path=tmp_path
    )
    config = configs[1]
    key = config["id"]

    # update when item doesn't exist
    with pytest.raises(ConflictError):
        await client.put(key=key, value=b"v0", where={"exists": True})
    with pytest.raises(ConflictError):
        await client.put(key=key, value=b"v0", where={"if_match": "stale"})

    # create only when item doesn't exist
    response = await client.put(
        key=key, value=config["value"], where=MatchCondition(exists=False)
    )
    etag = response.result.properties.etag

    # create only when item exists
    with pytest.raises(ConflictError):
        await client.put(key=key, value=b"v1", where={"exists": False})

    # compare and swap with a stale etag
    with pytest.raises(ConflictError):
        await client.put(key=key, value=b"v1", where={"if_match": "stale"})
    response = await client.get(key=key)
    assert response.result.value == config["value"].encode()
    assert response.result.properties.etag == etag

    # compare and swap with the current etag
    response = await client.put(key=key, value=b"v1", where={"if_match": etag})
    new_etag = response.result.properties.etag
    assert new_etag != etag

    # the old etag is no longer accepted
    with pytest.raises(ConflictError):
        await client.put(key=key, value=b"v2", where={"if_match": etag})

    # update when item exists
    response = await client.put(key=key, value=b"v2", where={"exists": True})
    response = await client.get(key=key)
    assert response.result.value == b"v2"
    etag = response.result.properties.etag

    # conditional delete
    with pytest.raises(ConflictError):
        await client.delete(key=key, where={"if_match": "stale"})
    await client.delete(key=key, where={"if_match": etag})
    with pytest.raises(NotFoundError):
        await client.delete(key=key, where={"if_match": etag})
    await client.close()


@pytest.mark.parametrize(
    "provider_type",
    providers,
)
def test_concurrent_writers(provider_type: str, tmp_path):
    store1, store2 = get_components(provider_type, tmp_path)
    config = configs[2]
    key = config["id"]

    store1.put(key, config["value"])
    etag1 = store1.get(key).result.properties.etag
    etag2 = store2.get(key).result.properties.etag
    assert etag1 == etag2

    store1.put(key, b"version: 3\n", where={"if_match": etag1})
    with pytest.raises(ConflictError):
        store2.put(key, b"version: 4\n", where={"if_match": etag2})

    assert store2.get(key).result.value == b"version: 3\n"
    store1.close()
    store2.close()


def test_supports():
    (memory,) = get_components(ConfigStoreProvider.MEMORY, None, count=1)
    assert memory.__supports__(StoreFeature.CONDITIONAL_WRITE)
    assert memory.__supports__(StoreFeature.CONDITIONAL_DELETE)

    sqlite = ConfigStore(__provider__="sqlite")
    assert sqlite.__supports__(StoreFeature.CONDITIONAL_WRITE)
    assert sqlite.__supports__(StoreFeature.CONDITIONAL_DELETE)

    unbound = ConfigStore()
    assert not unbound.__supports__(StoreFeature.CONDITIONAL_WRITE)


def test_provider_instance_binding():
    provider = Memory()
    store = ConfigStore(__provider__=provider)
    store.put("key", b"value")
    assert provider.__component__ is store
    assert ConfigStore(__provider__=provider).get("key").result.value == (
        b"value"
    )


def test_sqlite_unavailable(tmp_path):
    store = ConfigStore(
        __provider__=dict(
            type="sqlite",
            parameters={"database": str(tmp_path / "missing" / "config.db")},
        )
    )
    with pytest.raises(UnavailableError):
        store.get("key")


def test_unknown_operation():
    provider = Memory()
    with pytest.raises(NotSupportedError, match="query"):
        provider.__run__(Operation.normalize("query", {"key": "solo"}))
