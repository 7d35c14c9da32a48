from typing import Any

from rconf.core import Response, operation
from rconf.storage._common import MatchCondition, StoreComponent

from ._models import ConfigItem, ConfigKey


class ConfigStore(StoreComponent):
    """Key/value object storage with compare-and-swap writes.

    Every write returns a fresh etag. A conditional write whose
    condition no longer holds raises ``ConflictError`` and stores nothing.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

    @operation()
    def get(
        self,
        key: str | dict | ConfigKey,
        **kwargs: Any,
    ) -> Response[ConfigItem]:
        """Get config value.

        Args:
            key: Config key.

        Returns:
            Config item with value and etag.

        Raises:
            NotFoundError: Key not found.
            UnavailableError: Store could not be reached.
        """
        ...

    @operation()
    def put(
        self,
        key: str | dict | ConfigKey,
        value: bytes | str,
        where: dict | MatchCondition | None = None,
        **kwargs: Any,
    ) -> Response[ConfigItem]:
        """Put config value.

        Args:
            key: Config key.
            value: Config value.
            where:
                Match condition. ``exists=False`` creates only,
                ``if_match`` compares the stored etag.

        Returns:
            Config item with the new etag.

        Raises:
            ConflictError: Condition failed.
            UnavailableError: Store could not be reached.
        """
        ...

    @operation()
    def delete(
        self,
        key: str | dict | ConfigKey,
        where: dict | MatchCondition | None = None,
        **kwargs: Any,
    ) -> Response[None]:
        """Delete config.

        Args:
            key: Config key.
            where: Match condition, only ``if_match`` is honored.

        Returns:
           None

        Raises:
            NotFoundError: Key not found.
            ConflictError: Condition failed.
        """
        ...

    @operation()
    def close(
        self,
        **kwargs: Any,
    ) -> Response[None]:
        """Close the client.

        Returns:
            None.
        """
        ...

    @operation()
    async def aget(
        self,
        key: str | dict | ConfigKey,
        **kwargs: Any,
    ) -> Response[ConfigItem]:
        """Get config value.

        Args:
            key: Config key.

        Returns:
            Config item with value and etag.

        Raises:
            NotFoundError: Key not found.
        """
        ...

    @operation()
    async def aput(
        self,
        key: str | dict | ConfigKey,
        value: bytes | str,
        where: dict | MatchCondition | None = None,
        **kwargs: Any,
    ) -> Response[ConfigItem]:
        """Put config value.

        Args:
            key: Config key.
            value: Config value.
            where: Match condition.

        Returns:
            Config item with the new etag.

        Raises:
            ConflictError: Condition failed.
        """
        ...

    @operation()
    async def adelete(
        self,
        key: str | dict | ConfigKey,
        where: dict | MatchCondition | None = None,
        **kwargs: Any,
    ) -> Response[None]:
        """Delete config.

        Args:
            key: Config key.
            where: Match condition.

        Returns:
           None

        Raises:
            NotFoundError: Key not found.
            ConflictError: Condition failed.
        """
        ...

    @operation()
    async def aclose(
        self,
        **kwargs: Any,
    ) -> Response[None]:
        """Close the async client.

        Returns:
            None.
        """
        ...
