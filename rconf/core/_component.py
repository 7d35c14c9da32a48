from __future__ import annotations

import uuid
from typing import Any

from ._context import Context
from ._operation import Operation
from ._provider import Provider
from .exceptions import NotSupportedError


class Component:
    __provider__: Provider
    __type__: str

    def __init__(
        self,
        **kwargs,
    ):
        self.__type__ = kwargs.pop("__type__", self.__class__.__module__)
        if "__provider__" in kwargs:
            self.__bind__(kwargs.pop("__provider__"))

    def __bind__(
        self,
        provider: Provider | dict | str | None,
    ) -> None:
        if provider is None:
            return
        if isinstance(provider, Provider):
            provider.__component__ = self
            self.__provider__ = provider
            return
        if isinstance(provider, dict):
            provider = dict(provider)
            type = provider.pop("type")
            parameters = provider.pop("parameters", dict())
        else:
            type = provider
            parameters = dict()
        from ._loader import Loader

        module_name = self.__class__.__module__.rsplit(".", 1)[0]
        provider_instance = Loader.load_provider_instance(
            path=f"{module_name}.providers.{type}",
            parameters=parameters,
        )
        self.__bind__(provider=provider_instance)

    def __setup__(self, context: Context | None = None) -> None:
        self.__provider__.__setup__(context=context)

    async def __asetup__(self, context: Context | None = None) -> None:
        await self.__provider__.__asetup__(context=context)

    def __run__(
        self,
        operation: dict | str | Operation | None = None,
        context: dict | Context | None = None,
        **kwargs,
    ) -> Any:
        if not hasattr(self, "__provider__"):
            raise NotSupportedError(f"{self.__type__} has no provider bound")
        return self.__provider__.__run__(
            operation=self._convert_operation(operation),
            context=self._init_context(context),
            **kwargs,
        )

    async def __arun__(
        self,
        operation: dict | str | Operation | None = None,
        context: dict | Context | None = None,
        **kwargs,
    ) -> Any:
        if not hasattr(self, "__provider__"):
            raise NotSupportedError(f"{self.__type__} has no provider bound")
        return await self.__provider__.__arun__(
            operation=self._convert_operation(operation),
            context=self._init_context(context),
            **kwargs,
        )

    def __supports__(self, feature: str) -> bool:
        if not hasattr(self, "__provider__"):
            return False
        return self.__provider__.__supports__(feature)

    def _convert_operation(
        self,
        operation: dict | str | Operation | None,
    ) -> Operation | None:
        if isinstance(operation, dict):
            return Operation.from_dict(operation)
        elif isinstance(operation, str):
            return Operation(name=operation)
        return operation

    def _init_context(
        self,
        context: dict | Context | None,
    ) -> Context:
        if isinstance(context, dict):
            context = Context.from_dict(context)
        return Context(
            id=context.id if context and context.id else str(uuid.uuid4()),
            data=context.data if context else None,
        )
