from typing import Any

from ._async_helper import run_async
from ._context import Context
from ._operation import Operation
from ._type_converter import TypeConverter
from .exceptions import NotSupportedError


class Provider:
    __component__: Any
    __type__: str

    def __init__(self, **kwargs):
        self.__type__ = kwargs.pop("__type__", self.__class__.__module__)
        for key, value in kwargs.items():
            setattr(self, key, value)

    def __setup__(self, context: Context | None = None) -> None:
        pass

    async def __asetup__(self, context: Context | None = None) -> None:
        await run_async(self.__setup__, context=context)

    def __run__(
        self,
        operation: Operation | None = None,
        context: Context | None = None,
        **kwargs,
    ) -> Any:
        if operation and operation.name:
            func = getattr(self, operation.name, None)
            if func and callable(func):
                self.__setup__(context=context)
                args = TypeConverter.convert_args(func, operation.args or {})
                return func(**args)
        raise NotSupportedError(f"Operation {operation} is not supported")

    async def __arun__(
        self,
        operation: Operation | None = None,
        context: Context | None = None,
        **kwargs,
    ) -> Any:
        if operation and operation.name:
            afunc = getattr(self, f"a{operation.name}", None)
            if afunc and callable(afunc):
                await self.__asetup__(context=context)
                args = TypeConverter.convert_args(afunc, operation.args or {})
                return await afunc(**args)

        return await run_async(
            self.__run__,
            operation=operation,
            context=context,
            **kwargs,
        )

    def __supports__(self, feature: str) -> bool:
        return True
