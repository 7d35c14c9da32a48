import inspect
from functools import wraps
from typing import Any, Callable, TypeVar, cast

from ._operation import Operation

T = TypeVar("T", bound=Callable[..., Any])


def _bind_operation(func: Callable, name: str, args, kwargs) -> Operation:
    sig = inspect.signature(func)
    bound_args = sig.bind(*args, **kwargs)
    bound_args.apply_defaults()
    locals = dict(bound_args.arguments)
    locals.pop("self", None)
    return Operation.normalize(name=name, args=locals)


def operation() -> Callable[[T], T]:
    """Route a component method to its bound provider.

    The decorated body is a stub; the operation name is the method name
    (the leading ``a`` of async twins is dropped).
    """

    def decorator(func: T) -> T:
        if not inspect.iscoroutinefunction(func):

            @wraps(func)
            def wrapper(*args, **kwargs) -> Any:
                self = args[0]
                context = kwargs.pop("__context__", None)
                operation = _bind_operation(func, func.__name__, args, kwargs)
                return self.__run__(operation, context)

            return cast(T, wrapper)

        @wraps(func)
        async def awrapper(*args, **kwargs) -> Any:
            self = args[0]
            context = kwargs.pop("__context__", None)
            operation = _bind_operation(func, func.__name__[1:], args, kwargs)
            return await self.__arun__(operation, context)

        return cast(T, awrapper)

    return decorator
