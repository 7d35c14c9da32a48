from __future__ import annotations

from typing import Any, Callable


class NCall:
    """Native client call with an error translation map.

    ``error_map`` maps native exception types to the exception raised in
    their place. The first matching entry wins.
    """

    function: Callable
    args: dict[str, Any] | list[Any] | None
    error_map: dict[Any, Any] | None

    def __init__(
        self,
        function: Callable,
        args: dict[str, Any] | list | None = None,
        error_map: dict[Any, Any] | None = None,
    ):
        self.function = function
        self.args = args
        self.error_map = error_map

    def __repr__(self) -> str:
        return str(self.function)

    def invoke(self) -> Any:
        try:
            if isinstance(self.args, dict):
                return self.function(**self.args)
            elif isinstance(self.args, list):
                return self.function(*self.args)
            return self.function()
        except Exception as e:
            error = self._map_error(e)
            if error is None:
                raise
            raise error from e

    def _map_error(self, e: Exception) -> Exception | None:
        if self.error_map is None:
            return None
        for native_type, error in self.error_map.items():
            if isinstance(e, native_type):
                if isinstance(error, type):
                    return error(str(e))
                return error
        return None
