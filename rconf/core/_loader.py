from __future__ import annotations

import importlib
import inspect
from typing import Any

from ._provider import Provider
from ._type_converter import TypeConverter
from .exceptions import LoadError


class Loader:
    @staticmethod
    def load_provider_instance(
        path: str | None = None,
        parameters: dict[str, Any] | None = None,
    ) -> Provider:
        parameters = parameters or dict()
        if path is None:
            return Provider(**parameters)
        provider = Loader.load_class(path, Provider)
        converted_parameters = TypeConverter.convert_args(
            provider.__init__, parameters
        )
        return provider(**converted_parameters)

    @staticmethod
    def load_class(path: str, type: Any) -> Any:
        class_name = None
        if ":" in path:
            module_name, class_name = path.split(":", 1)
        else:
            module_name = path
        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            raise LoadError(f"Module {module_name} not found") from e
        if class_name is not None:
            return getattr(module, class_name)
        for _, cls in inspect.getmembers(module, inspect.isclass):
            if issubclass(cls, type) and cls.__module__ == module_name:
                return cls
        raise LoadError(f"{type.__name__} not found at {module_name}")
