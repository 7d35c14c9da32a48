import inspect
import json
from typing import get_args, get_origin, get_type_hints


class TypeConverter:
    @staticmethod
    def convert_value(value, expected_type):
        origin = get_origin(expected_type)

        # Optional[T]
        if origin is not None and type(None) in get_args(expected_type):
            candidates = [
                t for t in get_args(expected_type) if t is not type(None)
            ]
            if len(candidates) != 1:
                return value
            expected_type = candidates[0]

        if isinstance(value, dict) and callable(
            getattr(expected_type, "from_dict", None)
        ):
            return expected_type.from_dict(value)

        try:
            if expected_type is int and isinstance(value, (str, float)):
                return int(value)
            if expected_type is float and isinstance(value, (str, int)):
                return float(value)
            if expected_type is str and isinstance(value, (int, float)):
                return str(value)
            if expected_type is bytes and isinstance(value, str):
                return value.encode()
            if expected_type is dict and isinstance(value, (str, bytes)):
                return json.loads(value)
        except (ValueError, TypeError):
            pass

        return value

    @staticmethod
    def convert_args(method, args: dict) -> dict:
        sig = inspect.signature(method)
        hints = get_type_hints(method)
        converted_args: dict = {}
        for param_name in sig.parameters:
            if param_name in args:
                converted_args[param_name] = TypeConverter.convert_value(
                    args[param_name], hints.get(param_name, None)
                )
        return args | converted_args
