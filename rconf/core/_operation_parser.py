from __future__ import annotations

from typing import Any

from ._operation import Operation


class OperationParser:
    operation: Operation | None

    def __init__(self, operation: Operation | None):
        self.operation = operation

    def op_equals(self, name: str | None) -> bool:
        operation_name = self.get_op_name()
        if operation_name is not None:
            operation_name = operation_name.lower()
        arg_name = name
        if arg_name is not None:
            arg_name = arg_name.lower()
        return operation_name == arg_name

    def get_args(self) -> dict:
        if self.operation is not None and self.operation.args is not None:
            return self.operation.args
        return {}

    def get_arg(self, arg: str) -> Any:
        return self.get_args().get(arg)

    def get_op_name(self) -> str | None:
        if self.operation is not None:
            return self.operation.name
        return None
