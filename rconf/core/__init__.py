from ._component import Component
from ._context import Context
from ._decorators import operation
from ._loader import Loader
from ._log_helper import get_logger, warn
from ._ncall import NCall
from ._operation import Operation
from ._operation_parser import OperationParser
from ._provider import Provider
from ._response import Response
from ._type_converter import TypeConverter
from .data_model import DataModel
from .time import Clock, Time

__all__ = [
    "Clock",
    "Component",
    "Context",
    "DataModel",
    "Loader",
    "NCall",
    "Operation",
    "OperationParser",
    "Provider",
    "Response",
    "Time",
    "TypeConverter",
    "get_logger",
    "operation",
    "warn",
]
