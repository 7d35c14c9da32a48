from ._component import StoreComponent
from ._models import MatchCondition, StoreFeature
from ._operation import StoreOperation
from ._operation_parser import StoreOperationParser
from ._provider import StoreProvider

__all__ = [
    "MatchCondition",
    "StoreComponent",
    "StoreFeature",
    "StoreOperation",
    "StoreOperationParser",
    "StoreProvider",
]
