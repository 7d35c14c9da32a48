from rconf.core.exceptions import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    UnavailableError,
)
from rconf.storage._common import MatchCondition, StoreFeature

from ._models import ConfigItem, ConfigKey, ConfigProperties
from .component import ConfigStore

__all__ = [
    "ConfigItem",
    "ConfigKey",
    "ConfigProperties",
    "ConfigStore",
    "MatchCondition",
    "StoreFeature",
    "BadRequestError",
    "ConflictError",
    "NotFoundError",
    "UnavailableError",
]
