from rconf.core.exceptions import (
    LeaseError,
    LeaseHeldByOtherError,
    LeaseLostError,
)

from ._constants import DEFAULT_LEASE_DURATION
from ._models import LeaseHolder, LeaseKey, LeaseRecord
from .component import Lease

__all__ = [
    "DEFAULT_LEASE_DURATION",
    "Lease",
    "LeaseHolder",
    "LeaseKey",
    "LeaseRecord",
    "LeaseError",
    "LeaseHeldByOtherError",
    "LeaseLostError",
]
