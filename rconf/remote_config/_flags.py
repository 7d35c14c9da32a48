from __future__ import annotations

from typing import Any

from rconf.core import get_logger, warn

from ._constants import COMMON_FLAGS

logger = get_logger(__name__)


def merge_common_flags(
    stored: dict[str, Any],
    incoming: dict[str, Any] | None,
    force: bool = False,
) -> dict[str, Any]:
    """Merge the flags of a command into the stored snapshot.

    Only common flags are kept. A flag missing from the snapshot is
    filled. A flag that differs keeps its stored value unless
    ``force`` is set.
    """
    flags = dict(stored)
    for name in COMMON_FLAGS:
        if incoming is None or incoming.get(name) is None:
            continue
        value = incoming[name]
        if name not in flags or flags[name] is None:
            flags[name] = value
        elif flags[name] != value:
            if force:
                flags[name] = value
            else:
                warn(
                    "Flag %s=%r differs from stored value %r, "
                    "keeping stored value",
                    name,
                    value,
                    flags[name],
                    logger=logger,
                )
    return flags
