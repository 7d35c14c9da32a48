from rconf.core import DataModel


class MatchCondition(DataModel):
    """Match condition for conditional writes."""

    exists: bool | None = None
    """Check item exists. False makes the write create-only."""

    if_match: str | None = None
    """Etag the stored item must carry."""


class StoreFeature:
    CONDITIONAL_WRITE = "conditional_write"
    CONDITIONAL_DELETE = "conditional_delete"
