from rconf.core import DataModel


class ConfigKey(DataModel):
    """Config key."""

    id: str
    """Config id.
    """


class ConfigProperties(DataModel):
    """Config properties."""

    etag: str | None = None
    """Opaque version token, replaced on every write.
    """

    updated_time: float | None = None
    """Config updated time.
    """


class ConfigItem(DataModel):
    """Config item."""

    key: ConfigKey
    """Config key.
    """

    value: bytes | None = None
    """Config value.
    """

    properties: ConfigProperties | None = None
    """Config properties.
    """
