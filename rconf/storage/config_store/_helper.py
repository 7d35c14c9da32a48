from ._models import ConfigItem, ConfigKey, ConfigProperties


def build_item(
    id: str,
    value: bytes | None = None,
    etag: str | None = None,
    updated_time: float | None = None,
) -> ConfigItem:
    return ConfigItem(
        key=ConfigKey(id=id),
        value=value,
        properties=ConfigProperties(etag=etag, updated_time=updated_time),
    )


def describe_condition(exists: bool | None, etag: str | None) -> str:
    if exists is False:
        return "key must not exist"
    if etag is not None:
        return f"etag must match {etag}"
    if exists is True:
        return "key must exist"
    return "unconditional"
