from __future__ import annotations

from typing import Any

from rconf.core import DataModel, OperationParser
from rconf.core.exceptions import BadRequestError

from ._models import MatchCondition


class StoreOperationParser(OperationParser):
    def get_key(self) -> Any:
        key = self.get_arg("key")
        if key is None:
            raise BadRequestError("Key parameter missing")
        return key

    def get_id_as_str(self) -> str:
        key = self.get_key()
        if isinstance(key, str):
            return key
        if isinstance(key, DataModel):
            key = key.to_dict()
        if isinstance(key, dict) and "id" in key:
            return str(key["id"])
        raise BadRequestError(f"Key format not supported: {key!r}")

    def get_value(self) -> bytes:
        value = self.get_arg("value")
        if value is None:
            raise BadRequestError("Value parameter missing")
        if isinstance(value, str):
            return value.encode()
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        raise BadRequestError("Value must be bytes or str")

    def get_match_condition(self) -> MatchCondition:
        where = self.get_arg("where")
        if where is None:
            return MatchCondition()
        if isinstance(where, MatchCondition):
            return where
        if isinstance(where, dict):
            return MatchCondition.from_dict(where)
        raise BadRequestError("Condition format not supported")

    def get_where_exists(self) -> bool | None:
        return self.get_match_condition().exists

    def get_where_etag(self) -> str | None:
        return self.get_match_condition().if_match
