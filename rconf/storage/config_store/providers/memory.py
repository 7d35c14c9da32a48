"""
In Memory Config Store.
"""

from __future__ import annotations

__all__ = ["Memory"]

from threading import Lock
from typing import Any

from rconf.core import Context, Operation, Response, Time
from rconf.core.exceptions import ConflictError, NotFoundError
from rconf.storage._common import StoreOperation, StoreProvider

from .._helper import build_item, describe_condition


class Memory(StoreProvider):
    # id -> {"value", "etag", "updated_time"}
    _db: dict[str, dict]
    _lock: Lock

    def __init__(self, **kwargs):
        """Initialize.

        Items live only as long as this provider instance. Components
        sharing one instance observe each other's writes.
        """
        self._db = dict()
        self._lock = Lock()

    def __run__(
        self,
        operation: Operation | None = None,
        context: Context | None = None,
        **kwargs,
    ) -> Any:
        op_parser = self.get_op_parser(operation)
        result: Any = None
        # GET
        if op_parser.op_equals(StoreOperation.GET):
            id = op_parser.get_id_as_str()
            with self._lock:
                if id not in self._db:
                    raise NotFoundError(f"Key {id} not found")
                item = dict(self._db[id])
            result = build_item(
                id=id,
                value=item["value"],
                etag=item["etag"],
                updated_time=item["updated_time"],
            )
        # PUT
        elif op_parser.op_equals(StoreOperation.PUT):
            id = op_parser.get_id_as_str()
            value = op_parser.get_value()
            exists = op_parser.get_where_exists()
            where_etag = op_parser.get_where_etag()
            etag = self.generate_etag()
            updated_time = Time.now()
            with self._lock:
                current = self._db.get(id)
                failed = (
                    (exists is False and current is not None)
                    or (exists is True and current is None)
                    or (
                        where_etag is not None
                        and (current is None or current["etag"] != where_etag)
                    )
                )
                if failed:
                    raise ConflictError(
                        f"Conditional write on {id} failed: "
                        f"{describe_condition(exists, where_etag)}"
                    )
                self._db[id] = {
                    "value": value,
                    "etag": etag,
                    "updated_time": updated_time,
                }
            result = build_item(id=id, etag=etag, updated_time=updated_time)
        # DELETE
        elif op_parser.op_equals(StoreOperation.DELETE):
            id = op_parser.get_id_as_str()
            where_etag = op_parser.get_where_etag()
            with self._lock:
                if id not in self._db:
                    raise NotFoundError(f"Key {id} not found")
                if (
                    where_etag is not None
                    and self._db[id]["etag"] != where_etag
                ):
                    raise ConflictError(
                        f"Conditional delete on {id} failed: "
                        f"{describe_condition(None, where_etag)}"
                    )
                self._db.pop(id)
        # CLOSE
        elif op_parser.op_equals(StoreOperation.CLOSE):
            pass
        else:
            return super().__run__(
                operation,
                context,
                **kwargs,
            )
        return Response(result=result)
