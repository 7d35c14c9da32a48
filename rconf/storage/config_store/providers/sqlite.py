"""
Config Store on SQLite.
"""

from __future__ import annotations

__all__ = ["SQLite"]

import sqlite3
from typing import Any

from rconf.core import Context, NCall, Operation, Response, Time
from rconf.core.exceptions import (
    ConflictError,
    NotFoundError,
    UnavailableError,
)
from rconf.storage._common import (
    StoreOperation,
    StoreOperationParser,
    StoreProvider,
)

from .._helper import build_item, describe_condition


class SQLite(StoreProvider):
    database: str
    table: str
    timeout: float
    nparams: dict[str, Any]

    _client: Any

    def __init__(
        self,
        database: str = ":memory:",
        table: str = "config",
        timeout: float = 5.0,
        nparams: dict[str, Any] | None = None,
        **kwargs,
    ):
        """Initialize.

        Args:
            database:
                SQLite database file. Processes pointing at the same
                file share one store. Defaults to ":memory:".
            table:
                Table name that will host the config items.
            timeout:
                Seconds to wait on a locked database.
            nparams:
                Native parameters to SQLite client.
        """
        self.database = database
        self.table = table
        self.timeout = timeout
        self.nparams = nparams or dict()

        self._client = None

    def __setup__(
        self,
        context: Context | None = None,
    ) -> None:
        if self._client is not None:
            return

        self._client = NCall(
            sqlite3.connect,
            dict(
                database=self.database,
                timeout=self.timeout,
                isolation_level=None,
                check_same_thread=False,
                **self.nparams,
            ),
            {sqlite3.Error: UnavailableError},
        ).invoke()
        self._create_table_if_needed()

    def __run__(
        self,
        operation: Operation | None = None,
        context: Context | None = None,
        **kwargs,
    ) -> Any:
        self.__setup__(context=context)
        op_parser = self.get_op_parser(operation)
        ncall = self._get_ncall(op_parser)
        if ncall is None:
            return super().__run__(
                operation,
                context,
                **kwargs,
            )
        result = ncall.invoke()
        return Response(result=result)

    def _get_ncall(self, op_parser: StoreOperationParser) -> NCall | None:
        error_map = {
            sqlite3.IntegrityError: ConflictError,
            sqlite3.Error: UnavailableError,
        }
        # GET
        if op_parser.op_equals(StoreOperation.GET):
            return NCall(
                self._get, [op_parser.get_id_as_str()], error_map
            )
        # PUT
        elif op_parser.op_equals(StoreOperation.PUT):
            return NCall(
                self._put,
                [
                    op_parser.get_id_as_str(),
                    op_parser.get_value(),
                    op_parser.get_where_exists(),
                    op_parser.get_where_etag(),
                ],
                error_map,
            )
        # DELETE
        elif op_parser.op_equals(StoreOperation.DELETE):
            return NCall(
                self._delete,
                [op_parser.get_id_as_str(), op_parser.get_where_etag()],
                error_map,
            )
        # CLOSE
        elif op_parser.op_equals(StoreOperation.CLOSE):
            return NCall(self._close, None, error_map)
        return None

    def _get(self, id: str) -> Any:
        row = self._client.execute(
            f"SELECT value, etag, updated_time FROM {self.table} WHERE id = ?",
            (id,),
        ).fetchone()
        if row is None:
            raise NotFoundError(f"Key {id} not found")
        value, etag, updated_time = row
        return build_item(
            id=id, value=bytes(value), etag=etag, updated_time=updated_time
        )

    def _put(
        self,
        id: str,
        value: bytes,
        exists: bool | None,
        where_etag: str | None,
    ) -> Any:
        etag = self.generate_etag()
        updated_time = Time.now()
        if where_etag is not None:
            cursor = self._client.execute(
                f"""UPDATE {self.table}
                    SET value = ?, etag = ?, updated_time = ?
                    WHERE id = ? AND etag = ?""",
                (value, etag, updated_time, id, where_etag),
            )
        elif exists is True:
            cursor = self._client.execute(
                f"""UPDATE {self.table}
                    SET value = ?, etag = ?, updated_time = ?
                    WHERE id = ?""",
                (value, etag, updated_time, id),
            )
        elif exists is False:
            cursor = self._client.execute(
                f"""INSERT INTO {self.table} (id, value, etag, updated_time)
                    VALUES (?, ?, ?, ?)""",
                (id, value, etag, updated_time),
            )
        else:
            cursor = self._client.execute(
                f"""INSERT INTO {self.table} (id, value, etag, updated_time)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT (id) DO UPDATE SET
                    value = EXCLUDED.value,
                    etag = EXCLUDED.etag,
                    updated_time = EXCLUDED.updated_time""",
                (id, value, etag, updated_time),
            )
        if cursor.rowcount == 0:
            raise ConflictError(
                f"Conditional write on {id} failed: "
                f"{describe_condition(exists, where_etag)}"
            )
        return build_item(id=id, etag=etag, updated_time=updated_time)

    def _delete(self, id: str, where_etag: str | None) -> None:
        if where_etag is None:
            cursor = self._client.execute(
                f"DELETE FROM {self.table} WHERE id = ?", (id,)
            )
            if cursor.rowcount == 0:
                raise NotFoundError(f"Key {id} not found")
            return None
        cursor = self._client.execute(
            f"DELETE FROM {self.table} WHERE id = ? AND etag = ?",
            (id, where_etag),
        )
        if cursor.rowcount == 0:
            self._get(id)
            raise ConflictError(
                f"Conditional delete on {id} failed: "
                f"{describe_condition(None, where_etag)}"
            )
        return None

    def _close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def _create_table_if_needed(self) -> None:
        self._client.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self.table} (
                id TEXT PRIMARY KEY,
                value BLOB,
                etag TEXT,
                updated_time REAL
            )
            """
        )
