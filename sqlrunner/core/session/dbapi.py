"""
Session adapter over PEP 249 (DB-API 2.0) connections.

Drivers disagree on autocommit and on how warnings surface, so both are
dispatched on product_type:

- autocommit: psycopg ``conn.autocommit``; pymysql ``get_autocommit()`` /
  ``autocommit(flag)``; sqlite3 ``isolation_level is None``; trino
  ``isolation_level`` (fixed at connect time).
- warnings: Python warnings emitted by the driver during execute, plus
  PostgreSQL notices with severity WARNING and MySQL ``SHOW WARNINGS``.
"""

import logging
import sqlite3
from collections.abc import Iterator
from typing import Any
from warnings import catch_warnings, simplefilter

from trino.exceptions import NotSupportedError
from trino.transaction import IsolationLevel

from sqlrunner.models import ProductTypeEnum, ResultSetType

_log = logging.getLogger(__name__)

NULL_TEXT = "NULL"


def _to_text(value: Any) -> str:
    return NULL_TEXT if value is None else str(value)


class DbApiResultSet:
    """
    Rows of the last executed query, values as text.

    FORWARD_ONLY streams with ``fetchone()`` and can be iterated once;
    scrollable types take a ``fetchall()`` snapshot and can be re-iterated.
    """

    def __init__(
        self, cursor: Any, result_set_type: ResultSetType = ResultSetType.FORWARD_ONLY
    ) -> None:
        self._cursor = cursor
        self.result_set_type = result_set_type
        self._labels = [d[0] for d in cursor.description or []]
        self._snapshot: list[list[str]] | None = None
        self._consumed = False
        self._closed = False

    def labels(self) -> list[str]:
        return list(self._labels)

    def __iter__(self) -> Iterator[list[str]]:
        if self._closed:
            raise RuntimeError("result set is closed")
        if self.result_set_type.scrollable:
            if self._snapshot is None:
                self._snapshot = [[_to_text(v) for v in row] for row in self._cursor.fetchall()]
            return iter(self._snapshot)
        if self._consumed:
            raise RuntimeError("forward-only result set can only be iterated once")
        self._consumed = True
        return self._stream()

    def _stream(self) -> Iterator[list[str]]:
        while True:
            row = self._cursor.fetchone()
            if row is None:
                return
            yield [_to_text(v) for v in row]

    def close(self) -> None:
        self._closed = True
        self._snapshot = None


class DbApiStatement:
    """One cursor, used for a single ``execute``."""

    def __init__(
        self,
        session: "DbApiSession",
        result_set_type: ResultSetType = ResultSetType.FORWARD_ONLY,
    ) -> None:
        self._session = session
        self._cursor = session.connection.cursor()
        self.result_set_type = result_set_type
        # No parameters are bound, so drivers pass the text through untouched
        # either way; kept for callers that inspect it.
        self.escape_processing = True
        self._warnings: list[str] = []
        self._result_set: DbApiResultSet | None = None

    def execute(self, sql: str) -> bool:
        self._session.drain_notices()
        with catch_warnings(record=True) as caught:
            simplefilter("always")
            self._run(sql)
        self._warnings = [str(w.message) for w in caught]
        self._warnings.extend(self._session.drain_notices())
        self._warnings.extend(self._session.server_warnings(self._cursor))
        if self._cursor.description is None:
            self._result_set = None
            return False
        self._result_set = DbApiResultSet(self._cursor, self.result_set_type)
        return True

    def _run(self, sql: str) -> None:
        try:
            self._cursor.execute(sql)
        except (sqlite3.Warning, sqlite3.ProgrammingError) as e:
            # sqlite3 execute() takes one statement; whole scripts go through
            # executescript(), which commits any open transaction first.
            if (
                self._session.product_type != ProductTypeEnum.SQLITE
                or "one statement at a time" not in str(e)
            ):
                raise
            _log.debug("Multiple statements; running through executescript")
            self._cursor.executescript(sql)

    def warnings(self) -> list[str]:
        return list(self._warnings)

    def result_set(self) -> DbApiResultSet | None:
        return self._result_set

    def close(self) -> None:
        if self._result_set is not None:
            self._result_set.close()
        self._cursor.close()


class DbApiSession:
    """Wraps a caller-owned DB-API connection."""

    def __init__(self, connection: Any, product_type: ProductTypeEnum | str) -> None:
        self.connection = connection
        self.product_type = ProductTypeEnum(product_type)
        self._notices: list[str] = []
        if self.product_type == ProductTypeEnum.POSTGRES:
            connection.add_notice_handler(self._on_notice)

    # --- autocommit ---

    @property
    def autocommit(self) -> bool:
        conn = self.connection
        pt = self.product_type
        if pt == ProductTypeEnum.POSTGRES:
            return bool(conn.autocommit)
        if pt == ProductTypeEnum.MYSQL:
            return bool(conn.get_autocommit())
        if pt == ProductTypeEnum.SQLITE:
            return conn.isolation_level is None
        if pt == ProductTypeEnum.TRINO:
            return conn.isolation_level == IsolationLevel.AUTOCOMMIT
        raise ValueError(f"Unsupported product_type: {pt}")

    @autocommit.setter
    def autocommit(self, value: bool) -> None:
        conn = self.connection
        pt = self.product_type
        if pt == ProductTypeEnum.POSTGRES:
            conn.autocommit = value
        elif pt == ProductTypeEnum.MYSQL:
            conn.autocommit(value)
        elif pt == ProductTypeEnum.SQLITE:
            conn.isolation_level = None if value else ""
        elif pt == ProductTypeEnum.TRINO:
            raise NotSupportedError(
                "Trino isolation level is fixed at connect time; reconnect with autocommit="
                f"{value}"
            )
        else:
            raise ValueError(f"Unsupported product_type: {pt}")

    # --- transaction / lifecycle ---

    def commit(self) -> None:
        self.connection.commit()

    def rollback(self) -> None:
        self.connection.rollback()

    def close(self) -> None:
        self.connection.close()

    def create_statement(
        self, result_set_type: ResultSetType = ResultSetType.FORWARD_ONLY
    ) -> DbApiStatement:
        return DbApiStatement(self, result_set_type)

    # --- warnings ---

    def _on_notice(self, diag: Any) -> None:
        severity = getattr(diag, "severity_nonlocalized", None) or diag.severity
        if severity == "WARNING":
            self._notices.append(diag.message_primary or "")

    def drain_notices(self) -> list[str]:
        notices, self._notices = self._notices, []
        return notices

    def server_warnings(self, cursor: Any) -> list[str]:
        """MySQL only: read ``SHOW WARNINGS`` when the last result reported any."""
        if self.product_type != ProductTypeEnum.MYSQL:
            return []
        result = getattr(cursor, "_result", None)
        if not getattr(result, "warning_count", 0):
            return []
        rows = self.connection.show_warnings() or ()
        return [f"{level} {code}: {message}" for level, code, message in rows]
