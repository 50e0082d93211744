"""Recording fakes for Session / Statement / ResultSet."""

from typing import Any

from sqlrunner.models import ResultSetType


class FakeResultSet:
    def __init__(self, labels: list[str], rows: list[list[str]], fail_on_row: int | None = None):
        self._labels = labels
        self._rows = rows
        self._fail_on_row = fail_on_row
        self.closed = False

    def labels(self) -> list[str]:
        return list(self._labels)

    def __iter__(self):
        for i, row in enumerate(self._rows):
            if i == self._fail_on_row:
                raise RuntimeError("cursor lost")
            yield row

    def close(self) -> None:
        self.closed = True


class FakeStatement:
    def __init__(self, session: "FakeSession") -> None:
        self.session = session
        self.escape_processing = True
        self.sql: str | None = None
        self.closed = False
        self._result: FakeResultSet | None = None

    def execute(self, sql: str) -> bool:
        self.sql = sql
        self.session.events.append(("execute", sql))
        for needle, exc in self.session.failures.items():
            if needle in sql:
                raise exc
        for needle, rs in self.session.results.items():
            if needle in sql:
                self._result = rs
                return True
        return False

    def warnings(self) -> list[str]:
        return [w for needle, w in self.session.warnings.items() if self.sql and needle in self.sql]

    def result_set(self) -> FakeResultSet | None:
        return self._result

    def close(self) -> None:
        self.closed = True
        self.session.events.append(("close_statement", self.sql))
        if self.session.fail_statement_close:
            raise RuntimeError("close failed")


class FakeSession:
    """
    Session double recording every call in ``events``.

    - failures: {substring: exception} raised by execute for matching SQL
    - results: {substring: FakeResultSet} returned for matching SQL
    - warnings: {substring: message} reported after matching SQL
    """

    def __init__(self, autocommit: bool = False) -> None:
        self._autocommit = autocommit
        self.events: list[tuple[str, Any]] = []
        self.statements: list[FakeStatement] = []
        self.failures: dict[str, Exception] = {}
        self.results: dict[str, FakeResultSet] = {}
        self.warnings: dict[str, str] = {}
        self.fail_set_autocommit = False
        self.fail_commit = False
        self.fail_rollback = False
        self.fail_close = False
        self.fail_statement_close = False

    @property
    def autocommit(self) -> bool:
        return self._autocommit

    @autocommit.setter
    def autocommit(self, value: bool) -> None:
        self.events.append(("set_autocommit", value))
        if self.fail_set_autocommit:
            raise RuntimeError("read-only connection")
        self._autocommit = value

    def commit(self) -> None:
        self.events.append(("commit", None))
        if self.fail_commit:
            raise RuntimeError("commit refused")

    def rollback(self) -> None:
        self.events.append(("rollback", None))
        if self.fail_rollback:
            raise RuntimeError("rollback refused")

    def close(self) -> None:
        self.events.append(("close", None))
        if self.fail_close:
            raise RuntimeError("already closed")

    def create_statement(self, result_set_type: ResultSetType = ResultSetType.FORWARD_ONLY):
        st = FakeStatement(self)
        self.statements.append(st)
        return st

    # --- helpers ---

    def executed(self) -> list[str]:
        return [arg for name, arg in self.events if name == "execute"]

    def count(self, name: str) -> int:
        return sum(1 for n, _ in self.events if n == name)
