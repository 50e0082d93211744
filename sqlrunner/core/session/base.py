"""
Session, Statement and ResultSet contracts consumed by the script runner.
"""

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from sqlrunner.models import ResultSetType


@runtime_checkable
class ResultSet(Protocol):
    def labels(self) -> list[str]: ...

    def __iter__(self) -> Iterator[list[str]]: ...

    def close(self) -> None: ...


@runtime_checkable
class Statement(Protocol):
    escape_processing: bool

    def execute(self, sql: str) -> bool:
        """Run *sql*; True when it produced tabular results."""
        ...

    def warnings(self) -> list[str]: ...

    def result_set(self) -> ResultSet | None: ...

    def close(self) -> None: ...


@runtime_checkable
class Session(Protocol):
    autocommit: bool

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def close(self) -> None: ...

    def create_statement(
        self, result_set_type: ResultSetType = ResultSetType.FORWARD_ONLY
    ) -> Statement: ...
