import io
import sqlite3
from collections.abc import Generator

import pytest

from sqlrunner.core.session import DbApiSession
from sqlrunner.models import ProductTypeEnum
from tests.utils.session import FakeSession


@pytest.fixture
def session() -> FakeSession:
    return FakeSession(autocommit=False)


@pytest.fixture
def log_sink() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def error_sink() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def sqlite_session() -> Generator[DbApiSession, None, None]:
    conn = sqlite3.connect(":memory:")
    s = DbApiSession(conn, ProductTypeEnum.SQLITE)
    yield s
    conn.close()
