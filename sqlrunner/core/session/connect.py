"""
DB connection helpers for external DataSources.

Uses psycopg (PostgreSQL), pymysql (MySQL), trino (Trino) or sqlite3 based on product_type.
"""

import sqlite3
from typing import Any

import psycopg
import pymysql
from pymysql.constants import CLIENT
from trino.auth import BasicAuthentication
from trino.dbapi import connect as trino_connect
from trino.transaction import IsolationLevel

from sqlrunner.core.config import settings
from sqlrunner.models import DataSource, ProductTypeEnum

from .dbapi import DbApiSession


def _get(datasource: Any, key: str) -> Any:
    """Get attribute or dict key from DataSource, dict, or Pydantic model."""
    if isinstance(datasource, dict):
        return datasource.get(key)
    return getattr(datasource, key, None)


def _resolve_product_type(
    datasource: Any, product_type: ProductTypeEnum | None
) -> ProductTypeEnum:
    pt = product_type or _get(datasource, "product_type")
    if pt is None:
        raise ValueError("product_type is required (from datasource or argument)")
    if isinstance(pt, str):
        return ProductTypeEnum(pt)
    return pt


_DEFAULT_PORTS = {
    ProductTypeEnum.POSTGRES: 5432,
    ProductTypeEnum.MYSQL: 3306,
    ProductTypeEnum.TRINO: 8080,
}


def connect(
    datasource: DataSource | dict[str, Any],
    *,
    product_type: ProductTypeEnum | None = None,
    autocommit: bool = False,
) -> Any:
    """
    Open a DB-API connection from a DataSource or connection dict.

    - datasource: DataSource model or dict with host, port, database, username,
      password and product_type (or pass product_type=). sqlite only needs database.
    - autocommit: initial autocommit mode. Trino cannot change it later, so
      open the connection with the mode the run will use.
    """
    pt = _resolve_product_type(datasource, product_type)
    database = _get(datasource, "database")
    if database is None:
        raise ValueError("datasource must provide database")

    if pt == ProductTypeEnum.SQLITE:
        conn = sqlite3.connect(
            database,
            timeout=settings.EXTERNAL_DB_CONNECT_TIMEOUT,
            check_same_thread=False,
        )
        conn.isolation_level = None if autocommit else ""
        return conn

    host = _get(datasource, "host")
    port = _get(datasource, "port") or _DEFAULT_PORTS.get(pt, 5432)
    username = _get(datasource, "username")
    password = _get(datasource, "password")

    for name, val in [("host", host), ("username", username)]:
        if val is None:
            raise ValueError(f"datasource must provide {name}")
    password = password if password is not None else ""

    timeout = settings.EXTERNAL_DB_CONNECT_TIMEOUT

    if pt == ProductTypeEnum.POSTGRES:
        return psycopg.connect(
            host=host,
            port=int(port),
            dbname=database,
            user=username,
            password=password,
            connect_timeout=timeout,
            autocommit=autocommit,
        )
    if pt == ProductTypeEnum.MYSQL:
        return pymysql.connect(
            host=host,
            port=int(port),
            database=database,
            user=username,
            password=password,
            connect_timeout=timeout,
            autocommit=autocommit,
            client_flag=CLIENT.MULTI_STATEMENTS,
        )
    if pt == ProductTypeEnum.TRINO:
        use_ssl = _get(datasource, "use_ssl") in (True, "true", "1")
        if use_ssl and not (password and password.strip()):
            raise ValueError("Password is required for Trino when using SSL/HTTPS.")
        return trino_connect(
            host=host,
            port=int(port),
            user=username,
            auth=BasicAuthentication(username, password) if use_ssl else None,
            catalog=database,
            schema="default",
            source="sqlrunner",
            http_scheme="https" if use_ssl else "http",
            request_timeout=timeout,
            isolation_level=(
                IsolationLevel.AUTOCOMMIT if autocommit else IsolationLevel.READ_COMMITTED
            ),
        )
    raise ValueError(f"Unsupported product_type: {pt}")


def open_session(
    datasource: DataSource | dict[str, Any],
    *,
    product_type: ProductTypeEnum | None = None,
    autocommit: bool = False,
) -> DbApiSession:
    """connect() and wrap the connection in a DbApiSession."""
    pt = _resolve_product_type(datasource, product_type)
    conn = connect(datasource, product_type=pt, autocommit=autocommit)
    return DbApiSession(conn, pt)
