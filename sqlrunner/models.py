"""
Shared models: database product types, result-set cursor modes, DataSource.
"""

from enum import Enum

from pydantic import BaseModel, Field


class ProductTypeEnum(str, Enum):
    """Supported database product types (postgres, mysql, trino, sqlite)."""

    POSTGRES = "postgres"
    MYSQL = "mysql"
    TRINO = "trino"
    SQLITE = "sqlite"


class ResultSetType(int, Enum):
    """Cursor mode of a result set (values match the JDBC constants)."""

    FORWARD_ONLY = 1003  # single pass, streamed
    SCROLL_INSENSITIVE = 1004  # snapshot, re-iterable
    SCROLL_SENSITIVE = 1005

    @property
    def scrollable(self) -> bool:
        return self is not ResultSetType.FORWARD_ONLY


# ---------------------------------------------------------------------------
# DataSource - connection parameters
# ---------------------------------------------------------------------------


class DataSource(BaseModel):
    """Connection parameters for one external database.

    For sqlite only ``database`` (a file path or ``:memory:``) is used.
    """

    name: str = Field(default="default", max_length=255)
    product_type: ProductTypeEnum
    host: str | None = Field(default=None, max_length=255)
    port: int | None = None
    database: str = Field(max_length=255)
    username: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=512)
    use_ssl: bool = False

    def __repr__(self) -> str:
        return (
            f"DataSource(name={self.name!r}, product_type={self.product_type.value!r}, "
            f"host={self.host!r}, database={self.database!r})"
        )
