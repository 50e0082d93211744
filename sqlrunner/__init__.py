"""
sqlrunner - run multi-statement SQL scripts against a database session.
"""

from sqlrunner.engines.script import (
    ConfigurationError,
    MissingTerminatorError,
    ScriptRunner,
    ScriptRunnerError,
    StatementExecutionError,
    TransactionError,
    WarningEscalationError,
)
from sqlrunner.models import DataSource, ProductTypeEnum, ResultSetType
from sqlrunner.schemas import RunConfig

__version__ = "0.1.0"

__all__ = [
    "ScriptRunner",
    "RunConfig",
    "DataSource",
    "ProductTypeEnum",
    "ResultSetType",
    "ScriptRunnerError",
    "ConfigurationError",
    "StatementExecutionError",
    "WarningEscalationError",
    "MissingTerminatorError",
    "TransactionError",
]
