"""
SQL script runner: split a script on its delimiter and run it statement by statement.

Exports: ScriptRunner and the error types it raises.
"""

from .errors import (
    ConfigurationError,
    MissingTerminatorError,
    ScriptRunnerError,
    StatementExecutionError,
    TransactionError,
    WarningEscalationError,
)
from .runner import ScriptRunner

__all__ = [
    "ScriptRunner",
    "ScriptRunnerError",
    "ConfigurationError",
    "StatementExecutionError",
    "WarningEscalationError",
    "MissingTerminatorError",
    "TransactionError",
]
