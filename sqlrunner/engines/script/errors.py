"""
Errors raised by the script runner.

Every fatal error carries the offending command text (``command``) and chains
the root cause via ``__cause__``.
"""


class ScriptRunnerError(RuntimeError):
    """Base class for fatal script runner failures."""

    def __init__(self, message: str, command: str | None = None) -> None:
        super().__init__(message)
        self.command = command


class ConfigurationError(ScriptRunnerError):
    """Autocommit could not be negotiated before the run started."""

    pass


class StatementExecutionError(ScriptRunnerError):
    """A unit failed to execute while stop-on-error is set."""

    pass


class WarningEscalationError(StatementExecutionError):
    """The database attached warnings and throw-warning is set."""

    def __init__(
        self, message: str, command: str | None = None, warnings: list[str] | None = None
    ) -> None:
        super().__init__(message, command)
        self.warnings = warnings or []


class MissingTerminatorError(ScriptRunnerError):
    """Buffered text was left without a delimiter at end of input."""

    pass


class TransactionError(ScriptRunnerError):
    """The final commit failed."""

    pass


def describe_failure(command: str, exc: BaseException) -> str:
    """Message written to the error sink for a failed command."""
    return f"Error executing: {command}.  Cause: {exc}"
