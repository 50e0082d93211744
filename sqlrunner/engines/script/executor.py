"""
Submit one accumulated command to the session.

A fresh statement is created per command and always closed afterwards.
With ``stop_on_error`` failures propagate (and, with ``throw_warning``, so do
warnings); otherwise they are written to the error sink and the run goes on.
"""

import logging

from sqlrunner.core.session import Session, Statement
from sqlrunner.schemas import RunConfig

from .errors import StatementExecutionError, WarningEscalationError, describe_failure
from .reporter import ResultReporter
from .sinks import LogWriter

_log = logging.getLogger(__name__)


class StatementExecutor:
    def __init__(
        self,
        session: Session,
        config: RunConfig,
        reporter: ResultReporter,
        error: LogWriter,
    ) -> None:
        self.session = session
        self.config = config
        self.reporter = reporter
        self.error = error

    def execute(self, command: str) -> None:
        sql = command
        if self.config.remove_crs:
            sql = sql.replace("\r\n", "\n")

        statement = self.session.create_statement()
        try:
            statement.escape_processing = self.config.escape_processing
            has_results = False
            _log.debug("Executing SQL: %s", sql)
            if self.config.stop_on_error:
                has_results = self._execute_or_raise(statement, sql, command)
            else:
                try:
                    has_results = statement.execute(sql)
                except Exception as e:
                    _log.warning("Statement failed, continuing: %s", e)
                    self.error.println(describe_failure(command, e))
            self.reporter.report(statement, has_results)
        finally:
            try:
                statement.close()
            except Exception:
                _log.debug("Ignoring statement close failure", exc_info=True)

    def _execute_or_raise(self, statement: Statement, sql: str, command: str) -> bool:
        try:
            has_results = statement.execute(sql)
        except Exception as e:
            raise StatementExecutionError(describe_failure(command, e), command=command) from e
        if self.config.throw_warning:
            warnings = statement.warnings()
            if warnings:
                raise WarningEscalationError(
                    describe_failure(command, "; ".join(warnings)),
                    command=command,
                    warnings=warnings,
                )
        return has_results
