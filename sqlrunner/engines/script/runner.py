"""
ScriptRunner: run a SQL script against a caller-owned session.

Two modes:
- line by line (default): statements are split on the delimiter and executed
  one at a time, with one commit at the end of the run;
- full script (``send_full_script``): the whole input, comments included,
  is sent as a single statement.

Either way a best-effort rollback is issued when the run ends, so only work
committed by the run (or by autocommit) survives.
"""

import io
import logging
from collections.abc import Iterable, Iterator
from typing import Any, TextIO

from sqlrunner.core.session import Session
from sqlrunner.schemas import RunConfig

from .accumulator import CommandAccumulator
from .delimiter import LINE_SEPARATOR, Delimiter
from .errors import ScriptRunnerError, describe_failure
from .executor import StatementExecutor
from .reporter import ResultReporter
from .sinks import LogWriter
from .transaction import TransactionController

_log = logging.getLogger(__name__)


def iter_lines(reader: str | TextIO | Iterable[str]) -> Iterator[str]:
    """Yield lines without their ``\\n`` terminator; a preceding ``\\r`` is kept."""
    source: Iterable[str] = io.StringIO(reader) if isinstance(reader, str) else reader
    for line in source:
        yield line[:-1] if line.endswith("\n") else line


class ScriptRunner:
    """
    ScriptRunner(session, config=None, **overrides).run_script(reader)

    ``overrides`` are RunConfig fields applied on top of ``config`` (or on top
    of the defaults). The session stays open after a run; call
    ``close_connection()`` (or use the runner as a context manager) to close it.
    One runner drives one session from one thread at a time.
    """

    def __init__(
        self,
        session: Session,
        config: RunConfig | None = None,
        **overrides: Any,
    ) -> None:
        self.session = session
        base = config or RunConfig()
        self.config = RunConfig.model_validate({**dict(base), **overrides}) if overrides else base
        self.log = LogWriter(self.config.log_writer)
        self.error = LogWriter(self.config.error_writer)

    def run_script(self, reader: str | TextIO | Iterable[str]) -> None:
        controller = TransactionController(self.session, self.config.autocommit)
        with controller.run():
            if self.config.send_full_script:
                self._execute_full_script(reader, controller)
            else:
                self._execute_line_by_line(reader, controller)

    def close_connection(self) -> None:
        try:
            self.session.close()
        except Exception:
            _log.debug("Ignoring session close failure", exc_info=True)

    def __enter__(self) -> "ScriptRunner":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close_connection()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _new_executor(self) -> StatementExecutor:
        reporter = ResultReporter(self.log, self.error)
        return StatementExecutor(self.session, self.config, reporter, self.error)

    def _execute_full_script(
        self, reader: str | TextIO | Iterable[str], controller: TransactionController
    ) -> None:
        parts: list[str] = []
        try:
            for line in iter_lines(reader):
                parts.append(line)
                parts.append(LINE_SEPARATOR)
            script = "".join(parts)
            self.log.println(script)
            self._new_executor().execute(script)
            controller.commit()
        except ScriptRunnerError as e:
            self._report(e)
            raise
        except Exception as e:
            raise self._wrap("".join(parts), e) from e

    def _execute_line_by_line(
        self, reader: str | TextIO | Iterable[str], controller: TransactionController
    ) -> None:
        accumulator = CommandAccumulator(
            Delimiter(self.config.delimiter, self.config.full_line_delimiter),
            self._new_executor().execute,
            self.log,
        )
        try:
            for line in iter_lines(reader):
                accumulator.handle_line(line)
            controller.commit()
            accumulator.check_for_missing_terminator()
        except ScriptRunnerError as e:
            self._report(e)
            raise
        except Exception as e:
            raise self._wrap(accumulator.pending, e) from e

    def _report(self, err: ScriptRunnerError) -> None:
        _log.error("Script run failed: %s", err)
        self.error.println(err)

    def _wrap(self, command: str, exc: Exception) -> ScriptRunnerError:
        err = ScriptRunnerError(describe_failure(command, exc), command=command)
        self._report(err)
        return err
