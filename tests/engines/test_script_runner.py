"""Tests for engines.script.runner (ScriptRunner orchestration)."""

import io

import pytest

from sqlrunner.engines.script import (
    ConfigurationError,
    MissingTerminatorError,
    ScriptRunner,
    ScriptRunnerError,
    StatementExecutionError,
    TransactionError,
)
from sqlrunner.engines.script.runner import iter_lines
from sqlrunner.schemas import RunConfig
from tests.utils.session import FakeResultSet, FakeSession


def _runner(session: FakeSession, log: io.StringIO, err: io.StringIO, **cfg) -> ScriptRunner:
    return ScriptRunner(session, log_writer=log, error_writer=err, **cfg)


class TestIterLines:
    def test_strips_only_newline(self) -> None:
        assert list(iter_lines("a\r\nb\nc")) == ["a\r", "b", "c"]

    def test_stream(self) -> None:
        assert list(iter_lines(io.StringIO("x\ny\n"))) == ["x", "y"]

    def test_iterable(self) -> None:
        assert list(iter_lines(["x\n", "y"])) == ["x", "y"]


class TestLineByLine:
    def test_two_selects_one_commit(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        _runner(session, log_sink, error_sink).run_script("SELECT 1;\nSELECT 2;\n")

        assert [sql.strip() for sql in session.executed()] == ["SELECT 1", "SELECT 2"]
        names = [name for name, _ in session.events if name in ("execute", "commit")]
        assert names == ["execute", "execute", "commit"]
        assert session.count("commit") == 1

    def test_rollback_is_last_step(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        _runner(session, log_sink, error_sink).run_script("SELECT 1;\n")
        assert session.events[-1] == ("rollback", None)

    def test_no_delimiter_missing_terminator(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        with pytest.raises(MissingTerminatorError) as ei:
            _runner(session, log_sink, error_sink).run_script("SELECT 1\nFROM dual\n")
        assert "SELECT 1\nFROM dual" in ei.value.command
        assert "SELECT 1" in str(ei.value)
        assert session.executed() == []
        assert "Line missing end-of-line terminator (;)" in error_sink.getvalue()
        assert session.events[-1] == ("rollback", None)

    def test_trailing_text_truncated(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        _runner(session, log_sink, error_sink).run_script(
            "INSERT INTO t VALUES (1); -- trailing;"
        )
        assert session.executed() == ["INSERT INTO t VALUES (1); -- trailing\n"]

    def test_delimiter_directive(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        script = (
            "//@DELIMITER $\n"
            "CREATE FUNCTION f() RETURNS int AS 'SELECT 1;' LANGUAGE sql$\n"
            "SELECT 2$\n"
        )
        _runner(session, log_sink, error_sink).run_script(script)
        assert session.executed() == [
            "CREATE FUNCTION f() RETURNS int AS 'SELECT 1;' LANGUAGE sql\n",
            "SELECT 2\n",
        ]
        assert not any("@DELIMITER" in sql for sql in session.executed())

    def test_directive_does_not_leak_into_next_run(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        runner = _runner(session, log_sink, error_sink)
        runner.run_script("-- @DELIMITER $\nSELECT 1$\n")
        runner.run_script("SELECT 2;\n")
        assert session.executed() == ["SELECT 1\n", "SELECT 2\n"]

    def test_full_line_delimiter(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        _runner(session, log_sink, error_sink, full_line_delimiter=True).run_script(
            "x; y\n;\n"
        )
        assert session.executed() == ["x; y\n\n"]

    def test_full_line_delimiter_inline_does_not_trigger(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        with pytest.raises(MissingTerminatorError):
            _runner(session, log_sink, error_sink, full_line_delimiter=True).run_script(
                "x; y\n"
            )
        assert session.executed() == []

    def test_continue_on_error(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        session.failures["bad"] = RuntimeError("syntax error")
        _runner(session, log_sink, error_sink, stop_on_error=False).run_script(
            "SELECT bad;\nSELECT 2;\n"
        )
        assert session.executed() == ["SELECT bad\n", "SELECT 2\n"]
        assert "Error executing: SELECT bad" in error_sink.getvalue()
        assert "syntax error" in error_sink.getvalue()
        assert session.count("commit") == 1

    def test_stop_on_error(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        session.failures["bad"] = RuntimeError("syntax error")
        with pytest.raises(StatementExecutionError) as ei:
            _runner(session, log_sink, error_sink, stop_on_error=True).run_script(
                "SELECT 1;\nSELECT bad;\nSELECT 3;\n"
            )
        assert session.executed() == ["SELECT 1\n", "SELECT bad\n"]
        assert ei.value.command == "SELECT bad\n"
        assert session.count("commit") == 0
        assert session.events[-1] == ("rollback", None)
        assert "syntax error" in error_sink.getvalue()

    def test_echo_comments_and_commands(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        _runner(session, log_sink, error_sink).run_script("-- setup\nSELECT 1;\n")
        assert log_sink.getvalue() == "-- setup\nSELECT 1\n\n"

    def test_query_results_logged(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        session.results["SELECT"] = FakeResultSet(["a", "b"], [["1", "x"]])
        _runner(session, log_sink, error_sink).run_script("SELECT a, b FROM t;\n")
        assert log_sink.getvalue().endswith("a\tb\n1\tx\n")


class TestFullScript:
    def test_single_execute_verbatim(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        script = "-- header\nSELECT 1;\nSELECT 2;\n"
        _runner(session, log_sink, error_sink, send_full_script=True).run_script(script)
        assert session.executed() == [script]
        assert session.count("commit") == 1
        assert session.events[-1] == ("rollback", None)

    def test_no_delimiter_needed(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        _runner(session, log_sink, error_sink, send_full_script=True).run_script("SELECT 1\n")
        assert session.executed() == ["SELECT 1\n"]

    def test_failure_logged_when_continuing(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        session.failures["bad"] = RuntimeError("syntax error")
        _runner(session, log_sink, error_sink, send_full_script=True).run_script("bad;\n")
        assert "syntax error" in error_sink.getvalue()
        assert session.count("commit") == 1

    def test_failure_fatal_with_stop_on_error(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        session.failures["bad"] = RuntimeError("syntax error")
        with pytest.raises(StatementExecutionError):
            _runner(
                session, log_sink, error_sink, send_full_script=True, stop_on_error=True
            ).run_script("bad;\n")
        assert session.count("commit") == 0

    def test_remove_crs(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        _runner(
            session, log_sink, error_sink, send_full_script=True, remove_crs=True
        ).run_script("SELECT 1\r\nFROM t\r\n")
        assert session.executed() == ["SELECT 1\nFROM t\n"]


class TestTransactions:
    def test_autocommit_no_commit_or_rollback(
        self, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        s = FakeSession(autocommit=False)
        _runner(s, log_sink, error_sink, autocommit=True).run_script("SELECT 1;\n")
        assert s.events[0] == ("set_autocommit", True)
        assert s.count("commit") == 0
        assert s.count("rollback") == 0

    def test_autocommit_negotiation_failure(
        self, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        s = FakeSession(autocommit=True)
        s.fail_set_autocommit = True
        with pytest.raises(ConfigurationError):
            _runner(s, log_sink, error_sink).run_script("SELECT 1;\n")
        assert s.executed() == []

    def test_commit_failure_is_fatal(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        session.fail_commit = True
        with pytest.raises(TransactionError):
            _runner(session, log_sink, error_sink).run_script("SELECT 1;\n")
        assert "Could not commit transaction" in error_sink.getvalue()
        assert session.events[-1] == ("rollback", None)

    def test_rollback_failure_swallowed(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        session.fail_rollback = True
        _runner(session, log_sink, error_sink).run_script("SELECT 1;\n")
        assert session.count("rollback") == 1

    def test_reader_failure_wrapped(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        def _broken():
            yield "SELECT 1;\n"
            raise OSError("disk gone")

        with pytest.raises(ScriptRunnerError) as ei:
            _runner(session, log_sink, error_sink).run_script(_broken())
        assert isinstance(ei.value.__cause__, OSError)
        assert "disk gone" in error_sink.getvalue()


class TestRunnerLifecycle:
    def test_config_and_overrides(self, session: FakeSession) -> None:
        base = RunConfig(delimiter="$", log_writer=None, error_writer=None)
        runner = ScriptRunner(session, base, stop_on_error=True)
        assert runner.config.delimiter == "$"
        assert runner.config.stop_on_error is True
        assert base.stop_on_error is False

    def test_invalid_override_rejected(self, session: FakeSession) -> None:
        with pytest.raises(ValueError):
            ScriptRunner(session, delimiter="")

    def test_silent_sinks(self, session: FakeSession) -> None:
        session.failures["bad"] = RuntimeError("nope")
        ScriptRunner(session, log_writer=None, error_writer=None).run_script("bad;\n")
        assert session.executed() == ["bad\n"]

    def test_close_connection_swallows(self, session: FakeSession) -> None:
        session.fail_close = True
        ScriptRunner(session, log_writer=None, error_writer=None).close_connection()
        assert session.count("close") == 1

    def test_run_does_not_close_session(
        self, session: FakeSession, log_sink: io.StringIO, error_sink: io.StringIO
    ) -> None:
        _runner(session, log_sink, error_sink).run_script("SELECT 1;\n")
        assert session.count("close") == 0

    def test_context_manager_closes(self, session: FakeSession) -> None:
        with ScriptRunner(session, log_writer=None, error_writer=None) as runner:
            runner.run_script("SELECT 1;\n")
        assert session.events[-1] == ("close", None)
