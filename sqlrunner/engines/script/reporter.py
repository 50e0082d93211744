"""
Render tabular results as tab-separated text.
"""

import logging

from sqlrunner.core.session import Statement

from .sinks import LogWriter

_log = logging.getLogger(__name__)


class ResultReporter:
    """Prints a header line of column labels and one line per row.

    Read failures go to the error sink; they never abort the run.
    """

    def __init__(self, log: LogWriter, error: LogWriter) -> None:
        self.log = log
        self.error = error

    def report(self, statement: Statement, has_results: bool) -> None:
        if not has_results:
            return
        try:
            rs = statement.result_set()
            if rs is None:
                return
            try:
                self.log.println("\t".join(rs.labels()))
                for row in rs:
                    self.log.println("\t".join(row))
            finally:
                try:
                    rs.close()
                except Exception:
                    _log.debug("Ignoring result set close failure", exc_info=True)
        except Exception as e:
            self.error.println(f"Error printing results: {e}")
