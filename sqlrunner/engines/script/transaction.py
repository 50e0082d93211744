"""
Autocommit negotiation, the single end-of-run commit, and best-effort rollback.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlrunner.core.session import Session

from .errors import ConfigurationError, TransactionError

_log = logging.getLogger(__name__)


class TransactionController:
    """Drives the transactional state of a caller-owned session for one run."""

    def __init__(self, session: Session, autocommit: bool) -> None:
        self.session = session
        self.autocommit = autocommit

    def negotiate_autocommit(self) -> None:
        """Set the session's autocommit flag when it differs from the configured one."""
        try:
            if self.session.autocommit != self.autocommit:
                self.session.autocommit = self.autocommit
        except Exception as e:
            raise ConfigurationError(
                f"Could not set AutoCommit to {self.autocommit}. Cause: {e}"
            ) from e

    def commit(self) -> None:
        try:
            if not self.session.autocommit:
                self.session.commit()
        except Exception as e:
            raise TransactionError(f"Could not commit transaction. Cause: {e}") from e

    def rollback_quietly(self) -> None:
        try:
            if not self.session.autocommit:
                self.session.rollback()
        except Exception:
            _log.debug("Ignoring rollback failure", exc_info=True)

    @contextmanager
    def run(self) -> Iterator["TransactionController"]:
        """
        Negotiate autocommit, then guard the body with a final rollback.

        A negotiation failure raises before the body starts and skips the rollback.
        """
        self.negotiate_autocommit()
        try:
            yield self
        finally:
            self.rollback_quietly()
