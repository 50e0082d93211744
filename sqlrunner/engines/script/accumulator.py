"""
Line-by-line command accumulation.

Lines are buffered until one terminates the command (see ``Delimiter``); the
buffered text is then handed to ``execute`` and the buffer is cleared.
Comment lines (``//`` or ``--``) are echoed, never buffered, and may carry a
``@DELIMITER <token>`` directive that replaces the active delimiter.
"""

import logging
from collections.abc import Callable

from .delimiter import LINE_SEPARATOR, Delimiter
from .errors import MissingTerminatorError
from .sinks import LogWriter

_log = logging.getLogger(__name__)

_COMMENT_MARKERS = ("//", "--")
_DELIMITER_DIRECTIVE = "@DELIMITER"


def is_comment(trimmed_line: str) -> bool:
    return trimmed_line.startswith(_COMMENT_MARKERS)


def parse_delimiter_directive(trimmed_comment: str) -> str | None:
    """
    Return the new delimiter named by a ``@DELIMITER`` comment, else None.

    ``-- @DELIMITER $$`` and ``//@DELIMITER $`` both qualify; a second ``//``
    left after the marker is removed. Returns ``""`` for a directive with no token.
    """
    cleaned = trimmed_comment[2:].strip().replace("//", "", 1).strip()
    if not cleaned.upper().startswith(_DELIMITER_DIRECTIVE):
        return None
    rest = cleaned[len(_DELIMITER_DIRECTIVE):].split()
    return rest[0] if rest else ""


class CommandAccumulator:
    """Buffers SQL lines and triggers ``execute(command)`` at each delimiter."""

    def __init__(
        self,
        delimiter: Delimiter,
        execute: Callable[[str], None],
        log: LogWriter | None = None,
    ) -> None:
        self.delimiter = delimiter
        self._execute = execute
        self._log = log or LogWriter(None)
        self._buffer: list[str] = []

    @property
    def pending(self) -> str:
        """Text buffered since the last executed command."""
        return "".join(self._buffer)

    def handle_line(self, line: str) -> None:
        trimmed = line.strip()
        if is_comment(trimmed):
            self._handle_comment(trimmed)
        elif self.delimiter.terminates(trimmed):
            self._buffer.append(line[: line.rfind(self.delimiter.value)])
            self._buffer.append(LINE_SEPARATOR)
            command = self.pending
            self._log.println(command)
            self._execute(command)
            self._buffer.clear()
        elif trimmed:
            self._buffer.append(line)
            self._buffer.append(LINE_SEPARATOR)

    def _handle_comment(self, trimmed: str) -> None:
        new_delimiter = parse_delimiter_directive(trimmed)
        if new_delimiter is None:
            self._log.println(trimmed)
            return
        if not new_delimiter:
            _log.warning("Ignoring @DELIMITER directive without a token: %s", trimmed)
            return
        _log.debug("Delimiter changed from %r to %r", self.delimiter.value, new_delimiter)
        self.delimiter.value = new_delimiter

    def check_for_missing_terminator(self) -> None:
        command = self.pending
        if command.strip():
            raise MissingTerminatorError(
                f"Line missing end-of-line terminator ({self.delimiter.value}) => {command}",
                command=command,
            )
