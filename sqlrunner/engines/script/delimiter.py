"""
Statement delimiter state.
"""

DEFAULT_DELIMITER = ";"
LINE_SEPARATOR = "\n"


class Delimiter:
    """Active terminator token plus full-line mode.

    Inline mode: a line terminates a command when it *contains* the token.
    Full-line mode: only when the trimmed line *equals* the token.
    """

    def __init__(self, value: str = DEFAULT_DELIMITER, full_line: bool = False) -> None:
        self.value = value
        self.full_line = full_line

    @property
    def value(self) -> str:
        return self._value

    @value.setter
    def value(self, value: str) -> None:
        if not value:
            raise ValueError("delimiter must not be empty")
        self._value = value

    def terminates(self, trimmed_line: str) -> bool:
        if self.full_line:
            return trimmed_line == self._value
        return self._value in trimmed_line

    def __repr__(self) -> str:
        return f"Delimiter({self._value!r}, full_line={self.full_line})"
