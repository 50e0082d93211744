"""
Text output sinks for echoed SQL, result rows and error lines.
"""

from typing import Any


class LogWriter:
    """Thin wrapper over a text stream; ``None`` discards all output.

    Every write is flushed so log and error output interleave in order.
    """

    def __init__(self, stream: Any | None) -> None:
        self.stream = stream

    def print(self, obj: object) -> None:
        if self.stream is None:
            return
        self.stream.write(str(obj))
        self.stream.flush()

    def println(self, obj: object = "") -> None:
        self.print(f"{obj}\n")
