"""
Generic open/close token substitution (``${name}`` style).

A backslash directly before an open token, or before a close token inside an
expression, escapes it: the backslash is dropped and the token kept literally.
An open token without a matching close token is copied through unchanged.
"""

from collections.abc import Callable, Mapping
from typing import Any


class TokenParser:
    def __init__(self, open_token: str, close_token: str, handler: Callable[[str], str]) -> None:
        if not open_token or not close_token:
            raise ValueError("open_token and close_token must be non-empty")
        self.open_token = open_token
        self.close_token = close_token
        self.handler = handler

    def parse(self, text: str | None) -> str:
        if not text:
            return ""
        open_t, close_t = self.open_token, self.close_token
        out: list[str] = []
        offset = 0
        start = text.find(open_t, offset)
        while start > -1:
            if start > 0 and text[start - 1] == "\\":
                out.append(text[offset : start - 1])
                out.append(open_t)
                offset = start + len(open_t)
            else:
                out.append(text[offset:start])
                offset = start + len(open_t)
                expression: list[str] = []
                end = text.find(close_t, offset)
                while end > -1:
                    if end > offset and text[end - 1] == "\\":
                        expression.append(text[offset : end - 1])
                        expression.append(close_t)
                        offset = end + len(close_t)
                        end = text.find(close_t, offset)
                    else:
                        expression.append(text[offset:end])
                        break
                if end == -1:
                    out.append(text[start:])
                    offset = len(text)
                else:
                    out.append(self.handler("".join(expression)))
                    offset = end + len(close_t)
            start = text.find(open_t, offset)
        out.append(text[offset:])
        return "".join(out)


def substitute_variables(text: str, variables: Mapping[str, Any]) -> str:
    """Replace ``${name}`` with ``str(variables[name])``; unknown names are left as-is."""

    def _handle(name: str) -> str:
        key = name.strip()
        if key in variables:
            return str(variables[key])
        return "${" + name + "}"

    return TokenParser("${", "}", _handle).parse(text)
