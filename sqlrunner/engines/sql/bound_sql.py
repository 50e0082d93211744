"""
BoundSQL: final SQL text plus the parameters bound to it.

Besides the caller's parameter object it accumulates *additional* named values
produced while binding (loop variables, generated keys). Names are property
paths: ``user.id`` reads/writes nested mappings, ``items[0]`` is an indexed name.
"""

import re
from collections.abc import Sequence
from typing import Any

_INDEXED_RE = re.compile(r"^(?P<name>[^\[]+)(?:\[(?P<index>[^\]]+)\])?$")


def _first_segment(name: str) -> str:
    """``items[0].id`` -> ``items[0]``."""
    return name.split(".", 1)[0]


class BoundSQL:
    """Immutable SQL + mappings + parameter object, with mutable extra parameters."""

    def __init__(
        self,
        sql: str,
        parameter_mappings: Sequence[str] | None = None,
        parameter_object: Any = None,
    ) -> None:
        self._sql = sql
        self._parameter_mappings = list(parameter_mappings or [])
        self._parameter_object = parameter_object
        self._additional: dict[str, Any] = {}

    @property
    def sql(self) -> str:
        return self._sql

    @property
    def parameter_mappings(self) -> list[str]:
        return list(self._parameter_mappings)

    @property
    def parameter_object(self) -> Any:
        return self._parameter_object

    def has_additional_parameter(self, name: str) -> bool:
        return _first_segment(name) in self._additional

    def set_additional_parameter(self, name: str, value: Any) -> None:
        """Set *value* at *name*; intermediate dicts are created for dotted paths."""
        *parents, leaf = name.split(".")
        target = self._additional
        for part in parents:
            child = target.get(part)
            if not isinstance(child, dict):
                child = {}
                target[part] = child
            target = child
        target[leaf] = value

    def get_additional_parameter(self, name: str) -> Any:
        """Value at *name* or None. ``list[1]`` indexes into a stored sequence."""
        current: Any = self._additional
        for part in name.split("."):
            if current is None:
                return None
            current = _lookup(current, part)
        return current

    def __repr__(self) -> str:
        return f"BoundSQL({self._sql!r}, {self._parameter_mappings!r})"


def _lookup(container: Any, part: str) -> Any:
    if isinstance(container, dict) and part in container:
        return container[part]
    m = _INDEXED_RE.match(part)
    if m is None:
        return None
    name, index = m.group("name"), m.group("index")
    if isinstance(container, dict):
        value = container.get(name)
    else:
        value = getattr(container, name, None)
    if index is None or value is None:
        return value
    if isinstance(value, dict):
        return value.get(index)
    try:
        return value[int(index)]
    except (ValueError, IndexError, TypeError):
        return None
