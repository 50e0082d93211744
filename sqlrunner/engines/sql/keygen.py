"""
Assign database-generated keys back onto inserted parameter objects.

After a (batch) insert the driver exposes the keys either as a result set
(``INSERT ... RETURNING id``) with one row per inserted object, or, for a
single-row insert, as ``cursor.lastrowid``.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

_log = logging.getLogger(__name__)

_COLLECTION_KEYS = ("collection", "list", "array")


class KeyGenerationError(RuntimeError):
    """Raised when generated keys cannot be read or assigned."""

    pass


def collect_targets(parameter: Any) -> list[Any]:
    """
    Objects that receive keys: the items of a list/tuple, the value under
    ``collection`` / ``list`` / ``array`` of a mapping, otherwise the parameter itself.
    """
    if isinstance(parameter, (list, tuple)):
        return list(parameter)
    if isinstance(parameter, Mapping):
        for key in _COLLECTION_KEYS:
            if key in parameter:
                return list(parameter[key])
    return [parameter]


def _set_value(target: Any, prop: str, value: Any) -> None:
    if isinstance(target, dict):
        target[prop] = value
    else:
        setattr(target, prop, value)


def assign_generated_keys(
    cursor: Any,
    key_properties: Sequence[str],
    parameter: Any,
) -> int:
    """
    Copy generated keys from *cursor* onto the targets of *parameter*.

    Columns map positionally to *key_properties*. Returns the number of
    targets updated; stops early when the cursor runs out of rows.
    """
    if not key_properties:
        return 0
    targets = collect_targets(parameter)
    try:
        if cursor.description is None:
            rowid = getattr(cursor, "lastrowid", None)
            if rowid is None or len(targets) != 1:
                return 0
            _set_value(targets[0], key_properties[0], rowid)
            return 1

        if len(cursor.description) < len(key_properties):
            return 0
        updated = 0
        for target in targets:
            row = cursor.fetchone()
            if row is None:
                break
            for prop, value in zip(key_properties, row):
                _set_value(target, prop, value)
            updated += 1
        _log.debug("Assigned generated keys %s to %d object(s)", list(key_properties), updated)
        return updated
    except Exception as e:
        raise KeyGenerationError(
            f"Error getting generated key or setting result to parameter object. Cause: {e}"
        ) from e
