"""
Field type registry for task filters.

Every filterable task field maps to a ``FieldType``: a coercion strategy that
turns a parsed client value into an operator descriptor, or ``None`` when the
value is unusable and the key should be dropped. Fields are matched by exact
name first, then by prefix (custom columns are named ``text1``, ``select3``...).

Descriptors use three operators::

    {"equals": value}
    {"contains": value, "mode": "insensitive"}
    {"in": [value, ...]}
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple

Descriptor = Dict[str, Any]

_FALSE_STRINGS = frozenset({"false", "0", "no", "off"})


def is_blank(value: Any) -> bool:
    """Null and empty-string values carry no filter."""
    return value is None or (isinstance(value, str) and value == "")


def _present(values: Iterable[Any]) -> List[Any]:
    return [v for v in values if not is_blank(v)]


# PUBLIC_INTERFACE
def to_number(value: Any) -> Optional[float | int]:
    """Coerce to a finite number; integral floats become ints. Returns None if invalid."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if isinstance(number, float):
        if not math.isfinite(number):
            return None
        if number.is_integer():
            return int(number)
    return number


# PUBLIC_INTERFACE
def to_bool(value: Any) -> bool:
    """Coerce to bool. The strings false/0/no/off are False; other values use truthiness."""
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


# PUBLIC_INTERFACE
def to_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a timestamp. Accepts ISO-8601 strings (a trailing Z is UTC) and epoch
    milliseconds. Naive values are taken as UTC. Returns None if invalid.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        candidate = value.strip()
        if candidate.endswith(("Z", "z")):
            candidate = candidate[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(candidate)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _contains(value: Any) -> Optional[Descriptor]:
    # Text matches on strings; finite numbers are matched by their text form.
    if not isinstance(value, str):
        number = to_number(value)
        if number is None:
            return None
        value = str(number)
    return {"contains": value, "mode": "insensitive"}


def _choice(value: Any) -> Optional[Descriptor]:
    if isinstance(value, list):
        values = _present(value)
        return {"in": values} if values else None
    return {"equals": value}


def _number(value: Any) -> Optional[Descriptor]:
    number = to_number(value)
    return None if number is None else {"equals": number}


def _boolean(value: Any) -> Optional[Descriptor]:
    return {"equals": to_bool(value)}


def _date(value: Any) -> Optional[Descriptor]:
    parsed = to_timestamp(value)
    return None if parsed is None else {"equals": parsed}


def _date_list(value: Any) -> Optional[Descriptor]:
    if not isinstance(value, list):
        return _date(value)
    dates = [d for d in (to_timestamp(v) for v in _present(value)) if d is not None]
    return {"in": dates} if dates else None


@dataclass(frozen=True)
class FieldType:
    """A filterable field kind: which keys it covers and how values are coerced."""
    name: str
    coerce: Callable[[Any], Optional[Descriptor]]
    exact: FrozenSet[str] = frozenset()
    prefixes: Tuple[str, ...] = ()

    def matches_exact(self, key: str) -> bool:
        return key in self.exact

    def matches_prefix(self, key: str) -> bool:
        return key.startswith(self.prefixes) if self.prefixes else False


TEXT = FieldType("text", _contains, exact=frozenset({"name"}), prefixes=("text",))
CHOICE = FieldType(
    "choice",
    _choice,
    exact=frozenset({"status", "priority", "members", "links"}),
    prefixes=("select",),
)
NUMBER = FieldType("number", _number, exact=frozenset({"price"}), prefixes=("number",))
BOOLEAN = FieldType("boolean", _boolean, exact=frozenset({"paid"}), prefixes=("checkbox",))
DATE = FieldType("date", _date, prefixes=("date",))
DUE_DATE = FieldType("duedate", _date_list, prefixes=("duedate",))

FIELD_TYPES: Tuple[FieldType, ...] = (TEXT, CHOICE, NUMBER, BOOLEAN, DATE, DUE_DATE)


# PUBLIC_INTERFACE
def field_type_for(key: str) -> Optional[FieldType]:
    """Return the registered FieldType for a lowercase key, or None if unrecognised."""
    for field_type in FIELD_TYPES:
        if field_type.matches_exact(key):
            return field_type
    for field_type in FIELD_TYPES:
        if field_type.matches_prefix(key):
            return field_type
    return None


# PUBLIC_INTERFACE
def normalize_predicate(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Turn a parsed filter object into a predicate.

    Keys are lowercased (a later key wins on collision), blank values are
    dropped, registered fields are coerced through their FieldType and
    unrecognised keys keep their raw value.
    """
    lowered = {str(key).lower(): value for key, value in data.items()}
    predicate: Dict[str, Any] = {}
    for key, value in lowered.items():
        if is_blank(value):
            continue
        field_type = field_type_for(key)
        if field_type is None:
            predicate[key] = value
            continue
        descriptor = field_type.coerce(value)
        if descriptor is not None:
            predicate[key] = descriptor
    return predicate
