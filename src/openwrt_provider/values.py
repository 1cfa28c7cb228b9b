"""Tri-state configuration values.

Caller-supplied configuration can be in one of three states:

- Unknown: not resolvable yet (depends on something the engine has not applied)
- Null: explicitly absent
- Known: a concrete value

Raw input uses ``None`` for null and the ``UNKNOWN`` sentinel for unknown.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ValueState(str, Enum):
    """Resolution state of a configuration value."""
    UNKNOWN = "unknown"
    NULL = "null"
    KNOWN = "known"


class _UnknownSentinel:
    """Marker for raw input that cannot be resolved yet."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNKNOWN"

    def __reduce__(self):
        return (_UnknownSentinel, ())


UNKNOWN = _UnknownSentinel()


@dataclass(frozen=True)
class Value:
    """A configuration or state value that may be unknown or null."""
    state: ValueState
    value: Any = None

    @classmethod
    def unknown(cls) -> "Value":
        return cls(ValueState.UNKNOWN)

    @classmethod
    def null(cls) -> "Value":
        return cls(ValueState.NULL)

    @classmethod
    def known(cls, value: Any) -> "Value":
        if value is None or value is UNKNOWN:
            raise ValueError("Value.known() requires a concrete value")
        return cls(ValueState.KNOWN, value)

    @classmethod
    def from_raw(cls, raw: Any) -> "Value":
        """Wrap raw input: UNKNOWN -> unknown, None -> null, else known."""
        if isinstance(raw, Value):
            return raw
        if raw is UNKNOWN:
            return cls.unknown()
        if raw is None:
            return cls.null()
        return cls(ValueState.KNOWN, raw)

    @property
    def is_unknown(self) -> bool:
        return self.state == ValueState.UNKNOWN

    @property
    def is_null(self) -> bool:
        return self.state == ValueState.NULL

    @property
    def is_known(self) -> bool:
        return self.state == ValueState.KNOWN

    def value_or(self, default: Any) -> Any:
        """Return the concrete value, or ``default`` when unknown or null."""
        return self.value if self.is_known else default

    def to_raw(self) -> Any:
        if self.is_unknown:
            return UNKNOWN
        return self.value

    def __repr__(self) -> str:
        if self.is_known:
            return f"Value({self.value!r})"
        return f"Value.{self.state.value}()"
