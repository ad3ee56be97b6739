"""
Tagged attribute values for open-ended applicant attributes.

Applicant records carry an open mapping of extra attributes supplied by
upstream systems. Each value is wrapped with an explicit kind so consumers
branch on the tag instead of guessing from the Python type.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class ValueKind(str, Enum):
    """Kind tag of an AttributeValue."""
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    LIST = "list"
    MAP = "map"
    NULL = "null"


@dataclass(frozen=True)
class AttributeValue:
    """
    A single tagged value.

    Attributes:
        kind: Which variant this value holds
        value: The payload. Lists hold AttributeValue items, maps hold
            str -> AttributeValue. Numbers are always floats.
    """
    kind: ValueKind
    value: Any = None

    @classmethod
    def of(cls, raw: Any) -> "AttributeValue":
        """
        Wrap a plain Python/JSON value.

        bool is checked before int because bool is an int subclass.

        Raises:
            TypeError: If the value has no corresponding kind
        """
        if isinstance(raw, AttributeValue):
            return raw
        if raw is None:
            return cls(ValueKind.NULL)
        if isinstance(raw, bool):
            return cls(ValueKind.BOOLEAN, raw)
        if isinstance(raw, (int, float)):
            return cls(ValueKind.NUMBER, float(raw))
        if isinstance(raw, str):
            return cls(ValueKind.STRING, raw)
        if isinstance(raw, datetime):
            return cls(ValueKind.DATETIME, raw)
        if isinstance(raw, (list, tuple)):
            return cls(ValueKind.LIST, tuple(cls.of(item) for item in raw))
        if isinstance(raw, dict):
            return cls(ValueKind.MAP, {str(k): cls.of(v) for k, v in raw.items()})
        raise TypeError(f"Unsupported attribute value type: {type(raw).__name__}")

    @property
    def is_null(self) -> bool:
        return self.kind == ValueKind.NULL

    def to_python(self) -> Any:
        """Unwrap back to plain Python values."""
        if self.kind == ValueKind.LIST:
            return [item.to_python() for item in self.value]
        if self.kind == ValueKind.MAP:
            return {k: v.to_python() for k, v in self.value.items()}
        return self.value
