"""A UUID value that round-trips through databases and JSON, with a nil state."""

from __future__ import annotations

import json
import uuid as _uuid
from dataclasses import dataclass, field

_NIL = _uuid.UUID(int=0)


def _parse(text: str) -> _uuid.UUID:
    try:
        return _uuid.UUID(text)
    except (ValueError, TypeError, AttributeError) as exc:
        raise ValueError(f"invalid UUID format: {text}") from exc


@dataclass
class UUID:
    """A UUID that may be nil; the nil UUID stores as NULL."""

    uuid: _uuid.UUID = field(default=_NIL)

    def is_nil(self) -> bool:
        """True when this is the all-zero UUID."""
        return self.uuid == _NIL

    def scan(self, value: object) -> None:
        """Load from a database value: None, 16 raw bytes or a string."""
        if value is None:
            self.uuid = _NIL
        elif isinstance(value, (bytes, bytearray, memoryview)):
            raw = bytes(value)
            if len(raw) != 16:
                raise ValueError(f"invalid UUID (got {len(raw)} bytes)")
            self.uuid = _uuid.UUID(bytes=raw)
        elif isinstance(value, str):
            self.uuid = _parse(value)
        else:
            raise TypeError(f"cannot scan UUID from type {type(value).__name__}")

    def value(self) -> str | None:
        """The database value: None for nil, otherwise the canonical string."""
        return None if self.is_nil() else str(self.uuid)

    def to_json(self) -> str:
        """JSON text: ``null`` for nil, otherwise a quoted string."""
        return json.dumps(None if self.is_nil() else str(self.uuid))

    def load_json(self, data: str | bytes) -> None:
        """Load from JSON text; ``null`` and the empty string give nil."""
        text = data.decode() if isinstance(data, (bytes, bytearray)) else data
        text = text.strip('"')
        if text in ("null", ""):
            self.uuid = _NIL
            return
        self.uuid = _parse(text)

    def __str__(self) -> str:
        return str(self.uuid)


@dataclass
class NullUUID:
    """A UUID column that may hold NULL."""

    uuid: UUID | None = None
    valid: bool = False

    def scan(self, value: object) -> None:
        """Load from a database value; None marks the value invalid."""
        if value is None:
            self.uuid = None
            self.valid = False
            return
        self.valid = True
        if self.uuid is None:
            self.uuid = new_uuid()
        self.uuid.scan(value)

    def value(self) -> str | None:
        """The database value, or None when not valid."""
        if not self.valid or self.uuid is None:
            return None
        return self.uuid.value()


def parse_uuid(s: str) -> UUID:
    """Parse a UUID from text, raising ValueError on a bad format."""
    return UUID(_parse(s))


def new_uuid() -> UUID:
    """Generate a random UUID."""
    return UUID(_uuid.uuid4())