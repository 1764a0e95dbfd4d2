"""Access to the identity carried in a verified JWT."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


class TokenError(Exception):
    """Raised when no usable identity is available."""


@dataclass
class Payload:
    """Identity fields carried in a token."""

    id: str = ""
    name: str = ""
    owner: str = ""
    type: str = ""
    claims: Mapping[str, Any] | None = None


def _format_claim(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


def extract_payload(user: object) -> Payload:
    """Build a Payload from the claims the JWT middleware attached to a request."""
    if user is None:
        raise TokenError("invalid token")
    if isinstance(user, Payload):
        return user
    if not isinstance(user, Mapping):
        raise TokenError("invalid claims type")
    return Payload(
        id=_format_claim(user.get("id")),
        name=_format_claim(user.get("name")),
        owner=_format_claim(user.get("owner")),
        type=_format_claim(user.get("type")),
    )