"""JWT white-list matching and RSA public key loading."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa


def new_whitelist_matcher(whitelist: Iterable[str] | None = None) -> Callable[[str], bool]:
    """Return a matcher that says whether an operation needs a JWT."""
    allowed = frozenset(whitelist or ())

    def matches(operation: str) -> bool:
        return operation not in allowed

    return matches


def parse_rsa_public_key_from_pem(pem_bytes: bytes | str) -> rsa.RSAPublicKey:
    """Load an RSA public key from a PEM public key or certificate."""
    data = pem_bytes.encode() if isinstance(pem_bytes, str) else bytes(pem_bytes)
    try:
        key = serialization.load_pem_public_key(data)
    except (ValueError, UnsupportedAlgorithm):
        try:
            key = x509.load_pem_x509_certificate(data).public_key()
        except (ValueError, UnsupportedAlgorithm) as exc:
            raise ValueError(f"failed to parse RSA public key: {exc}") from exc
    if not isinstance(key, rsa.RSAPublicKey):
        raise ValueError("failed to parse RSA public key: key is not a valid RSA public key")
    return key


def init_jwt_key(certificate: bytes | str) -> rsa.RSAPublicKey:
    """Load the JWT verification key, failing hard if it is unusable."""
    try:
        return parse_rsa_public_key_from_pem(certificate)
    except ValueError as exc:
        raise RuntimeError("failed to parse public key") from exc