"""
Audit hash service.

Builds the public digest that binds a round's entropy, timing and weights:

    sha256(serverSalt | entropyHex | minuteBoundaryIso | w0,w1,...,w9)

Field order and the "|" / "," separators are fixed. Entropy and weights are
both published after the round, so anyone holding the server salt can
recompute the hash and confirm the digit was not altered afterwards.
"""
import hashlib
import hmac
import secrets
from typing import Sequence

FIELD_SEPARATOR = "|"
WEIGHT_SEPARATOR = ","
SALT_BYTES = 8


def generate_server_salt() -> str:
    """Random, non-secret salt created once per process (16 hex chars)."""
    return secrets.token_hex(SALT_BYTES)


def build_audit_message(
    server_salt: str,
    entropy_hex: str,
    minute_boundary_iso: str,
    weights: Sequence[int],
) -> str:
    return FIELD_SEPARATOR.join([
        server_salt,
        entropy_hex,
        minute_boundary_iso,
        WEIGHT_SEPARATOR.join(str(w) for w in weights),
    ])


def compute_public_hash(
    server_salt: str,
    entropy_hex: str,
    minute_boundary_iso: str,
    weights: Sequence[int],
) -> str:
    """Return the lowercase hex SHA-256 digest of the audit message."""
    message = build_audit_message(server_salt, entropy_hex, minute_boundary_iso, weights)
    return hashlib.sha256(message.encode("utf-8")).hexdigest()


def verify_public_hash(
    expected_hash: str,
    server_salt: str,
    entropy_hex: str,
    minute_boundary_iso: str,
    weights: Sequence[int],
) -> bool:
    """Recompute the digest and compare it with a published one."""
    actual = compute_public_hash(server_salt, entropy_hex, minute_boundary_iso, weights)
    return hmac.compare_digest(actual.encode("utf-8"), expected_hash.strip().lower().encode("utf-8"))
