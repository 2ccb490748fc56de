"""Tests for the public audit hash."""
import hashlib

import pytest

from services.audit_service import (
    build_audit_message,
    compute_public_hash,
    generate_server_salt,
    verify_public_hash,
)

SALT = "a1b2c3d4e5f60718"
ENTROPY_HEX = "00000000000000001122334455667788"
BOUNDARY = "2026-10-19T12:01:00.000Z"
WEIGHTS = [5, 5, 5, 20, 5, 5, 5, 1, 5, 4]


class TestComputePublicHash:

    def test_message_layout(self):
        assert build_audit_message(SALT, ENTROPY_HEX, BOUNDARY, WEIGHTS) == (
            "a1b2c3d4e5f60718|00000000000000001122334455667788|"
            "2026-10-19T12:01:00.000Z|5,5,5,20,5,5,5,1,5,4"
        )

    def test_sha256_lowercase_hex(self):
        expected = hashlib.sha256(
            build_audit_message(SALT, ENTROPY_HEX, BOUNDARY, WEIGHTS).encode("utf-8")
        ).hexdigest()
        digest = compute_public_hash(SALT, ENTROPY_HEX, BOUNDARY, WEIGHTS)
        assert digest == expected
        assert len(digest) == 64
        assert digest == digest.lower()

    def test_deterministic(self):
        assert compute_public_hash(SALT, ENTROPY_HEX, BOUNDARY, WEIGHTS) == \
            compute_public_hash(SALT, ENTROPY_HEX, BOUNDARY, list(WEIGHTS))

    @pytest.mark.parametrize("field, value", [
        ("salt", "ffffffffffffffff"),
        ("entropy_hex", "00000000000000011122334455667788"),
        ("boundary", "2026-10-19T12:02:00.000Z"),
        ("weights", [5, 5, 5, 20, 5, 5, 5, 2, 5, 4]),
    ])
    def test_any_field_change_changes_hash(self, field, value):
        args = {"salt": SALT, "entropy_hex": ENTROPY_HEX, "boundary": BOUNDARY, "weights": WEIGHTS}
        baseline = compute_public_hash(args["salt"], args["entropy_hex"], args["boundary"], args["weights"])
        args[field] = value
        changed = compute_public_hash(args["salt"], args["entropy_hex"], args["boundary"], args["weights"])
        assert changed != baseline


class TestVerifyPublicHash:

    def test_roundtrip(self):
        digest = compute_public_hash(SALT, ENTROPY_HEX, BOUNDARY, WEIGHTS)
        assert verify_public_hash(digest, SALT, ENTROPY_HEX, BOUNDARY, WEIGHTS)
        assert verify_public_hash(digest.upper(), SALT, ENTROPY_HEX, BOUNDARY, WEIGHTS)

    def test_tampered_weights(self):
        digest = compute_public_hash(SALT, ENTROPY_HEX, BOUNDARY, WEIGHTS)
        assert not verify_public_hash(digest, SALT, ENTROPY_HEX, BOUNDARY, [1] * 10)

    def test_non_hex_input(self):
        assert not verify_public_hash("не hash", SALT, ENTROPY_HEX, BOUNDARY, WEIGHTS)


def test_server_salt_is_random_hex():
    salt = generate_server_salt()
    assert len(salt) == 16
    int(salt, 16)
    assert generate_server_salt() != salt
