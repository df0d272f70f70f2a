import base64

import pytest

from src.app.verification import CodeHasher


def test_hash_is_deterministic_base64_sha256():
    hasher = CodeHasher("secret")
    first = hasher.hash("user@example.com", "123456")
    second = hasher.hash("user@example.com", "123456")

    assert first == second
    assert len(base64.b64decode(first)) == 32


def test_hash_is_bound_to_identity():
    hasher = CodeHasher("secret")
    assert hasher.hash("a@example.com", "123456") != hasher.hash("b@example.com", "123456")


def test_hash_depends_on_secret():
    assert CodeHasher("one").hash("a@example.com", "123456") != CodeHasher("two").hash(
        "a@example.com", "123456"
    )


def test_hash_does_not_contain_code():
    digest = CodeHasher("secret").hash("a@example.com", "987654")
    assert "987654" not in digest


def test_equals():
    hasher = CodeHasher("secret")
    stored = hasher.hash("a@example.com", "123456")

    assert CodeHasher.equals(stored, hasher.hash("a@example.com", "123456"))
    assert not CodeHasher.equals(stored, hasher.hash("a@example.com", "654321"))


@pytest.mark.parametrize("secret", ["", "   ", None])
def test_missing_secret_is_rejected(secret):
    with pytest.raises(ValueError, match="OTP_SECRET"):
        CodeHasher(secret)
