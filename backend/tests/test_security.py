import hashlib

from backend.app.security import hash_password, is_password_hash, verify_password


def test_password_hash_roundtrip():
    h = hash_password("correct horse")
    assert h.startswith("$2")
    assert is_password_hash(h)
    assert verify_password("correct horse", h) is True
    assert verify_password("wrong horse", h) is False


def test_plaintext_shaped_like_a_hash_is_hashed():
    plaintext = "$2b$12$" + "a" * 53
    h = hash_password(plaintext)
    assert h != plaintext
    assert verify_password(plaintext, h) is True


def test_non_bcrypt_stored_values_never_verify():
    digest = hashlib.sha256(b"old-secret").hexdigest()
    assert verify_password("old-secret", digest) is False
    assert verify_password("anything", "") is False
    assert verify_password("anything", None) is False
