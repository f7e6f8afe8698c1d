from app.utils.security import (
    generate_session_token,
    hash_password,
    mask_email,
    session_key,
    user_id_from_email,
    verify_password,
)


def test_user_id_is_stable_and_alphanumeric():
    a = user_id_from_email("NGO@Example.com ")
    b = user_id_from_email("ngo@example.com")
    assert a == b
    assert a.isalnum()


def test_password_hash_roundtrip():
    hashed = hash_password("123456")
    assert hashed != "123456"
    assert hashed.startswith("$2")
    assert verify_password("123456", hashed)
    assert not verify_password("1234567", hashed)
    assert not verify_password("123456", None)


def test_same_password_hashes_differently():
    first = hash_password("123456")
    second = hash_password("123456")
    assert first != second
    assert verify_password("123456", first)
    assert verify_password("123456", second)


def test_unrecognised_hash_is_rejected():
    assert not verify_password("123456", "8d969eef6ecad3c29a3a629280e686cf0c3f5d5a86aff3ca12020c923adc6c92")


def test_session_tokens():
    token = generate_session_token()
    assert token != generate_session_token()
    assert session_key(token) != token
    assert len(session_key(token)) == 64


def test_mask_email():
    assert mask_email("jane.doe@example.com") == "ja***@example.com"
    assert mask_email("not-an-email") == "not-an-email"
    assert mask_email(None) is None
