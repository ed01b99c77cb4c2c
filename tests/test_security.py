import time

from finance_app.core.security import _parse_and_validate_session_data

from conftest import TEST_SECRET, make_session_data

USER_ID = "11111111-1111-1111-1111-111111111111"


def test_valid_session_is_accepted():
    data = make_session_data(user_id=USER_ID, email="ann@example.com", name="Ann Lee")

    claims = _parse_and_validate_session_data(data, TEST_SECRET)

    assert claims["_valid"] is True
    assert claims["user_id"] == USER_ID
    assert claims["name"] == "Ann Lee"
    assert "hash" not in claims


def test_wrong_secret_is_rejected():
    data = make_session_data(secret="another-secret", user_id=USER_ID)
    assert _parse_and_validate_session_data(data, TEST_SECRET) is None


def test_tampered_claims_are_rejected():
    data = make_session_data(user_id=USER_ID)
    tampered = data.replace("user_id=1111", "user_id=2222")
    assert _parse_and_validate_session_data(tampered, TEST_SECRET) is None


def test_expired_session_is_rejected():
    two_days_ago = int(time.time()) - 48 * 3600
    data = make_session_data(auth_date=two_days_ago, user_id=USER_ID)

    assert _parse_and_validate_session_data(data, TEST_SECRET, expiration_hours=24) is None
    assert _parse_and_validate_session_data(data, TEST_SECRET, expiration_hours=72) is not None


def test_missing_hash_or_user_is_rejected():
    without_hash = "user_id=%s&auth_date=%d" % (USER_ID, int(time.time()))
    assert _parse_and_validate_session_data(without_hash, TEST_SECRET) is None
    assert _parse_and_validate_session_data(make_session_data(email="x@example.com"), TEST_SECRET) is None


def test_malformed_data_is_rejected():
    assert _parse_and_validate_session_data("garbage", TEST_SECRET) is None
    assert _parse_and_validate_session_data("", TEST_SECRET) is None
    bad_date = make_session_data(auth_date=0, user_id=USER_ID).replace("auth_date=0", "auth_date=soon")
    assert _parse_and_validate_session_data(bad_date, TEST_SECRET) is None
