import pytest
from itsdangerous import TimestampSigner

from blogadmin.auth.session import SessionData, SessionSigner


def test_issue_then_verify_returns_user_id():
    s = SessionSigner("secret")
    token = s.issue("abc123")
    assert s.verify(token) == SessionData(user_id="abc123")


def test_token_from_another_secret_is_rejected():
    token = SessionSigner("secret-a").issue("abc123")
    assert SessionSigner("secret-b").verify(token) is None


def test_tampered_or_truncated_tokens_are_rejected():
    s = SessionSigner("secret")
    token = s.issue("abc123")
    assert s.verify(token[:-3]) is None
    assert s.verify(token[:10]) is None
    assert s.verify("x" + token) is None
    assert s.verify("not.a.token") is None
    assert s.verify("") is None


def test_salt_separates_token_namespaces():
    token = SessionSigner("secret", salt="one").issue("abc123")
    assert SessionSigner("secret", salt="two").verify(token) is None


def test_expired_token_is_rejected(monkeypatch):
    s = SessionSigner("secret", max_age=60)
    monkeypatch.setattr(TimestampSigner, "get_timestamp", lambda self: 1_000_000)
    token = s.issue("abc123")
    assert s.verify(token) is not None

    monkeypatch.setattr(TimestampSigner, "get_timestamp", lambda self: 1_000_000 + 61)
    assert s.verify(token) is None


def test_zero_max_age_disables_expiry(monkeypatch):
    s = SessionSigner("secret", max_age=0)
    monkeypatch.setattr(TimestampSigner, "get_timestamp", lambda self: 1_000_000)
    token = s.issue("abc123")
    monkeypatch.setattr(TimestampSigner, "get_timestamp", lambda self: 9_000_000)
    assert s.verify(token) == SessionData(user_id="abc123")


def test_empty_secret_is_refused():
    with pytest.raises(ValueError):
        SessionSigner("")
