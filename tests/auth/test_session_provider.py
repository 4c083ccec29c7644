"""
Tests for the session provider: sign-up, sign-in, sessions, listeners and sign-out.
"""
import time
from datetime import timedelta

import pytest

from healthqr.auth.exceptions import EmailAlreadyExistsException, InvalidCredentialsException
from healthqr.auth.models import User
from healthqr.auth.service import Identity, Session
from healthqr.core.security import create_access_token, hash_password


def test_sign_up_normalizes_email(db, provider):
    """
    Test that sign-up stores a lowercased email and a hashed password.
    """
    user = provider.sign_up(db, "  Jane@Example.COM ", "Password123!")
    assert user.email == "jane@example.com"
    assert user.password_hash != "Password123!"
    assert len(user.id) == 32


def test_sign_up_duplicate_email(db, provider):
    """
    Test that registering the same email twice fails.
    """
    provider.sign_up(db, "jane@example.com", "Password123!")
    with pytest.raises(EmailAlreadyExistsException):
        provider.sign_up(db, "JANE@example.com", "another-password")


def test_sign_in_returns_resolvable_session(db, provider):
    """
    Test that the token issued at sign-in resolves back to the same identity.
    """
    user = provider.sign_up(db, "jane@example.com", "Password123!")
    session = provider.sign_in(db, "jane@example.com", "Password123!")

    assert session.identity == Identity(user_id=user.id, email="jane@example.com")
    resolved = provider.get_session(session.access_token)
    assert resolved is not None
    assert resolved.identity == session.identity


def test_sign_in_wrong_password(db, provider):
    """
    Test that a wrong password is rejected.
    """
    provider.sign_up(db, "jane@example.com", "Password123!")
    with pytest.raises(InvalidCredentialsException) as exc_info:
        provider.sign_in(db, "jane@example.com", "wrong-password")
    assert exc_info.value.status_code == 401


def test_sign_in_unknown_email(db, provider):
    with pytest.raises(InvalidCredentialsException):
        provider.sign_in(db, "nobody@example.com", "Password123!")


@pytest.mark.parametrize("token", [None, "", "not-a-jwt"])
def test_get_session_rejects_missing_or_malformed_tokens(provider, token):
    assert provider.get_session(token) is None


def test_get_session_rejects_expired_token(provider):
    """
    Test that an expired token no longer resolves to a session.
    """
    token = create_access_token({"sub": "u1", "email": "u1@example.com"}, timedelta(minutes=-1))
    assert provider.get_session(token) is None


def test_sign_out_revokes_session(db, provider):
    """
    Test that a token stops resolving once its session is signed out.
    """
    provider.sign_up(db, "jane@example.com", "Password123!")
    session = provider.sign_in(db, "jane@example.com", "Password123!")

    provider.sign_out(session)

    assert provider.get_session(session.access_token) is None


def test_sign_out_without_session(provider):
    """
    Test that signing out with no session neither raises nor notifies listeners.
    """
    events = []
    provider.subscribe(events.append)

    provider.sign_out(None)

    assert events == []


def test_sign_out_forgets_expired_revocations(db, provider):
    """
    Test that ids of tokens past their expiry are dropped from the revocation list.
    """
    identity = Identity(user_id="u1", email="u1@example.com")
    provider.sign_out(Session(identity, "old-token", "old-jti", expires_at=time.time() - 60))
    assert "old-jti" in provider._revoked

    provider.sign_up(db, "jane@example.com", "Password123!")
    session = provider.sign_in(db, "jane@example.com", "Password123!")
    provider.sign_out(session)

    assert "old-jti" not in provider._revoked
    assert provider._revoked[session.token_id] == session.expires_at
    assert session.expires_at > time.time()
    assert provider.get_session(session.access_token) is None


def test_listeners_receive_transitions(db, provider):
    """
    Test that subscribers see the identity on sign-in and None on sign-out.
    """
    provider.sign_up(db, "jane@example.com", "Password123!")
    events = []
    provider.subscribe(events.append)

    session = provider.sign_in(db, "jane@example.com", "Password123!")
    provider.sign_out(session)

    assert events == [session.identity, None]


def test_unsubscribe_stops_notifications(db, provider):
    """
    Test that an unsubscribed listener receives nothing further.
    """
    provider.sign_up(db, "jane@example.com", "Password123!")
    events = []
    subscription = provider.subscribe(events.append)

    subscription.unsubscribe()
    subscription.unsubscribe()
    provider.sign_in(db, "jane@example.com", "Password123!")

    assert events == []
    assert subscription.active is False


def test_failing_listener_does_not_block_others(db, provider):
    """
    Test that one broken listener does not stop delivery to the rest.
    """
    db.add(User(id="u1", email="u1@example.com", password_hash=hash_password("Password123!")))
    db.commit()

    def broken(identity):
        raise RuntimeError("listener failed")

    events = []
    provider.subscribe(broken)
    provider.subscribe(events.append)

    provider.sign_in(db, "u1@example.com", "Password123!")

    assert events == [Identity(user_id="u1", email="u1@example.com")]
