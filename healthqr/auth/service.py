"""
Authentication service layer - the session provider.

The rest of the application only talks to the provider through four
operations: sign in, read the current session, subscribe to sign-in /
sign-out transitions, and sign out.
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
from sqlalchemy.orm import Session as DBSession
from sqlalchemy.exc import IntegrityError

from ..core.security import hash_password, verify_password, create_access_token, verify_token
from .models import User
from .exceptions import InvalidCredentialsException, EmailAlreadyExistsException

# Set up logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """The authenticated principal. ``user_id`` is also the profile id."""
    user_id: str
    email: str


@dataclass(frozen=True)
class Session:
    """A signed-in identity together with the token that carries it."""
    identity: Identity
    access_token: str
    token_id: str
    expires_at: float = 0.0


AuthListener = Callable[[Optional[Identity]], None]


class Subscription:
    """Handle returned by :meth:`SessionProvider.subscribe`."""

    def __init__(self, provider: "SessionProvider", listener: AuthListener):
        self._provider = provider
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        """Stop receiving auth transitions. Safe to call more than once."""
        if self.active:
            self._provider._remove_listener(self._listener)
            self.active = False


class SessionProvider:
    """
    Issues and validates sessions and notifies listeners of transitions.

    Sessions are stateless JWTs; sign-out revokes the token id in this
    process so the same token stops resolving to a session. A revoked id is
    kept only until its token expires.
    """

    def __init__(self):
        self._listeners: List[AuthListener] = []
        self._revoked: Dict[str, float] = {}

    def sign_up(self, db: DBSession, email: str, password: str) -> User:
        """
        Create a new account.

        Raises:
            EmailAlreadyExistsException: If the email is already registered
        """
        email = email.strip().lower()
        if db.query(User).filter(User.email == email).first():
            logger.warning(f"Sign-up failed: {email} already registered")
            raise EmailAlreadyExistsException()

        user = User(email=email, password_hash=hash_password(password))
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise EmailAlreadyExistsException()
        db.refresh(user)

        logger.info(f"Sign-up successful: User {user.id} ({email})")
        return user

    def sign_in(self, db: DBSession, email: str, password: str) -> Session:
        """
        Authenticate a user, issue a session token and notify listeners.

        Raises:
            InvalidCredentialsException: If credentials are invalid
        """
        email = email.strip().lower()
        user = db.query(User).filter(User.email == email).first()

        if not user or not verify_password(password, user.password_hash):
            logger.warning(f"Login failed: Invalid credentials for {email}")
            raise InvalidCredentialsException()

        token = create_access_token({"sub": user.id, "email": user.email})
        session = self.get_session(token)

        logger.info(f"Login successful: User {user.id} ({email})")
        self._notify(session.identity)
        return session

    def get_session(self, token: Optional[str]) -> Optional[Session]:
        """
        Resolve a token to a session.

        Returns:
            The session, or None when the token is missing, invalid,
            expired or revoked
        """
        if not token:
            return None

        payload = verify_token(token)
        if not payload:
            return None

        user_id = payload.get("sub")
        token_id = payload.get("jti")
        if not user_id or not token_id or token_id in self._revoked:
            return None

        return Session(
            identity=Identity(user_id=user_id, email=payload.get("email", "")),
            access_token=token,
            token_id=token_id,
            expires_at=float(payload.get("exp", 0)),
        )

    def subscribe(self, listener: AuthListener) -> Subscription:
        """
        Register a listener for auth transitions.

        The listener receives the new identity on sign-in and None on
        sign-out. Callers must unsubscribe on teardown.
        """
        self._listeners.append(listener)
        return Subscription(self, listener)

    def sign_out(self, session: Optional[Session]) -> None:
        """
        Revoke the session and notify listeners. Never raises.

        Signing out without a session is not a transition; nothing is revoked
        and no listener is called.
        """
        self._prune_revoked()
        if session is None:
            return

        self._revoked[session.token_id] = session.expires_at
        logger.info(f"Logout: User {session.identity.user_id}")
        self._notify(None)

    def _prune_revoked(self) -> None:
        # An expired token never verifies
        now = time.time()
        expired = [token_id for token_id, expires_at in self._revoked.items() if expires_at <= now]
        for token_id in expired:
            del self._revoked[token_id]

    def _remove_listener(self, listener: AuthListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, identity: Optional[Identity]) -> None:
        for listener in list(self._listeners):
            try:
                listener(identity)
            except Exception as e:
                logger.error(f"Auth listener failed: {str(e)}")


# Process-wide provider shared by the routers
session_provider = SessionProvider()
