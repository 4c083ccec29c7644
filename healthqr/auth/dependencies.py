"""
FastAPI dependencies for authentication.

The session is read once at the request boundary, from the bearer header
or the session cookie, and handed to the route as an explicit Identity.
"""
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from ..config import settings
from ..exceptions import AuthenticationError
from .service import Identity, Session, SessionProvider, session_provider

# OAuth2 scheme for JWT token authentication; optional so cookies also work
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)

def get_session_provider() -> SessionProvider:
    """Return the process-wide session provider"""
    return session_provider

def get_optional_session(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    provider: SessionProvider = Depends(get_session_provider)
) -> Optional[Session]:
    """
    Get the current session, if any.

    Args:
        request: Incoming request, used for the session cookie
        token: Bearer token from the Authorization header
        provider: Session provider

    Returns:
        Session or None
    """
    token = token or request.cookies.get(settings.session_cookie_name)
    return provider.get_session(token)

def get_current_identity(session: Optional[Session] = Depends(get_optional_session)) -> Identity:
    """
    Identity of the signed-in user.

    Raises:
        AuthenticationError: If no valid session is present
    """
    if session is None:
        raise AuthenticationError("Invalid or expired session")
    return session.identity
