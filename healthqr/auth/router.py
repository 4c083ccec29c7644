"""
Authentication routes - JSON surface of the session provider.
"""
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session as DBSession
from ..database import get_db
from .dependencies import get_session_provider, get_optional_session
from .schemas import UserCredentials, UserResponse, LoginResponse, SessionResponse
from .service import Session, SessionProvider

# Create API router
router = APIRouter()

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED, summary="Sign Up")
def register_route(
    credentials: UserCredentials,
    db: DBSession = Depends(get_db),
    provider: SessionProvider = Depends(get_session_provider)
):
    """
    Create a new account.

    Raises:
        EmailAlreadyExistsException: If the email is already registered
    """
    return provider.sign_up(db, credentials.email, credentials.password)

@router.post("/login", response_model=LoginResponse, summary="Sign In")
def login_route(
    credentials: UserCredentials,
    db: DBSession = Depends(get_db),
    provider: SessionProvider = Depends(get_session_provider)
):
    """
    Sign in and receive a bearer session token.

    Raises:
        InvalidCredentialsException: If credentials are invalid
    """
    session = provider.sign_in(db, credentials.email, credentials.password)
    return LoginResponse(
        access_token=session.access_token,
        user=UserResponse(id=session.identity.user_id, email=session.identity.email)
    )

@router.post("/logout", summary="Sign Out")
def logout_route(
    session: Optional[Session] = Depends(get_optional_session),
    provider: SessionProvider = Depends(get_session_provider)
):
    """
    Sign out. Always succeeds; the presented token stops resolving to a session.
    """
    provider.sign_out(session)
    return {"message": "Successfully logged out"}

@router.get("/session", response_model=SessionResponse, summary="Current Session")
def session_route(session: Optional[Session] = Depends(get_optional_session)):
    """
    Return the current session, or an unauthenticated marker.
    """
    if session is None:
        return SessionResponse(authenticated=False)
    return SessionResponse(
        authenticated=True,
        user_id=session.identity.user_id,
        email=session.identity.email
    )
