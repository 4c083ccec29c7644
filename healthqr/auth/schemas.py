"""
User Schemas - Pydantic models for sign-up, sign-in and session data.
"""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime

class UserCredentials(BaseModel):
    """
    Credentials Schema - Used for both sign-up and sign-in

    Fields:
    - email: User's email address
    - password: User's plain text password (hashed before storage)
    """
    email: EmailStr
    password: str = Field(..., min_length=6, description="Plain text password")

class UserResponse(BaseModel):
    """
    User Response Schema - Used when returning user data

    Fields:
    - id: Opaque user identity
    - email: Email address
    - created_at: When the account was created
    """
    id: str
    email: EmailStr
    created_at: Optional[datetime] = None

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True

class LoginResponse(BaseModel):
    """
    Login Response Schema - Returned after successful authentication

    Fields:
    - access_token: JWT session token
    - token_type: Type of token (always "bearer")
    - user: User information
    """
    access_token: str
    token_type: str = "bearer"
    user: UserResponse

class SessionResponse(BaseModel):
    """
    Session Response Schema - The current session, if any

    Fields:
    - authenticated: Whether a valid session is present
    - user_id: Identity of the signed-in user
    - email: Email of the signed-in user
    """
    authenticated: bool
    user_id: Optional[str] = None
    email: Optional[str] = None
