"""
User Model - Accounts behind the session provider.

The user id is an opaque string; it doubles as the profile id and appears in
public profile links, so it is random rather than sequential.
"""
from sqlalchemy import Column, String, DateTime, func
import uuid
from ..database import Base

def generate_user_id() -> str:
    """Random opaque identifier for a new account"""
    return uuid.uuid4().hex

class User(Base):
    """
    User Model - Stores sign-in credentials

    Fields:
    - id: Opaque identity, also the key of the user's profile row
    - email: Sign-in email address
    - password_hash: argon2 hash of the password
    - created_at: When the account was created
    """
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=generate_user_id)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        """String representation of the User model"""
        return f"<User(id={self.id}, email='{self.email}')>"
