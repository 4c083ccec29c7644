"""
Authentication-specific exceptions.
"""
from fastapi import HTTPException, status

class AuthException(HTTPException):
    """Base class for authentication exceptions."""
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class InvalidCredentialsException(AuthException):
    """Exception raised when credentials are invalid."""
    def __init__(self, detail: str = "Invalid login credentials"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)

class EmailAlreadyExistsException(AuthException):
    """Exception raised when email already exists."""
    def __init__(self, detail: str = "User already registered"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
