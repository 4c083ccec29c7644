"""
Request logging middleware.

Each request gets an id, a timing header and one log line on completion
naming the signed-in user, or ``anonymous``.
"""
import time
import uuid
import logging
from fastapi import Request
from fastapi.security.utils import get_authorization_scheme_param
from starlette.middleware.base import BaseHTTPMiddleware

from ..auth.service import session_provider
from ..config import settings

# Set up logging
logger = logging.getLogger(__name__)

ANONYMOUS = "anonymous"

def session_user(request: Request) -> str:
    """
    User id of the session carried by the request, from the bearer header or the session cookie
    """
    scheme, token = get_authorization_scheme_param(request.headers.get("Authorization"))
    if scheme.lower() != "bearer":
        token = request.cookies.get(settings.session_cookie_name)
    session = session_provider.get_session(token)
    return session.identity.user_id if session else ANONYMOUS

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tags responses with ``X-Request-ID`` and ``X-Process-Time`` and logs the outcome per user.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = uuid.uuid4().hex
        user = session_user(request)
        request.state.request_id = request_id
        request.state.session_user = user

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"[{request_id}] {request.method} {request.url.path} user={user} "
                f"failed after {time.perf_counter() - started:.4f}s: {str(e)}"
            )
            raise

        elapsed = time.perf_counter() - started
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.info(
            f"[{request_id}] {request.method} {request.url.path} user={user} "
            f"-> {response.status_code} in {elapsed:.4f}s"
        )
        return response

def setup_middlewares(app):
    """
    Add the custom middlewares to the application.
    """
    app.add_middleware(RequestLoggingMiddleware)
