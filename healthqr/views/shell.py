"""
App shell - maps a path and the current identity to the view to render.

The shell reads the session once when it is created, then follows sign-in
and sign-out transitions through a provider subscription until closed.
"""
from dataclasses import dataclass
from typing import Optional

from ..auth.service import Identity, SessionProvider

SIGN_IN = "sign_in"
EDITOR = "editor"
PUBLIC_PROFILE = "public_profile"
REDIRECT = "redirect"

PROFILE_PREFIX = "/profile/"

@dataclass(frozen=True)
class RouteView:
    """
    The view a path resolves to.

    Fields:
    - name: sign_in, editor, public_profile or redirect
    - identity: Signed-in identity for the editor view
    - profile_id: Requested id for the public viewer
    - location: Redirect target
    """
    name: str
    identity: Optional[Identity] = None
    profile_id: Optional[str] = None
    location: Optional[str] = None

def resolve_route(path: str, identity: Optional[Identity]) -> RouteView:
    """
    Resolve ``path`` for the given identity.

    ``/`` shows the editor and QR code to a signed-in user and the sign-in
    form to everyone else. ``/profile/<id>`` is the public viewer and needs
    no session. Anything else redirects to ``/``.
    """
    path = path or "/"
    if path == "/":
        if identity is None:
            return RouteView(SIGN_IN)
        return RouteView(EDITOR, identity=identity)

    if path.startswith(PROFILE_PREFIX):
        profile_id = path[len(PROFILE_PREFIX):].strip("/")
        if profile_id and "/" not in profile_id:
            return RouteView(PUBLIC_PROFILE, profile_id=profile_id)

    return RouteView(REDIRECT, location="/")

class AppShell:
    """
    Tracks the current identity for one long-lived client context.

    Every sign-in and sign-out on the provider reaches the shell, so a shell
    belongs to a single user context. HTTP routes resolve each request with
    :func:`resolve_route` and the request's own session instead.

    Usage::

        with AppShell(provider, token) as shell:
            view = shell.resolve("/")
    """

    def __init__(self, provider: SessionProvider, token: Optional[str] = None):
        session = provider.get_session(token)
        self.identity: Optional[Identity] = session.identity if session else None
        self._subscription = provider.subscribe(self._on_auth_change)

    def _on_auth_change(self, identity: Optional[Identity]) -> None:
        self.identity = identity

    def resolve(self, path: str) -> RouteView:
        return resolve_route(path, self.identity)

    def close(self) -> None:
        """Unsubscribe from auth transitions"""
        self._subscription.unsubscribe()

    def __enter__(self) -> "AppShell":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
