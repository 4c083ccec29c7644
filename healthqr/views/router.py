"""
HTML views - sign-in page, profile editor with QR code, public viewer.

The editor is a plain HTML form. Each button posts the whole draft back
with an ``action`` naming one form operation; the page is re-rendered from
the updated draft, so the posted form is the draft of one open editor.
"""
from pathlib import Path
from typing import Optional
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from sqlalchemy.orm import Session as DBSession
import logging

from ..auth.dependencies import get_session_provider, get_optional_session
from ..auth.exceptions import AuthException
from ..auth.schemas import UserCredentials
from ..auth.service import Identity, Session, SessionProvider
from ..config import settings
from ..database import get_db
from ..exceptions import ProfileValidationError
from ..profiles.form import ProfileForm
from ..profiles.schemas import BloodGroup, ContactDraft, ProfileDraft
from ..profiles.store import ProfileStore, get_profile_store
from ..profiles.viewer import fetch_public_profile, negotiate_locale
from ..qr.router import request_origin
from ..qr.service import generate_profile_qr, resolve_origin
from .shell import EDITOR, PUBLIC_PROFILE, resolve_route

# Set up logging
logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

router = APIRouter()

BLOOD_GROUPS = [group.value for group in BloodGroup]

def _render_sign_in(request: Request, error: Optional[str] = None, status_code: int = status.HTTP_200_OK):
    return templates.TemplateResponse(
        request, "sign_in.html", {"error": error}, status_code=status_code
    )

def _render_editor(request: Request, form: ProfileForm, identity: Optional[Identity], status_code: int = status.HTTP_200_OK):
    qr = None
    if identity is not None:
        qr = generate_profile_qr(resolve_origin(request_origin(request)), identity.user_id)
    return templates.TemplateResponse(
        request,
        "editor.html",
        {
            "form": form,
            "draft": form.draft,
            "identity": identity,
            "qr": qr,
            "blood_groups": BLOOD_GROUPS,
        },
        status_code=status_code,
    )

def _redirect_home() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)

def _identity(session: Optional[Session]) -> Optional[Identity]:
    return session.identity if session else None

@router.get("/")
def home(
    request: Request,
    session: Optional[Session] = Depends(get_optional_session),
    store: ProfileStore = Depends(get_profile_store)
):
    """
    Editor and QR code for a signed-in user; sign-in form otherwise

    The view is resolved from this request's own session only, never from
    sign-in events of other requests.
    """
    view = resolve_route("/", _identity(session))

    if view.name != EDITOR:
        return _render_sign_in(request)

    form = ProfileForm()
    form.load(store, view.identity)
    return _render_editor(request, form, view.identity)

@router.post("/")
async def edit_profile(
    request: Request,
    session: Optional[Session] = Depends(get_optional_session),
    store: ProfileStore = Depends(get_profile_store)
):
    """
    Apply one editor action to the posted draft and re-render

    Without a session nothing is applied and the sign-in form is shown.
    """
    identity = _identity(session)
    if identity is None:
        logger.info("Editor post without a session; showing sign-in")
        return _render_sign_in(request, "No user logged in", status.HTTP_401_UNAUTHORIZED)

    data = await request.form()
    form = form_from_post(data)
    action = data.get("action", "")

    if action == "save":
        try:
            form.submit(store, identity)
        except ProfileValidationError:
            return _render_editor(request, form, identity, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)
        if form.error:
            return _render_editor(request, form, identity, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    else:
        apply_action(form, action)

    return _render_editor(request, form, identity)

@router.post("/sign-in")
async def sign_in(
    request: Request,
    db: DBSession = Depends(get_db),
    provider: SessionProvider = Depends(get_session_provider)
):
    """
    Sign in from the HTML form and store the session cookie
    """
    data = await request.form()
    try:
        credentials = UserCredentials(email=data.get("email", ""), password=data.get("password", ""))
        session = provider.sign_in(db, credentials.email, credentials.password)
    except ValidationError:
        return _render_sign_in(request, "Enter a valid email and a password of at least 6 characters", status.HTTP_400_BAD_REQUEST)
    except AuthException as e:
        return _render_sign_in(request, e.detail, e.status_code)

    response = _redirect_home()
    response.set_cookie(
        settings.session_cookie_name,
        session.access_token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        samesite="lax",
    )
    return response

@router.post("/sign-up")
async def sign_up(
    request: Request,
    db: DBSession = Depends(get_db),
    provider: SessionProvider = Depends(get_session_provider)
):
    """
    Create an account from the HTML form, then sign in
    """
    data = await request.form()
    try:
        credentials = UserCredentials(email=data.get("email", ""), password=data.get("password", ""))
        provider.sign_up(db, credentials.email, credentials.password)
    except ValidationError:
        return _render_sign_in(request, "Enter a valid email and a password of at least 6 characters", status.HTTP_400_BAD_REQUEST)
    except AuthException as e:
        return _render_sign_in(request, e.detail, e.status_code)

    return await sign_in(request, db, provider)

@router.post("/sign-out")
def sign_out(
    session: Optional[Session] = Depends(get_optional_session),
    provider: SessionProvider = Depends(get_session_provider)
):
    """
    Sign out and clear the session cookie
    """
    provider.sign_out(session)
    response = _redirect_home()
    response.delete_cookie(settings.session_cookie_name)
    return response

@router.get("/profile/{profile_id}")
def public_profile(
    profile_id: str,
    request: Request,
    store: ProfileStore = Depends(get_profile_store)
):
    """
    Read-only public view of one profile; no session needed
    """
    view = fetch_public_profile(store, profile_id)
    if not view.found:
        return templates.TemplateResponse(
            request, "not_found.html", {"error": view.error}, status_code=status.HTTP_404_NOT_FOUND
        )

    locale = negotiate_locale(request.headers.get("accept-language"))
    return templates.TemplateResponse(request, "public_profile.html", {"profile": view.display(locale)})

@router.get("/{path:path}")
def fallback(path: str, session: Optional[Session] = Depends(get_optional_session)):
    """
    Unmatched paths go back to the root view
    """
    view = resolve_route("/" + path, _identity(session))
    if view.name == PUBLIC_PROFILE:
        return RedirectResponse(url=f"/profile/{view.profile_id}", status_code=status.HTTP_307_TEMPORARY_REDIRECT)
    return RedirectResponse(url=view.location or "/", status_code=status.HTTP_307_TEMPORARY_REDIRECT)

def form_from_post(data) -> ProfileForm:
    """
    Rebuild an editor from posted form data.

    Contacts arrive as parallel ``contact_name`` / ``contact_relationship`` /
    ``contact_phone`` lists in display order.
    """
    names = data.getlist("contact_name")
    relationships = data.getlist("contact_relationship")
    phones = data.getlist("contact_phone")
    contacts = [
        ContactDraft(name=name, relationship=relationship, phone=phone)
        for name, relationship, phone in zip(names, relationships, phones)
    ]

    draft = ProfileDraft(
        full_name=data.get("full_name", ""),
        date_of_birth=data.get("date_of_birth", ""),
        blood_group=data.get("blood_group", ""),
        blood_pressure=data.get("blood_pressure", ""),
        sugar_level=data.get("sugar_level", ""),
        medical_condition_details=data.get("medical_condition_details", ""),
        medical_conditions=data.getlist("medical_conditions"),
        allergies=data.getlist("allergies"),
        medications=data.getlist("medications"),
        emergency_contacts=contacts,
    )
    form = ProfileForm(draft)
    form.pending_allergy = data.get("pending_allergy", "")
    form.pending_medication = data.get("pending_medication", "")
    return form

def apply_action(form: ProfileForm, action: str) -> None:
    """
    Apply a non-submit editor action such as ``add_allergy`` or ``remove_contact:2``.

    Unknown actions and malformed indexes are ignored.
    """
    name, _, argument = action.partition(":")

    if name == "add_allergy":
        form.add_allergy()
    elif name == "add_medication":
        form.add_medication()
    elif name == "add_contact":
        form.add_emergency_contact()
    elif name in ("remove_allergy", "remove_medication", "remove_contact"):
        try:
            index = int(argument)
        except ValueError:
            logger.warning(f"Ignoring editor action with a bad index: {action}")
            return
        if name == "remove_allergy":
            form.remove_allergy(index)
        elif name == "remove_medication":
            form.remove_medication(index)
        else:
            form.remove_emergency_contact(index)
    elif name:
        logger.warning(f"Ignoring unknown editor action: {action}")
