"""
Profile Router - JSON API for the profile editor and the public viewer.
"""
from fastapi import APIRouter, Depends
import logging

from ..auth.dependencies import get_current_identity
from ..auth.service import Identity
from ..exceptions import ProfileNotFoundError
from .form import ProfileForm
from .schemas import Profile, ProfileDraft, ProfileUpsert
from .store import ProfileStore, get_profile_store
from .viewer import fetch_public_profile

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/me", response_model=ProfileDraft)
def get_my_profile(
    store: ProfileStore = Depends(get_profile_store),
    identity: Identity = Depends(get_current_identity)
):
    """
    Get the current user's profile as an editable draft

    A user who never saved a profile gets the empty draft.
    """
    form = ProfileForm()
    form.load(store, identity)
    return form.draft

@router.put("/me", response_model=Profile)
def upsert_my_profile(
    profile_data: ProfileUpsert,
    store: ProfileStore = Depends(get_profile_store),
    identity: Identity = Depends(get_current_identity)
):
    """
    Create or fully replace the current user's profile

    The profile id is always the caller's identity.
    """
    profile = Profile(id=identity.user_id, **profile_data.model_dump())
    stored = store.upsert_one(profile)
    logger.info(f"Profile {identity.user_id} saved through the API")
    return stored

@router.get("/{profile_id}", response_model=Profile)
def get_public_profile(
    profile_id: str,
    store: ProfileStore = Depends(get_profile_store)
):
    """
    Get a profile by id without authentication

    Raises:
        ProfileNotFoundError: If the profile is missing, unreadable or public reads are disabled
    """
    view = fetch_public_profile(store, profile_id)
    if not view.found:
        raise ProfileNotFoundError(view.error)
    return view.profile
