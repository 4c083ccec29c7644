"""
Public Profile Viewer - Read-only view of one profile by id.

No session is needed and no ownership check is made here; whether bare-id
reads are allowed at all is the ``public_profiles_enabled`` setting.
"""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional
from babel import Locale, UnknownLocaleError
from babel.dates import format_date
import logging

from ..config import settings
from ..exceptions import ProfileValidationError, StoreReadError
from .schemas import Profile
from .store import ProfileStore

# Set up logging
logger = logging.getLogger(__name__)

NOT_SPECIFIED = "Not specified"
NONE_SPECIFIED = "None specified"
NO_CONTACTS = "No emergency contacts specified"
NOT_FOUND_MESSAGE = "Profile not found or inaccessible"

class ViewerState(str, Enum):
    """Renderable states of the public viewer"""
    LOADING = "loading"
    NOT_FOUND = "not_found"
    LOADED = "loaded"

@dataclass
class PublicProfileView:
    """
    Result of fetching a profile for the public viewer.

    Fields:
    - state: Which of the three states to render
    - profile: The profile when loaded
    - error: Message shown in the not-found state
    """
    state: ViewerState = ViewerState.LOADING
    profile: Optional[Profile] = None
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.state == ViewerState.LOADED

    def display(self, locale: Optional[str] = None) -> Dict[str, Any]:
        """
        Display values for the loaded profile, with placeholders for empty fields.

        Args:
            locale: Babel locale identifier used to format the date of birth

        Raises:
            ValueError: If the view is not in the loaded state
        """
        if self.profile is None:
            raise ValueError(f"No profile to display in state {self.state.value}")

        profile = self.profile
        return {
            "id": profile.id,
            "full_name": profile.full_name,
            "date_of_birth": format_date_of_birth(profile.date_of_birth, locale),
            "blood_group": profile.blood_group.value,
            "blood_pressure": profile.blood_pressure or NOT_SPECIFIED,
            "sugar_level": profile.sugar_level or NOT_SPECIFIED,
            "medical_condition_details": profile.medical_condition_details or NONE_SPECIFIED,
            "medical_conditions": display_list(profile.medical_conditions),
            "has_medical_conditions": bool(profile.medical_conditions),
            "allergies": display_list(profile.allergies),
            "medications": display_list(profile.medications),
            "emergency_contacts": [contact.model_dump() for contact in profile.emergency_contacts],
            "emergency_contacts_placeholder": None if profile.emergency_contacts else NO_CONTACTS,
        }

def fetch_public_profile(store: ProfileStore, profile_id: str) -> PublicProfileView:
    """
    Fetch one profile for public display. Never raises.

    Store errors, malformed rows and missing rows all end in the
    not-found state.
    """
    if not settings.public_profiles_enabled:
        logger.info(f"Public profile {profile_id} requested while public profiles are disabled")
        return PublicProfileView(state=ViewerState.NOT_FOUND, error=NOT_FOUND_MESSAGE)

    try:
        profile = store.get_one_by_id(profile_id)
    except (StoreReadError, ProfileValidationError) as e:
        logger.error(f"Error loading profile {profile_id}: {e.detail}")
        return PublicProfileView(state=ViewerState.NOT_FOUND, error=NOT_FOUND_MESSAGE)

    if profile is None:
        return PublicProfileView(state=ViewerState.NOT_FOUND, error=NOT_FOUND_MESSAGE)
    return PublicProfileView(state=ViewerState.LOADED, profile=profile)

def display_list(items: List[str]) -> List[str]:
    """The items, or a single placeholder entry when there are none"""
    return list(items) if items else [NONE_SPECIFIED]

def negotiate_locale(accept_language: Optional[str]) -> str:
    """
    Pick the first parseable locale from an Accept-Language header.

    Falls back to ``settings.default_locale``.
    """
    if accept_language:
        for part in accept_language.split(","):
            tag = part.split(";")[0].strip()
            if not tag or tag == "*":
                continue
            try:
                return str(Locale.parse(tag, sep="-"))
            except (ValueError, UnknownLocaleError):
                continue
    return settings.default_locale

def format_date_of_birth(value: date, locale: Optional[str] = None) -> str:
    """Format a date using the conventions of ``locale``"""
    return format_date(value, format="medium", locale=locale or settings.default_locale)
