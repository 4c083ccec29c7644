"""
Profile Form - Editor state for one user's profile.

A ProfileForm owns a single in-memory draft. Field and list edits only
touch the draft; nothing reaches the store until submit(), which performs
one full upsert. The identity is always passed in by the caller.
"""
from typing import List, Optional
from pydantic import ValidationError
import logging

from ..auth.service import Identity
from ..exceptions import (
    AuthenticationError,
    ProfileValidationError,
    StoreReadError,
    StoreWriteError,
    jsonable_errors,
)
from .schemas import (
    CONTACT_FIELDS,
    REQUIRED_FIELDS,
    SCALAR_FIELDS,
    ContactDraft,
    Profile,
    ProfileDraft,
)
from .store import ProfileStore

# Set up logging
logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Profile updated successfully!"

class ProfileForm:
    """
    Draft state and edit operations for the profile editor.

    Attributes:
        draft: The profile being edited
        pending_allergy: Text typed into the "add allergy" input
        pending_medication: Text typed into the "add medication" input
        saving: True while a submit is in flight
        success: True after the last submit was stored
        error: Message of the last failed submit, if any
    """

    def __init__(self, draft: Optional[ProfileDraft] = None):
        self.draft = draft or ProfileDraft()
        self.pending_allergy = ""
        self.pending_medication = ""
        self.saving = False
        self.success = False
        self.error: Optional[str] = None

    def load(self, store: ProfileStore, identity: Identity) -> bool:
        """
        Populate the draft from the stored profile of ``identity``.

        A missing profile leaves the empty draft in place. Read failures are
        logged and otherwise ignored so a first-time user can still fill in
        the form.

        Returns:
            bool: True if a stored profile was loaded
        """
        try:
            profile = store.get_one_by_id(identity.user_id)
        except (StoreReadError, ProfileValidationError) as e:
            logger.error(f"Error loading profile for {identity.user_id}: {e.detail}")
            return False

        if profile is None:
            return False

        self.draft = ProfileDraft.from_profile(profile)
        return True

    # Scalar fields

    def set_field(self, name: str, value: str) -> None:
        """
        Replace one scalar field of the draft.

        Raises:
            ValueError: If ``name`` is not an editable scalar field
        """
        if name not in SCALAR_FIELDS:
            raise ValueError(f"Unknown profile field: {name}")
        setattr(self.draft, name, value)

    # Allergies and medications

    def add_allergy(self, value: Optional[str] = None) -> bool:
        """Append the pending allergy (or ``value``); blank input is a no-op."""
        added = self._append_item(self.draft.allergies, self.pending_allergy if value is None else value)
        if added:
            self.pending_allergy = ""
        return added

    def remove_allergy(self, index: int) -> None:
        self.draft.allergies = _without(self.draft.allergies, index)

    def add_medication(self, value: Optional[str] = None) -> bool:
        """Append the pending medication (or ``value``); blank input is a no-op."""
        added = self._append_item(self.draft.medications, self.pending_medication if value is None else value)
        if added:
            self.pending_medication = ""
        return added

    def remove_medication(self, index: int) -> None:
        self.draft.medications = _without(self.draft.medications, index)

    # Emergency contacts

    def add_emergency_contact(self) -> None:
        """Append a contact with every field empty."""
        self.draft.emergency_contacts = self.draft.emergency_contacts + [ContactDraft()]

    def update_emergency_contact(self, index: int, field: str, value: str) -> None:
        """
        Replace one field of the contact at ``index``.

        Raises:
            ValueError: If ``field`` is not name, relationship or phone
            IndexError: If there is no contact at ``index``
        """
        if field not in CONTACT_FIELDS:
            raise ValueError(f"Unknown emergency contact field: {field}")
        contacts = self.draft.emergency_contacts
        if not 0 <= index < len(contacts):
            raise IndexError(f"No emergency contact at position {index}")

        updated = contacts[index].model_copy(update={field: value})
        self.draft.emergency_contacts = contacts[:index] + [updated] + contacts[index + 1:]

    def remove_emergency_contact(self, index: int) -> None:
        self.draft.emergency_contacts = _without(self.draft.emergency_contacts, index)

    # Submission

    def missing_required_fields(self) -> List[str]:
        """
        Names of required fields that are still blank.

        Emergency contact fields are reported as ``emergency_contacts.<i>.<field>``.
        """
        missing = [name for name in REQUIRED_FIELDS if not getattr(self.draft, name).strip()]
        for i, contact in enumerate(self.draft.emergency_contacts):
            missing.extend(
                f"emergency_contacts.{i}.{field}"
                for field in CONTACT_FIELDS
                if not getattr(contact, field).strip()
            )
        return missing

    def to_profile(self, identity: Identity) -> Profile:
        """
        Build the strict profile to store for ``identity``.

        Raises:
            ProfileValidationError: If the draft does not parse into a Profile
        """
        try:
            return Profile(id=identity.user_id, **self.draft.model_dump())
        except ValidationError as e:
            raise ProfileValidationError("Invalid profile data", errors=jsonable_errors(e.errors()))

    def submit(self, store: ProfileStore, identity: Optional[Identity]) -> bool:
        """
        Upsert the whole draft for ``identity``.

        Store failures are recorded in ``error`` with the store's message and
        the draft is kept so the user can retry.

        Returns:
            bool: True if the profile was stored

        Raises:
            AuthenticationError: If there is no identity; the store is not contacted
            ProfileValidationError: If required fields are blank or malformed;
                the store is not contacted
        """
        self.error = None
        self.success = False

        if identity is None:
            self.error = "No user logged in"
            raise AuthenticationError(self.error)

        missing = self.missing_required_fields()
        if missing:
            self.error = "Please fill in all required fields: " + ", ".join(missing)
            raise ProfileValidationError(self.error, errors=[{"loc": [name], "msg": "required"} for name in missing])

        try:
            profile = self.to_profile(identity)
        except ProfileValidationError as e:
            self.error = e.detail
            raise

        self.saving = True
        try:
            stored = store.upsert_one(profile)
        except StoreWriteError as e:
            self.error = e.detail
            return False
        finally:
            self.saving = False

        self.draft = ProfileDraft.from_profile(stored)
        self.success = True
        logger.info(f"Profile form submitted for {identity.user_id}")
        return True

    @property
    def status_message(self) -> Optional[str]:
        """Banner text for the last submit, if any"""
        if self.error:
            return self.error
        if self.success:
            return SUCCESS_MESSAGE
        return None

    @staticmethod
    def _append_item(items: List[str], value: str) -> bool:
        value = (value or "").strip()
        if not value:
            return False
        items.append(value)
        return True

def _without(items: list, index: int) -> list:
    """Copy of ``items`` without position ``index``; out-of-range is a no-op."""
    return [item for i, item in enumerate(items) if i != index]
