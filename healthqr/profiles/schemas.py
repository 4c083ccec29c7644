"""
Profile Schemas - Pydantic models for profile validation and serialization.

``Profile`` is the strict shape every persisted row must parse into.
``ProfileDraft`` is the loose shape the editor holds before submission,
where any field may still be empty.
"""
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from enum import Enum

class BloodGroup(str, Enum):
    """The eight ABO/Rh blood groups"""
    A_POSITIVE = "A+"
    A_NEGATIVE = "A-"
    B_POSITIVE = "B+"
    B_NEGATIVE = "B-"
    AB_POSITIVE = "AB+"
    AB_NEGATIVE = "AB-"
    O_POSITIVE = "O+"
    O_NEGATIVE = "O-"

REQUIRED_FIELDS = ("full_name", "date_of_birth", "blood_group", "blood_pressure", "sugar_level")
SCALAR_FIELDS = REQUIRED_FIELDS + ("medical_condition_details",)
CONTACT_FIELDS = ("name", "relationship", "phone")

def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value

class EmergencyContact(BaseModel):
    """
    Emergency Contact Schema - One person to call

    Fields:
    - name: Contact's name
    - relationship: Relationship to the profile owner
    - phone: Phone number, not format-checked
    """
    name: str
    relationship: str
    phone: str

    @field_validator("name", "relationship", "phone")
    @classmethod
    def check_not_blank(cls, value: str) -> str:
        return _not_blank(value)

class ProfileBase(BaseModel):
    """
    Profile Base Schema - Fields the owner edits

    Fields:
    - full_name, date_of_birth, blood_group, blood_pressure, sugar_level: required
    - medical_condition_details: Optional long-form text
    - medical_conditions: Optional list, kept for compatibility and not edited by the form
    - allergies, medications: Ordered lists of text
    - emergency_contacts: Ordered list of contacts
    """
    full_name: str
    date_of_birth: date
    blood_group: BloodGroup
    blood_pressure: str
    sugar_level: str
    medical_condition_details: str = ""
    medical_conditions: List[str] = Field(default_factory=list, description="Deprecated; no form UI")
    allergies: List[str] = Field(default_factory=list)
    medications: List[str] = Field(default_factory=list)
    emergency_contacts: List[EmergencyContact] = Field(default_factory=list)

    @field_validator("full_name", "blood_pressure", "sugar_level")
    @classmethod
    def check_not_blank(cls, value: str) -> str:
        return _not_blank(value)

    @field_validator("medical_condition_details", mode="before")
    @classmethod
    def none_to_empty_text(cls, value):
        return "" if value is None else value

    @field_validator("medical_conditions", "allergies", "medications", "emergency_contacts", mode="before")
    @classmethod
    def none_to_empty_list(cls, value):
        return [] if value is None else value

class ProfileUpsert(ProfileBase):
    """Profile Upsert Schema - Request body for a full profile write; the id comes from the session"""
    pass

class Profile(ProfileBase):
    """
    Profile Schema - A persisted profile

    Fields:
    - id: Owning user's identity
    - created_at / updated_at: Managed by the store
    """
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True

class ContactDraft(BaseModel):
    """An emergency contact as typed into the form; fields may be empty"""
    name: str = ""
    relationship: str = ""
    phone: str = ""

class ProfileDraft(BaseModel):
    """
    Profile Draft Schema - In-memory editor state

    Mirrors ProfileBase with every field optional and defaulting to empty.
    """
    full_name: str = ""
    date_of_birth: str = ""
    blood_group: str = ""
    blood_pressure: str = ""
    sugar_level: str = ""
    medical_condition_details: str = ""
    medical_conditions: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    medications: List[str] = Field(default_factory=list)
    emergency_contacts: List[ContactDraft] = Field(default_factory=list)

    @classmethod
    def from_profile(cls, profile: Profile) -> "ProfileDraft":
        """Populate a draft from a persisted profile"""
        return cls(
            full_name=profile.full_name,
            date_of_birth=profile.date_of_birth.isoformat(),
            blood_group=profile.blood_group.value,
            blood_pressure=profile.blood_pressure,
            sugar_level=profile.sugar_level,
            medical_condition_details=profile.medical_condition_details,
            medical_conditions=list(profile.medical_conditions),
            allergies=list(profile.allergies),
            medications=list(profile.medications),
            emergency_contacts=[ContactDraft(**contact.model_dump()) for contact in profile.emergency_contacts],
        )
