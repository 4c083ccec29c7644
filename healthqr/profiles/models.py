"""
Profile Model - The single persisted health-and-contact record of a user.

One row per user, keyed by the user's identity. Rows are only ever written
by a full upsert; there is no partial persisted state and no delete path.
"""
from sqlalchemy import Column, String, Text, Date, DateTime, JSON, func
from ..database import Base

class ProfileRow(Base):
    """
    Profile Model - Stores one user's health profile

    Fields:
    - id: Primary key, equal to the owning user's identity
    - full_name: Full name
    - date_of_birth: Date of birth
    - blood_group: One of A+, A-, B+, B-, AB+, AB-, O+, O-
    - blood_pressure: Free-form, conventionally "systolic/diastolic"
    - sugar_level: Free-form numeric-looking text
    - medical_condition_details: Long-form description of conditions
    - medical_conditions: List of condition names (no form UI)
    - allergies: List of allergies, in the order they were added
    - medications: List of current medications, in the order they were added
    - emergency_contacts: List of {name, relationship, phone} objects
    - created_at: When the profile was first saved
    - updated_at: When the profile was last saved
    """
    __tablename__ = "profiles"

    id = Column(String(32), primary_key=True, index=True)
    full_name = Column(String, nullable=False)
    date_of_birth = Column(Date, nullable=False)
    blood_group = Column(String(3), nullable=False)
    blood_pressure = Column(String, nullable=False)
    sugar_level = Column(String, nullable=False)
    medical_condition_details = Column(Text, nullable=True)
    medical_conditions = Column(JSON, nullable=False, default=list)
    allergies = Column(JSON, nullable=False, default=list)
    medications = Column(JSON, nullable=False, default=list)
    emergency_contacts = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        """String representation of the Profile model"""
        return f"<ProfileRow(id={self.id}, full_name='{self.full_name}')>"
