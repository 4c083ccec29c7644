"""
Profile Store - Persistence boundary for profiles.

Exactly two operations: read one row by id and upsert one row. Every row
read from the table is parsed into the strict Profile shape before it
leaves this module.
"""
from typing import Optional
from fastapi import Depends
from pydantic import ValidationError
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging

from ..database import get_db
from ..exceptions import ProfileValidationError, StoreReadError, StoreWriteError, jsonable_errors
from .models import ProfileRow
from .schemas import Profile

# Set up logging
logger = logging.getLogger(__name__)

class ProfileStore:
    """
    Single-table profile store keyed by user identity.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_one_by_id(self, profile_id: str) -> Optional[Profile]:
        """
        Get a profile by id.

        Args:
            profile_id: Identity of the profile owner

        Returns:
            Profile, or None when no row matches

        Raises:
            StoreReadError: If the read fails
            ProfileValidationError: If the stored row does not have the Profile shape
        """
        try:
            row = self.db.query(ProfileRow).filter(ProfileRow.id == profile_id).first()
        except SQLAlchemyError as e:
            logger.error(f"Error reading profile {profile_id}: {str(e)}")
            raise StoreReadError(str(e))

        if row is None:
            return None
        return parse_profile(row)

    def upsert_one(self, profile: Profile) -> Profile:
        """
        Create the profile row if absent, else replace every editable field.

        Args:
            profile: Full profile to store

        Returns:
            Profile: The stored profile, with store-managed timestamps

        Raises:
            StoreWriteError: If the write fails; the detail is the store's message
        """
        values = profile.model_dump(mode="json", exclude={"id", "created_at", "updated_at"})
        values["date_of_birth"] = profile.date_of_birth

        try:
            row = self.db.query(ProfileRow).filter(ProfileRow.id == profile.id).first()
            if row is None:
                row = ProfileRow(id=profile.id, **values)
                self.db.add(row)
                action = "Created"
            else:
                for field, value in values.items():
                    setattr(row, field, value)
                action = "Updated"

            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error writing profile {profile.id}: {str(e)}")
            raise StoreWriteError(str(e))

        logger.info(f"{action} profile {profile.id}")
        return parse_profile(row)

def parse_profile(row: ProfileRow) -> Profile:
    """
    Parse a stored row into a Profile.

    Raises:
        ProfileValidationError: If the row does not have the Profile shape
    """
    try:
        return Profile.model_validate(row)
    except ValidationError as e:
        logger.error(f"Stored profile {row.id} has an invalid shape: {e.errors()}")
        raise ProfileValidationError(
            f"Stored profile {row.id} has an invalid shape",
            errors=jsonable_errors(e.errors())
        )

def get_profile_store(db: Session = Depends(get_db)) -> ProfileStore:
    """
    Profile store dependency bound to the request's database session.
    """
    return ProfileStore(db)
