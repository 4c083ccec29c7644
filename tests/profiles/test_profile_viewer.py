"""
Tests for the public profile viewer.
"""
from datetime import date

import pytest

from healthqr.config import settings
from healthqr.exceptions import StoreReadError
from healthqr.profiles.schemas import BloodGroup, EmergencyContact, Profile
from healthqr.profiles.viewer import (
    NO_CONTACTS,
    NONE_SPECIFIED,
    NOT_FOUND_MESSAGE,
    PublicProfileView,
    ViewerState,
    fetch_public_profile,
    format_date_of_birth,
    negotiate_locale,
)


class StaticStore:
    def __init__(self, profile=None, error=None):
        self.profile = profile
        self.error = error

    def get_one_by_id(self, profile_id):
        if self.error:
            raise self.error
        if self.profile is not None and self.profile.id == profile_id:
            return self.profile
        return None


def make_profile(**overrides):
    values = {
        "id": "abc123",
        "full_name": "Jane Doe",
        "date_of_birth": date(1990, 1, 2),
        "blood_group": BloodGroup.B_NEGATIVE,
        "blood_pressure": "120/80",
        "sugar_level": "95",
    }
    values.update(overrides)
    return Profile(**values)


def test_unknown_id_is_not_found():
    view = fetch_public_profile(StaticStore(), "nobody")
    assert view.state == ViewerState.NOT_FOUND
    assert view.error == NOT_FOUND_MESSAGE
    assert view.found is False


def test_read_error_is_not_found():
    """
    Test that store failures end in the not-found state rather than raising.
    """
    view = fetch_public_profile(StaticStore(error=StoreReadError("timeout")), "abc123")
    assert view.state == ViewerState.NOT_FOUND


def test_public_reads_can_be_disabled(monkeypatch):
    monkeypatch.setattr(settings, "public_profiles_enabled", False)
    view = fetch_public_profile(StaticStore(make_profile()), "abc123")
    assert view.state == ViewerState.NOT_FOUND


def test_loaded_profile_placeholders():
    """
    Test that empty optional sections show their placeholders.
    """
    view = fetch_public_profile(StaticStore(make_profile()), "abc123")
    assert view.state == ViewerState.LOADED

    shown = view.display("en_US")
    assert shown["full_name"] == "Jane Doe"
    assert shown["blood_group"] == "B-"
    assert shown["medical_condition_details"] == NONE_SPECIFIED
    assert shown["allergies"] == [NONE_SPECIFIED]
    assert shown["medications"] == [NONE_SPECIFIED]
    assert shown["has_medical_conditions"] is False
    assert shown["emergency_contacts"] == []
    assert shown["emergency_contacts_placeholder"] == NO_CONTACTS


def test_loaded_profile_values():
    profile = make_profile(
        medical_condition_details="Type 1 diabetes",
        medical_conditions=["Diabetes"],
        allergies=["Peanuts", "Latex"],
        emergency_contacts=[EmergencyContact(name="John", relationship="Spouse", phone="555")],
    )
    shown = fetch_public_profile(StaticStore(profile), "abc123").display("en_US")

    assert shown["medical_condition_details"] == "Type 1 diabetes"
    assert shown["medical_conditions"] == ["Diabetes"]
    assert shown["has_medical_conditions"] is True
    assert shown["allergies"] == ["Peanuts", "Latex"]
    assert shown["emergency_contacts"] == [{"name": "John", "relationship": "Spouse", "phone": "555"}]
    assert shown["emergency_contacts_placeholder"] is None


def test_display_requires_profile():
    with pytest.raises(ValueError):
        PublicProfileView(state=ViewerState.NOT_FOUND).display()


@pytest.mark.parametrize("locale, expected", [
    ("en_US", "Jan 2, 1990"),
    ("de_DE", "02.01.1990"),
])
def test_format_date_of_birth(locale, expected):
    assert format_date_of_birth(date(1990, 1, 2), locale) == expected


@pytest.mark.parametrize("header, expected", [
    ("de-DE,de;q=0.9,en;q=0.8", "de_DE"),
    ("fr", "fr"),
    ("*", "en_US"),
    ("zz-QQ", "en_US"),
    (None, "en_US"),
])
def test_negotiate_locale(header, expected):
    assert negotiate_locale(header) == expected
