"""Tests for shared/models.py."""

import pytest
from pydantic import ValidationError

from shared.models import UserProfile, UserRole


class TestUserRole:
    @pytest.mark.parametrize("label, expected", [
        ("Admin", UserRole.ADMINISTRATOR),
        ("Administrateur", UserRole.ADMINISTRATOR),
        ("Gestionnaire", UserRole.MANAGER),
        ("Livreur", UserRole.COURIER),
        ("courier", UserRole.COURIER),
        (" manager ", UserRole.MANAGER),
        (UserRole.ADMINISTRATOR, UserRole.ADMINISTRATOR),
    ])
    def test_parse(self, label, expected):
        """Stored French labels and enum values both parse."""
        assert UserRole.parse(label) == expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            UserRole.parse("Comptable")


class TestUserProfile:
    def test_role_from_label(self):
        profile = UserProfile(id="1", role="Livreur")
        assert profile.role == UserRole.COURIER

    def test_default_role(self):
        assert UserProfile(id="1").role == UserRole.COURIER

    def test_unknown_role_rejected(self):
        with pytest.raises(ValidationError):
            UserProfile(id="1", role="Comptable")

    def test_display_name(self):
        assert UserProfile(id="1", first_name="Marie", last_name="Dupont").display_name == "Marie Dupont"

    def test_display_name_without_first_name(self):
        assert UserProfile(id="1", last_name="Dupont").display_name == "Dupont"

    def test_frozen(self):
        profile = UserProfile(id="1")
        with pytest.raises(ValidationError):
            profile.last_name = "X"
