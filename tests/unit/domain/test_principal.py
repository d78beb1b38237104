"""
Unit tests for the Principal entity and domain events.
"""
from uuid import uuid4

import pytest

from authcore.domain.entities.principal import Principal, ProfileUpdate
from authcore.domain.events import AuthenticationRejected, PrincipalProfileUpdated
from authcore.domain.exceptions import ValidationException

from tests.factories import ActivePrincipalFactory, PrincipalFactory


class TestPrincipal:
    """Test entity validation and projection."""

    def test_create_strips_name(self):
        """Test the factory trims the display name."""
        principal = Principal.create(email="a@x.com", name="  Ada  ", password_hash="h")

        assert principal.name == "Ada"
        assert principal.id is None
        assert principal.has_active_session is False

    @pytest.mark.parametrize("kwargs", [
        {"email": "", "name": "Ada", "password_hash": "h"},
        {"email": "a@x.com", "name": " ", "password_hash": "h"},
        {"email": "a@x.com", "name": "x" * 101, "password_hash": "h"},
        {"email": "a@x.com", "name": "Ada", "password_hash": ""},
    ])
    def test_invalid_fields(self, kwargs):
        """Test invalid data is refused with field errors."""
        with pytest.raises(ValidationException) as exc_info:
            Principal(**kwargs)

        assert exc_info.value.errors

    def test_profile_drops_secrets(self):
        """Test the public projection has no hash fields."""
        principal = ActivePrincipalFactory()

        profile = principal.to_profile()

        assert profile.id == principal.id
        assert not hasattr(profile, "password_hash")
        assert not hasattr(profile, "refresh_token_hash")

    def test_unsaved_principal_has_no_profile(self):
        """Test projecting before the store assigned an id fails."""
        with pytest.raises(ValueError):
            Principal.create(email="a@x.com", name="Ada", password_hash="h").to_profile()

    def test_with_changes_revalidates(self):
        """Test profile changes go through validation."""
        principal = PrincipalFactory()

        assert principal.with_changes({"name": "Grace"}).name == "Grace"
        with pytest.raises(ValidationException):
            principal.with_changes({"email": ""})

    def test_profile_update_changes(self):
        """Test only supplied fields are reported as changes."""
        assert ProfileUpdate(name="Grace").as_changes() == {"name": "Grace"}
        assert ProfileUpdate().is_empty is True


class TestDomainEvents:
    """Test event serialization."""

    def test_event_payload(self):
        """Test the envelope and payload fields."""
        principal_id = uuid4()
        event = PrincipalProfileUpdated(principal_id=principal_id, fields=("email", "name"))

        data = event.to_dict()

        assert data["event_type"] == "principal.profile_updated"
        assert data["data"] == {"principal_id": str(principal_id), "fields": ["email", "name"]}

    def test_rejection_without_principal(self):
        """Test rejected signins for unknown emails carry no principal."""
        event = AuthenticationRejected(kind="invalid_credentials", reason="unknown_email")

        assert event.to_dict()["data"] == {
            "principal_id": None,
            "kind": "invalid_credentials",
            "reason": "unknown_email",
        }
