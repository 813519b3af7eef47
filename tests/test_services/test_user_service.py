"""
Tests for user_service token handling.
"""

import pytest

from facilitydesk.exceptions import ValidationError
from facilitydesk.services import user_service


class TestApiTokens:
    """Tests for token issue, lookup and revocation."""

    def test_token_resolves_to_user(self, db_session):
        """The issued token finds its user; only the digest is stored."""
        user, token = user_service.create_user("desk@example.com", "Front Desk")
        assert user_service.get_user_by_token(token).id == user.id
        assert user.api_token_hash == user_service.hash_token(token)
        assert "api_token_hash" not in user.to_dict()

    def test_unknown_token(self, db_session):
        """Unknown or missing tokens resolve to nobody."""
        user_service.create_user("desk@example.com", "Front Desk")
        assert user_service.get_user_by_token("not-a-token") is None
        assert user_service.get_user_by_token(None) is None

    def test_rotation_revokes_old_token(self, db_session):
        """After rotation only the new token works."""
        user, old_token = user_service.create_user("desk@example.com", "Front Desk")
        new_token = user_service.rotate_token(user.id)
        assert user_service.get_user_by_token(old_token) is None
        assert user_service.get_user_by_token(new_token).id == user.id

    def test_deactivated_user_rejected(self, db_session):
        """Inactive users cannot authenticate."""
        user, token = user_service.create_user("desk@example.com", "Front Desk")
        user_service.deactivate_user(user.id)
        assert user_service.get_user_by_token(token) is None

    def test_duplicate_email(self, db_session):
        """Emails are unique regardless of case."""
        user_service.create_user("desk@example.com", "Front Desk")
        with pytest.raises(ValidationError):
            user_service.create_user("DESK@example.com", "Another Desk")
