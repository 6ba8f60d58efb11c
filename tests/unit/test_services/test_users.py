"""Unit tests for user records."""
import pytest

from rangevote.core.errors import InvalidStateError
from rangevote.services.users import create_user, get_user, get_user_by_email


@pytest.mark.unit
class TestUsers:
    """Test user creation and lookup."""

    def test_email_is_normalized(self, db_session):
        user = create_user(db_session, "  Alice@Example.COM ", "Alice")
        assert user.email == "alice@example.com"
        assert user.display_name == "Alice"

    def test_lookup_by_id_and_email(self, db_session):
        user = create_user(db_session, "bob@example.com")

        assert get_user(db_session, user.id).id == user.id
        assert get_user_by_email(db_session, "BOB@example.com").id == user.id

    def test_unknown_user(self, db_session):
        assert get_user(db_session, "missing") is None
        assert get_user_by_email(db_session, "nobody@example.com") is None

    def test_duplicate_email_rejected(self, db_session):
        create_user(db_session, "carol@example.com")

        with pytest.raises(InvalidStateError):
            create_user(db_session, "Carol@example.com")
