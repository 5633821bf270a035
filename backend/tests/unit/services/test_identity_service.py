"""Tests for participant display-name resolution."""

from unittest.mock import patch

from liveclass.core.exceptions import RepositoryException
from liveclass.services.identity_service import IdentityService, NameLookup


class TestResolveDisplayName:
    def test_full_name_preferred(self, db, make_user):
        user = make_user("student", first_name="Ada", last_name="Lovelace")

        assert IdentityService(db).resolve_display_name(user.id) == "Ada Lovelace"

    def test_first_name_only(self, db, make_user):
        user = make_user("student", first_name="Ada", last_name=None)

        assert IdentityService(db).resolve_display_name(user.id) == "Ada"

    def test_email_when_no_names(self, db, make_user):
        user = make_user("student", first_name=None, last_name=None, email="ada@example.com")

        assert IdentityService(db).resolve_display_name(user.id) == "ada@example.com"

    def test_unknown_user_falls_back(self, db):
        service = IdentityService(db)

        assert service.lookup_display_name("missing") == NameLookup()
        assert service.resolve_display_name("missing") == "User"

    def test_lookup_failure_is_returned_not_raised(self, db):
        service = IdentityService(db)
        with patch.object(
            service.user_repository, "get_by_id", side_effect=RepositoryException("db down")
        ):
            lookup = service.lookup_display_name("u1")
            name = service.resolve_display_name("u1")

        assert lookup.ok is False
        assert isinstance(lookup.error, RepositoryException)
        assert name == "User"
