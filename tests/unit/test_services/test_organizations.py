"""Unit tests for organization service."""
import pytest

from rangevote.core.constants import ROLE_MEMBER, ROLE_OWNER
from rangevote.core.errors import InvalidStateError, NotFoundError, UnauthorizedError
from rangevote.services.ballots import get_ballot
from rangevote.services.organizations import (
    create_organization,
    delete_organization,
    get_organization,
    get_organization_members,
    get_organizations_for_user,
    get_public_organizations,
    get_user_role_in_organization,
    is_user_member_of_organization,
    join_organization,
    leave_organization,
    update_organization,
)


@pytest.mark.unit
class TestCreateOrganization:

    def test_owner_becomes_member(self, db_session, owner):
        org = create_organization(db_session, "Test Organization", owner.id, description="Test Description")

        assert org.owner_id == owner.id
        assert org.is_public is False
        assert is_user_member_of_organization(db_session, org.id, owner.id)
        assert get_user_role_in_organization(db_session, org.id, owner.id) == ROLE_OWNER

    def test_get_unknown(self, db_session):
        assert get_organization(db_session, "missing") is None


@pytest.mark.unit
class TestMembership:

    def test_organizations_for_user(self, db_session, owner):
        create_organization(db_session, "Org 1", owner.id)
        create_organization(db_session, "Org 2", owner.id)

        memberships = get_organizations_for_user(db_session, owner.id)

        assert [m.organization.name for m in memberships] == ["Org 1", "Org 2"]
        assert all(m.is_owner and m.role == ROLE_OWNER for m in memberships)

    def test_public_organizations_exclude_own(self, db_session, owner, voter):
        create_organization(db_session, "Public Org", owner.id, is_public=True)
        create_organization(db_session, "Private Org", owner.id)

        assert [o.name for o in get_public_organizations(db_session, voter.id)] == ["Public Org"]
        assert get_public_organizations(db_session, owner.id) == []

    def test_join_public(self, db_session, owner, voter):
        org = create_organization(db_session, "Open", owner.id, is_public=True)

        join_organization(db_session, org.id, voter.id)

        assert get_user_role_in_organization(db_session, org.id, voter.id) == ROLE_MEMBER

    def test_join_private(self, db_session, owner, voter):
        org = create_organization(db_session, "Closed", owner.id)
        with pytest.raises(UnauthorizedError):
            join_organization(db_session, org.id, voter.id)

    def test_join_twice(self, db_session, owner, voter):
        org = create_organization(db_session, "Open", owner.id, is_public=True)
        join_organization(db_session, org.id, voter.id)
        with pytest.raises(InvalidStateError):
            join_organization(db_session, org.id, voter.id)

    def test_join_unknown(self, db_session, voter):
        with pytest.raises(NotFoundError):
            join_organization(db_session, "missing", voter.id)

    def test_leave(self, db_session, owner, voter):
        org = create_organization(db_session, "Open", owner.id, is_public=True)
        join_organization(db_session, org.id, voter.id)

        leave_organization(db_session, org.id, voter.id)

        assert not is_user_member_of_organization(db_session, org.id, voter.id)

    def test_owner_cannot_leave(self, db_session, owner):
        org = create_organization(db_session, "Mine", owner.id)
        with pytest.raises(InvalidStateError):
            leave_organization(db_session, org.id, owner.id)

    def test_non_member_cannot_leave(self, db_session, owner, voter):
        org = create_organization(db_session, "Mine", owner.id, is_public=True)
        with pytest.raises(InvalidStateError):
            leave_organization(db_session, org.id, voter.id)

    def test_members_list(self, db_session, owner, make_user):
        org = create_organization(db_session, "Club", owner.id, is_public=True)
        join_organization(db_session, org.id, make_user().id)
        join_organization(db_session, org.id, make_user().id)

        roles = [m.role for m in get_organization_members(db_session, org.id)]
        assert len(roles) == 3
        assert roles.count(ROLE_OWNER) == 1
        assert roles.count(ROLE_MEMBER) == 2


@pytest.mark.unit
class TestUpdateDelete:

    def test_update(self, db_session, owner):
        org = create_organization(db_session, "Old", owner.id)

        updated = update_organization(
            db_session, org.id, owner.id, name="Updated Name", description="Updated Description", is_public=True
        )

        assert updated.name == "Updated Name"
        assert updated.description == "Updated Description"
        assert updated.is_public is True

    def test_update_by_non_owner(self, db_session, owner, voter):
        org = create_organization(db_session, "Old", owner.id)
        with pytest.raises(UnauthorizedError):
            update_organization(db_session, org.id, voter.id, name="Hijacked")

    def test_delete_detaches_ballots(self, db_session, owner, make_ballot):
        org = create_organization(db_session, "Gone", owner.id)
        ballot = make_ballot(organization_id=org.id)

        delete_organization(db_session, org.id, owner.id)

        assert get_organization(db_session, org.id) is None
        kept = get_ballot(db_session, ballot.id)
        assert kept is not None
        assert kept.organization_id is None

    def test_delete_by_non_owner(self, db_session, owner, voter):
        org = create_organization(db_session, "Mine", owner.id)
        with pytest.raises(UnauthorizedError):
            delete_organization(db_session, org.id, voter.id)
