"""Unit tests for ballot lifecycle transitions."""
import pytest

from rangevote.core.errors import InvalidStateError, NotFoundError
from rangevote.db.models import BallotStatus
from rangevote.services.lifecycle import close_ballot, get_ballots_to_auto_close, open_ballot, set_status


@pytest.mark.unit
class TestOpenClose:
    """Test open_ballot and close_ballot."""

    def test_close_sets_status_and_flag_together(self, db_session, ballot):
        closed = close_ballot(db_session, ballot.id)

        assert closed.status == BallotStatus.CLOSED
        assert closed.is_open is False

    def test_reopen_after_close(self, db_session, ballot):
        close_ballot(db_session, ballot.id)
        reopened = open_ballot(db_session, ballot.id)

        assert reopened.status == BallotStatus.OPEN
        assert reopened.is_open is True

    def test_opening_draft_sets_open_date(self, db_session, make_ballot):
        draft = make_ballot(status=BallotStatus.DRAFT)
        assert draft.is_open is False
        assert draft.open_date is None

        opened = open_ballot(db_session, draft.id)
        assert opened.open_date is not None

    def test_unknown_ballot(self, db_session):
        with pytest.raises(NotFoundError):
            open_ballot(db_session, "missing")
        with pytest.raises(NotFoundError):
            close_ballot(db_session, "missing")

    @pytest.mark.parametrize("transition", [open_ballot, close_ballot])
    def test_archived_ballot_cannot_change_status(self, db_session, ballot, transition):
        set_status(ballot, BallotStatus.ARCHIVED)
        db_session.commit()

        with pytest.raises(InvalidStateError):
            transition(db_session, ballot.id)

        db_session.refresh(ballot)
        assert ballot.status == BallotStatus.ARCHIVED
        assert ballot.is_open is False


@pytest.mark.unit
class TestGetBallotsToAutoClose:
    """Test the auto-close query."""

    def test_selects_only_expired_open_ballots(self, db_session, make_ballot, in_days):
        expired = make_ballot(name="Expired", close_date=in_days(-1))
        make_ballot(name="Future", close_date=in_days(1))
        make_ballot(name="No close date")
        already_closed = make_ballot(name="Closed", close_date=in_days(-2))
        close_ballot(db_session, already_closed.id)
        make_ballot(name="Draft", close_date=in_days(-1), status=BallotStatus.DRAFT)

        due = get_ballots_to_auto_close(db_session)

        assert [b.id for b in due] == [expired.id]
