from .ballots import (
    BallotSummary,
    create_ballot,
    delete_ballot,
    get_ballot,
    get_ballots_for_user,
    get_candidates,
    update_ballot,
)
from .lifecycle import close_ballot, get_ballots_to_auto_close, open_ballot
from .marketplace import (
    get_organizations_with_public_ballots,
    is_closing_soon,
    join_ballot,
    list_public_ballots,
)
from .organizations import (
    Membership,
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
from .permissions import (
    AccessDecision,
    can_user_vote,
    claim_pending_invitations,
    get_user_permission,
    invite_user,
    resolve_access,
)
from .scheduler import AutoCloseScheduler, SweepReport
from .share_links import (
    create_share_link,
    deactivate_share_link,
    increment_use_count,
    list_share_links,
    validate_share_link,
)
from .users import create_user, get_user, get_user_by_email
from .votes import get_results, get_user_votes, save_votes

__all__ = [
    # ballots
    "BallotSummary",
    "create_ballot",
    "delete_ballot",
    "get_ballot",
    "get_ballots_for_user",
    "get_candidates",
    "update_ballot",
    # lifecycle
    "close_ballot",
    "get_ballots_to_auto_close",
    "open_ballot",
    # marketplace
    "get_organizations_with_public_ballots",
    "is_closing_soon",
    "join_ballot",
    "list_public_ballots",
    # organizations
    "Membership",
    "create_organization",
    "delete_organization",
    "get_organization",
    "get_organization_members",
    "get_organizations_for_user",
    "get_public_organizations",
    "get_user_role_in_organization",
    "is_user_member_of_organization",
    "join_organization",
    "leave_organization",
    "update_organization",
    # permissions
    "AccessDecision",
    "can_user_vote",
    "claim_pending_invitations",
    "get_user_permission",
    "invite_user",
    "resolve_access",
    # scheduler
    "AutoCloseScheduler",
    "SweepReport",
    # share links
    "create_share_link",
    "deactivate_share_link",
    "increment_use_count",
    "list_share_links",
    "validate_share_link",
    # users
    "create_user",
    "get_user",
    "get_user_by_email",
    # votes
    "get_results",
    "get_user_votes",
    "save_votes",
]
