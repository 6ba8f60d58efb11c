"""Database models."""
from rangevote.db.models.user import User
from rangevote.db.models.organization import Organization, OrganizationMember
from rangevote.db.models.ballot import Ballot, BallotStatus
from rangevote.db.models.candidate import Candidate
from rangevote.db.models.vote import Vote
from rangevote.db.models.ballot_permission import BallotPermission, UserPermission
from rangevote.db.models.share_link import ShareLink, ShareLinkPermission

__all__ = [
    "User",
    "Organization",
    "OrganizationMember",
    "Ballot",
    "BallotStatus",
    "Candidate",
    "Vote",
    "BallotPermission",
    "UserPermission",
    "ShareLink",
    "ShareLinkPermission",
]
