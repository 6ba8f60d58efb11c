"""Organization business logic.

Membership of an organization implies a Voter grant on every ballot the
organization owns; that rule lives in ``permissions.resolve_access``.
"""
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rangevote.core.constants import ROLE_MEMBER, ROLE_OWNER
from rangevote.core.errors import InvalidStateError, NotFoundError, UnauthorizedError
from rangevote.core.logging_config import get_logger
from rangevote.core.utils import utcnow
from rangevote.db.models import Organization, OrganizationMember

logger = get_logger(__name__)


@dataclass
class Membership:
    organization: Organization
    role: str
    is_owner: bool


def get_organization(db: Session, organization_id: str) -> Optional[Organization]:
    return db.query(Organization).filter(Organization.id == organization_id).first()


def _get_organization_or_raise(db: Session, organization_id: str) -> Organization:
    organization = get_organization(db, organization_id)
    if not organization:
        raise NotFoundError("Organization not found")
    return organization


def _get_member(db: Session, organization_id: str, user_id: str) -> Optional[OrganizationMember]:
    return db.query(OrganizationMember).filter(
        OrganizationMember.organization_id == organization_id,
        OrganizationMember.user_id == user_id,
    ).first()


def create_organization(
    db: Session,
    name: str,
    owner_id: str,
    description: Optional[str] = None,
    is_public: bool = False,
) -> Organization:
    """Create an organization with its owner as the first member."""
    now = utcnow()
    organization = Organization(
        name=name,
        description=description,
        owner_id=owner_id,
        is_public=is_public,
        created_at=now,
    )
    organization.members.append(
        OrganizationMember(user_id=owner_id, role=ROLE_OWNER, joined_at=now)
    )

    try:
        db.add(organization)
        db.commit()
        db.refresh(organization)
    except Exception:
        db.rollback()
        raise

    logger.info("organization_created", organization_id=organization.id, owner_id=owner_id)
    return organization


def update_organization(
    db: Session,
    organization_id: str,
    user_id: str,
    name: Optional[str] = None,
    description: Optional[str] = None,
    is_public: Optional[bool] = None,
) -> Organization:
    """Owner-only update; arguments left as ``None`` are unchanged."""
    organization = _get_organization_or_raise(db, organization_id)
    if organization.owner_id != user_id:
        raise UnauthorizedError("Only the organization owner can update it")

    if name is not None:
        organization.name = name
    if description is not None:
        organization.description = description
    if is_public is not None:
        organization.is_public = is_public

    db.commit()
    db.refresh(organization)
    logger.info("organization_updated", organization_id=organization_id)
    return organization


def delete_organization(db: Session, organization_id: str, user_id: str) -> None:
    """Owner-only delete. The organization's ballots survive without an organization."""
    organization = _get_organization_or_raise(db, organization_id)
    if organization.owner_id != user_id:
        raise UnauthorizedError("Only the organization owner can delete it")

    detached = len(organization.ballots)
    for ballot in organization.ballots:
        ballot.organization_id = None

    db.delete(organization)
    db.commit()
    logger.info("organization_deleted", organization_id=organization_id, ballots_detached=detached)


def get_organizations_for_user(db: Session, user_id: str) -> List[Membership]:
    rows = db.query(Organization, OrganizationMember.role).join(
        OrganizationMember, OrganizationMember.organization_id == Organization.id
    ).filter(
        OrganizationMember.user_id == user_id
    ).order_by(Organization.name).all()

    return [
        Membership(organization=org, role=role, is_owner=org.owner_id == user_id)
        for org, role in rows
    ]


def get_public_organizations(db: Session, user_id: str) -> List[Organization]:
    """Public organizations the user does not already belong to."""
    member_of = select(OrganizationMember.organization_id).where(
        OrganizationMember.user_id == user_id
    )
    return db.query(Organization).filter(
        Organization.is_public.is_(True),
        Organization.id.notin_(member_of),
    ).order_by(Organization.name).all()


def join_organization(db: Session, organization_id: str, user_id: str) -> OrganizationMember:
    organization = _get_organization_or_raise(db, organization_id)
    if not organization.is_public:
        raise UnauthorizedError("This organization is private")

    if _get_member(db, organization_id, user_id) is not None:
        raise InvalidStateError("You are already a member of this organization")

    member = OrganizationMember(
        organization_id=organization_id,
        user_id=user_id,
        role=ROLE_MEMBER,
        joined_at=utcnow(),
    )
    try:
        db.add(member)
        db.commit()
        db.refresh(member)
    except IntegrityError:
        db.rollback()
        raise InvalidStateError("You are already a member of this organization")

    logger.info("organization_joined", organization_id=organization_id, user_id=user_id)
    return member


def leave_organization(db: Session, organization_id: str, user_id: str) -> None:
    organization = _get_organization_or_raise(db, organization_id)
    if organization.owner_id == user_id:
        raise InvalidStateError("The owner cannot leave the organization")

    member = _get_member(db, organization_id, user_id)
    if member is None:
        raise InvalidStateError("You are not a member of this organization")

    db.delete(member)
    db.commit()
    logger.info("organization_left", organization_id=organization_id, user_id=user_id)


def get_organization_members(db: Session, organization_id: str) -> List[OrganizationMember]:
    return db.query(OrganizationMember).filter(
        OrganizationMember.organization_id == organization_id
    ).order_by(OrganizationMember.joined_at).all()


def is_user_member_of_organization(db: Session, organization_id: str, user_id: str) -> bool:
    return _get_member(db, organization_id, user_id) is not None


def get_user_role_in_organization(db: Session, organization_id: str, user_id: str) -> Optional[str]:
    member = _get_member(db, organization_id, user_id)
    return member.role if member else None
