"""Organization endpoints."""
from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from rangevote.api.deps import get_current_user_id, get_db
from rangevote.core.errors import NotFoundError, UnauthorizedError
from rangevote.core.rate_limit import limiter, RATE_LIMITS
from rangevote.schemas import (
    MemberResponse,
    MyOrganization,
    OrganizationCreate,
    OrganizationResponse,
    OrganizationUpdate,
    SuccessResponse,
)
from rangevote.services import organizations as organization_service

router = APIRouter()


@router.post("", response_model=OrganizationResponse, status_code=201)
async def create_organization_endpoint(
    organization: OrganizationCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create an organization; the caller becomes its owner and first member."""
    created = organization_service.create_organization(
        db,
        name=organization.name,
        description=organization.description,
        is_public=organization.is_public,
        owner_id=user_id,
    )
    return OrganizationResponse.model_validate(created)


@router.get("", response_model=List[MyOrganization])
async def my_organizations(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return [
        MyOrganization(
            **OrganizationResponse.model_validate(membership.organization).model_dump(),
            role=membership.role,
            is_owner=membership.is_owner,
        )
        for membership in organization_service.get_organizations_for_user(db, user_id)
    ]


@router.get("/public", response_model=List[OrganizationResponse])
async def public_organizations(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Public organizations the caller could join."""
    return [
        OrganizationResponse.model_validate(org)
        for org in organization_service.get_public_organizations(db, user_id)
    ]


@router.get("/{organization_id}", response_model=OrganizationResponse)
async def get_organization_endpoint(
    organization_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    organization = organization_service.get_organization(db, organization_id)
    if organization is None:
        raise NotFoundError("Organization not found")

    if not organization.is_public and not organization_service.is_user_member_of_organization(
        db, organization_id, user_id
    ):
        raise UnauthorizedError("This organization is private")

    return OrganizationResponse.model_validate(organization)


@router.patch("/{organization_id}", response_model=OrganizationResponse)
async def update_organization_endpoint(
    organization_id: str,
    update: OrganizationUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    updated = organization_service.update_organization(
        db, organization_id, user_id, **update.model_dump(exclude_unset=True)
    )
    return OrganizationResponse.model_validate(updated)


@router.delete("/{organization_id}", response_model=SuccessResponse)
async def delete_organization_endpoint(
    organization_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Delete an organization (owner only). Its ballots are kept."""
    organization_service.delete_organization(db, organization_id, user_id)
    return SuccessResponse(message="Organization deleted")


@router.post("/{organization_id}/join", response_model=SuccessResponse)
@limiter.limit(RATE_LIMITS["join"])
async def join_organization_endpoint(
    request: Request,
    organization_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    organization_service.join_organization(db, organization_id, user_id)
    return SuccessResponse(message="Joined organization")


@router.post("/{organization_id}/leave", response_model=SuccessResponse)
async def leave_organization_endpoint(
    organization_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    organization_service.leave_organization(db, organization_id, user_id)
    return SuccessResponse(message="Left organization")


@router.get("/{organization_id}/members", response_model=List[MemberResponse])
async def organization_members(
    organization_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Member list, visible to members only."""
    if organization_service.get_organization(db, organization_id) is None:
        raise NotFoundError("Organization not found")
    if not organization_service.is_user_member_of_organization(db, organization_id, user_id):
        raise UnauthorizedError("Only members can see the member list")

    return [
        MemberResponse.model_validate(member)
        for member in organization_service.get_organization_members(db, organization_id)
    ]
