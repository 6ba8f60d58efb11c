"""Ballot schemas."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rangevote.core.sanitization import (
    MAX_BALLOT_NAME_LENGTH,
    MAX_CANDIDATE_NAME_LENGTH,
    sanitize_description,
    sanitize_name,
    validate_id_format,
    validate_image_link,
)
from rangevote.db.models import BallotStatus, UserPermission


class CandidateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=MAX_CANDIDATE_NAME_LENGTH)
    description: Optional[str] = None
    image_link: Optional[str] = None

    @field_validator('name')
    @classmethod
    def sanitize_name_field(cls, v: str) -> str:
        return sanitize_name(v, MAX_CANDIDATE_NAME_LENGTH, "Candidate name")

    @field_validator('description')
    @classmethod
    def sanitize_description_field(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_description(v)

    @field_validator('image_link')
    @classmethod
    def validate_image_link_field(cls, v: Optional[str]) -> Optional[str]:
        return validate_image_link(v)


class BallotCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=MAX_BALLOT_NAME_LENGTH)
    description: Optional[str] = None
    candidates: List[CandidateCreate] = Field(..., min_length=1)
    organization_id: Optional[str] = None
    is_public: bool = False
    close_date: Optional[datetime] = None
    # New ballots start Open unless saved as a draft
    status: BallotStatus = BallotStatus.OPEN

    @field_validator('name')
    @classmethod
    def sanitize_name_field(cls, v: str) -> str:
        """Sanitize and validate ballot name."""
        return sanitize_name(v, MAX_BALLOT_NAME_LENGTH, "Ballot name")

    @field_validator('description')
    @classmethod
    def sanitize_description_field(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_description(v)

    @field_validator('organization_id')
    @classmethod
    def validate_organization_id(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return validate_id_format(v, "Organization id")

    @field_validator('status')
    @classmethod
    def validate_initial_status(cls, v: BallotStatus) -> BallotStatus:
        if v not in (BallotStatus.OPEN, BallotStatus.DRAFT):
            raise ValueError("A new ballot must be Open or Draft")
        return v


class BallotUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=MAX_BALLOT_NAME_LENGTH)
    description: Optional[str] = None
    is_public: Optional[bool] = None
    close_date: Optional[datetime] = None

    @field_validator('name')
    @classmethod
    def sanitize_name_field(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return sanitize_name(v, MAX_BALLOT_NAME_LENGTH, "Ballot name")

    @field_validator('description')
    @classmethod
    def sanitize_description_field(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_description(v)


class CandidateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    image_link: Optional[str] = None


class BallotResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    owner_id: str
    organization_id: Optional[str] = None
    status: BallotStatus
    is_open: bool
    is_public: bool
    created_at: datetime
    open_date: Optional[datetime] = None
    close_date: Optional[datetime] = None
    candidate_count: int
    vote_count: int


class AccessResponse(BaseModel):
    can_view: bool
    can_vote: bool
    can_edit: bool
    is_owner: bool
    via_share_link: bool


class BallotDetail(BallotResponse):
    candidates: List[CandidateResponse]
    access: AccessResponse


class BallotListItem(BallotResponse):
    is_owner: bool
    permission: Optional[UserPermission] = None


class InvitationCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    permission: UserPermission = UserPermission.VOTER


class InvitationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    ballot_id: str
    user_id: Optional[str] = None
    invited_email: Optional[str] = None
    permission: UserPermission
    created_at: datetime
    accepted_at: Optional[datetime] = None
