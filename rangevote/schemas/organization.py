"""Organization schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rangevote.core.sanitization import (
    MAX_ORGANIZATION_NAME_LENGTH,
    sanitize_description,
    sanitize_name,
)


class OrganizationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=MAX_ORGANIZATION_NAME_LENGTH)
    description: Optional[str] = None
    is_public: bool = False

    @field_validator('name')
    @classmethod
    def sanitize_name_field(cls, v: str) -> str:
        return sanitize_name(v, MAX_ORGANIZATION_NAME_LENGTH, "Organization name")

    @field_validator('description')
    @classmethod
    def sanitize_description_field(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_description(v)


class OrganizationUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=MAX_ORGANIZATION_NAME_LENGTH)
    description: Optional[str] = None
    is_public: Optional[bool] = None

    @field_validator('name')
    @classmethod
    def sanitize_name_field(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return sanitize_name(v, MAX_ORGANIZATION_NAME_LENGTH, "Organization name")

    @field_validator('description')
    @classmethod
    def sanitize_description_field(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_description(v)


class OrganizationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    owner_id: str
    is_public: bool
    created_at: datetime


class MyOrganization(OrganizationResponse):
    role: str
    is_owner: bool


class MemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    role: str
    joined_at: datetime
