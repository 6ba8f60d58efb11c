"""Share link schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from rangevote.db.models import ShareLinkPermission


class ShareLinkCreate(BaseModel):
    permission: ShareLinkPermission = ShareLinkPermission.VIEW
    expires_at: Optional[datetime] = None


class ShareLinkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    ballot_id: str
    share_token: str
    permission: ShareLinkPermission
    created_at: datetime
    expires_at: Optional[datetime] = None
    is_active: bool
    use_count: int


class ShareLinkLookup(BaseModel):
    """What an anonymous holder of a token learns about it."""
    ballot_id: str
    permission: ShareLinkPermission
