"""Marketplace schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class PublicBallot(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    organization_id: Optional[str] = None
    organization_name: Optional[str] = None
    close_date: Optional[datetime] = None
    candidate_count: int
    vote_count: int
    is_closing_soon: bool
