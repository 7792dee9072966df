import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Identity(BaseModel):
    """Authenticated identity supplied by the identity provider."""

    id: uuid.UUID
    email: str


class ProfileCreate(BaseModel):
    full_name: str = Field(min_length=1, max_length=100)


class ProfileResponse(BaseModel):
    id: uuid.UUID
    role: str  # admin | coach | parent
    full_name: str
    email: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
