import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class InvitationCreate(BaseModel):
    # Syntax is checked by the service, after the role check
    email: str = Field(min_length=1, max_length=255)
    child_id: uuid.UUID


class InvitationCreated(BaseModel):
    invitation_id: uuid.UUID
    email: str
    token: str
    expires_at: datetime
    invitation_url: str


class InvitationValidation(BaseModel):
    email: str
    child_name: str
    invited_by: str
    expires_at: datetime
    status: str


class InvitationAccept(BaseModel):
    token: str = Field(min_length=1)
    full_name: str | None = Field(None, max_length=100)


class InvitationAcceptResponse(BaseModel):
    success: bool = True
    child_id: uuid.UUID
    message: str = "Parent account linked to child"


class InvitationListItem(BaseModel):
    id: uuid.UUID
    email: str
    token: str
    child_name: str
    invited_by: str
    status: str
    expires_at: datetime
    created_at: datetime
    accepted_at: datetime | None = None
