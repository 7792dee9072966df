import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# Horizon bound in days; negative values create already expired links
MAX_EXPIRES_IN_DAYS = 3650


class SharedLinkCreate(BaseModel):
    assessment_id: uuid.UUID
    # Defaults to SHARE_LINK_EXPIRE_DAYS
    expires_in_days: int | None = Field(None, ge=-MAX_EXPIRES_IN_DAYS, le=MAX_EXPIRES_IN_DAYS)
    one_time: bool = False


class SharedLinkResponse(BaseModel):
    id: uuid.UUID
    assessment_id: uuid.UUID
    token: str
    expires_at: datetime
    one_time: bool
    accessed_at: datetime | None = None
    created_at: datetime
    share_url: str

    model_config = ConfigDict(from_attributes=True)
