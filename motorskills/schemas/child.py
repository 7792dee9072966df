import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

from motorskills.services.age_service import calculate_age, format_age


class ChildCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    birthdate: date
    grade: str | None = None
    notes: str | None = None


class ChildUpdate(BaseModel):
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    birthdate: date | None = None
    grade: str | None = None
    notes: str | None = None


class AgeResponse(BaseModel):
    years: int
    months: int
    label: str


class ChildResponse(BaseModel):
    id: uuid.UUID
    owner_profile_id: uuid.UUID
    first_name: str
    last_name: str
    birthdate: date
    grade: str | None = None
    notes: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def age(self) -> AgeResponse:
        years, months = calculate_age(self.birthdate)
        return AgeResponse(years=years, months=months, label=format_age(self.birthdate))
