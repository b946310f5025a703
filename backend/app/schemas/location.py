"""
Schémas Pydantic pour les positions des équipes.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from app.database import as_utc


class LocationReport(BaseModel):
    """Relevé envoyé par l'appareil d'une équipe. timestamp = instant du relevé côté client."""
    team_id: int = Field(validation_alias=AliasChoices("teamId", "team_id"))
    latitude: float
    longitude: float
    timestamp: Optional[datetime] = None

    @field_validator("latitude")
    @classmethod
    def valid_latitude(cls, v: float) -> float:
        if not -90 <= v <= 90:
            raise ValueError("La latitude doit être comprise entre -90 et 90.")
        return v

    @field_validator("longitude")
    @classmethod
    def valid_longitude(cls, v: float) -> float:
        if not -180 <= v <= 180:
            raise ValueError("La longitude doit être comprise entre -180 et 180.")
        return v


class TeamLocationResponse(BaseModel):
    team_id: int
    latitude: float
    longitude: float
    timestamp: datetime

    model_config = {"from_attributes": True}

    @field_validator("timestamp")
    @classmethod
    def timestamp_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class TeamLocationsResponse(BaseModel):
    data: List[TeamLocationResponse]


class LocationResetResponse(BaseModel):
    success: bool
    message: str
    deleted_count: int
