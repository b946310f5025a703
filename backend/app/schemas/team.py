"""
Schémas Pydantic pour les équipes et l'ajustement manuel des points.
"""

import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator

from app.schemas.checkpoint import CheckpointResponse

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def _check_color(v: Optional[str]) -> Optional[str]:
    if v is not None and not HEX_COLOR.match(v):
        raise ValueError("La couleur doit être au format #RRGGBB.")
    return v


class TeamCreate(BaseModel):
    name: str
    color: str
    team_code: Optional[str] = None  # Généré automatiquement si absent

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom de l'équipe ne peut pas être vide.")
        return v.strip()

    @field_validator("team_code")
    @classmethod
    def code_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Le code d'équipe ne peut pas être vide.")
        return v.strip() if v is not None else v

    color_is_hex = field_validator("color")(_check_color)


class TeamUpdate(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Le nom de l'équipe ne peut pas être vide.")
        return v.strip() if v is not None else v

    color_is_hex = field_validator("color")(_check_color)


class TeamResponse(BaseModel):
    id: int
    name: str
    color: str
    total_score: int
    team_code: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AddPointsRequest(BaseModel):
    """Ajustement signé : une valeur négative retire des points."""
    points: int


class AddPointsResponse(BaseModel):
    success: bool
    message: str
    total_score: int


class TeamCheckinResponse(BaseModel):
    """Passage d'une équipe avec le checkpoint associé."""
    id: int
    team_id: int
    checkpoint_id: int
    timestamp: datetime
    checkpoint: Optional[CheckpointResponse] = None


class TeamCheckinsResponse(BaseModel):
    data: List[TeamCheckinResponse]
