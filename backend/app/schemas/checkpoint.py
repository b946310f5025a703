"""
Schémas Pydantic pour les checkpoints.
Création et modification par le staff, lecture publique (carte des équipes).
"""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator


def _check_latitude(v: Optional[float]) -> Optional[float]:
    if v is not None and not -90 <= v <= 90:
        raise ValueError("La latitude doit être comprise entre -90 et 90.")
    return v


def _check_longitude(v: Optional[float]) -> Optional[float]:
    if v is not None and not -180 <= v <= 180:
        raise ValueError("La longitude doit être comprise entre -180 et 180.")
    return v


class CheckpointCreate(BaseModel):
    """Données nécessaires pour créer un checkpoint. `points` est accepté comme alias."""
    name: str
    description: Optional[str] = None
    latitude: float
    longitude: float
    point_value: int = Field(0, validation_alias=AliasChoices("point_value", "points"))

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom du checkpoint ne peut pas être vide.")
        return v.strip()

    @field_validator("point_value")
    @classmethod
    def points_not_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("La valeur en points ne peut pas être négative.")
        return v

    latitude_in_range = field_validator("latitude")(_check_latitude)
    longitude_in_range = field_validator("longitude")(_check_longitude)


class CheckpointUpdate(BaseModel):
    """Mise à jour partielle : seuls les champs fournis sont modifiés."""
    name: Optional[str] = None
    description: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    point_value: Optional[int] = Field(None, validation_alias=AliasChoices("point_value", "points"))

    @field_validator("name", "latitude", "longitude", "point_value")
    @classmethod
    def not_null(cls, v):
        # Absent = inchangé ; null explicite refusé (colonnes NOT NULL)
        if v is None:
            raise ValueError("Ce champ ne peut pas être nul.")
        return v

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Le nom du checkpoint ne peut pas être vide.")
        return v.strip() if v is not None else v

    @field_validator("point_value")
    @classmethod
    def points_not_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("La valeur en points ne peut pas être négative.")
        return v

    latitude_in_range = field_validator("latitude")(_check_latitude)
    longitude_in_range = field_validator("longitude")(_check_longitude)


class CheckpointResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    latitude: float
    longitude: float
    point_value: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class NearestCheckpointResponse(BaseModel):
    """Checkpoint le plus proche d'une position et distance en mètres (haversine)."""
    checkpoint: CheckpointResponse
    distance_m: float


class CheckpointQrResponse(BaseModel):
    checkpoint_id: int
    checkpoint_name: str
    qr_url: str
