"""
Schémas Pydantic pour l'enregistrement d'un passage (scan du QR code d'un checkpoint).
Les clés camelCase (teamId, checkpointId) envoyées par l'application web sont acceptées.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class CheckinRequest(BaseModel):
    team_id: int = Field(validation_alias=AliasChoices("teamId", "team_id"))
    checkpoint_id: int = Field(validation_alias=AliasChoices("checkpointId", "checkpoint_id"))


class CheckinResult(BaseModel):
    """
    Résultat d'une tentative de passage.
    success=False n'est pas une erreur HTTP : passage déjà enregistré ou checkpoint inconnu.
    """
    success: bool
    message: str
    points_added: int = 0
    checkin_id: Optional[int] = None
