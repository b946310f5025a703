"""
Schémas Pydantic pour l'initialisation des données d'un événement.
"""

from pydantic import BaseModel, field_validator


class SetupRequest(BaseModel):
    admin_name: str
    admin_password: str

    @field_validator("admin_name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom de l'administrateur est obligatoire.")
        return v.strip()

    @field_validator("admin_password")
    @classmethod
    def password_long_enough(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Le mot de passe administrateur doit contenir au moins 8 caractères.")
        return v


class SetupCounts(BaseModel):
    """Nombre d'enregistrements présents avant l'initialisation."""
    staff_count: int
    team_count: int
    checkpoint_count: int


class SetupResponse(BaseModel):
    success: bool
    message: str
    data: SetupCounts
