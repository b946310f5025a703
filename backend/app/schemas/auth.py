"""
Schémas Pydantic pour la connexion des équipes et du staff.
"""

from typing import Optional

from pydantic import BaseModel, field_validator

from app.schemas.checkpoint import CheckpointResponse


class TeamLogin(BaseModel):
    team_code: str

    @field_validator("team_code")
    @classmethod
    def code_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le code d'équipe est obligatoire.")
        return v.strip()


class StaffLogin(BaseModel):
    name: str
    passcode: str

    @field_validator("name", "passcode")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom et le mot de passe sont obligatoires.")
        return v


class TeamInfo(BaseModel):
    id: int
    name: str
    team_code: str
    color: str
    total_score: int

    model_config = {"from_attributes": True}


class StaffInfo(BaseModel):
    id: int
    name: str
    checkpoint_id: Optional[int]
    is_admin: bool = False

    model_config = {"from_attributes": True}


class TeamLoginResponse(BaseModel):
    success: bool
    message: str
    team: TeamInfo


class StaffLoginResponse(BaseModel):
    success: bool
    message: str
    data: StaffInfo


class TeamSessionResponse(BaseModel):
    authenticated: bool
    team: TeamInfo


class StaffSessionResponse(BaseModel):
    authenticated: bool
    staff: StaffInfo


class StaffDetail(StaffInfo):
    """Membre du staff avec le checkpoint dont il a la charge."""
    checkpoint: Optional[CheckpointResponse] = None


class LogoutResponse(BaseModel):
    success: bool
    message: str = "Déconnexion effectuée."
