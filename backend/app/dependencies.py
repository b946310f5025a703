"""
Dépendances FastAPI d'authentification.
Les cookies staff_session / team_session contiennent un jeton opaque résolu en base.
"""

from typing import NamedTuple, Optional

from fastapi import Cookie, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.staff import Staff
from app.models.team import Team
from app.services import auth_service

STAFF_COOKIE = "staff_session"
TEAM_COOKIE = "team_session"


class Actor(NamedTuple):
    """Auteur d'une requête : un membre du staff ou une équipe."""
    kind: str
    subject: object

    @property
    def is_staff(self) -> bool:
        return self.kind == auth_service.STAFF_KIND

    def can_act_for_team(self, team_id: int) -> bool:
        return self.is_staff or self.subject.id == team_id


def get_optional_staff(
    staff_session: Optional[str] = Cookie(None),
    db: Session = Depends(get_db),
) -> Optional[Staff]:
    _, staff = auth_service.resolve_session(db, staff_session, auth_service.STAFF_KIND)
    return staff


def get_current_staff(staff: Optional[Staff] = Depends(get_optional_staff)) -> Staff:
    """Exige une session staff valide (401 sinon)."""
    if staff is None:
        raise HTTPException(status_code=401, detail="Session staff absente ou expirée.")
    return staff


def get_current_team(
    team_session: Optional[str] = Cookie(None),
    db: Session = Depends(get_db),
) -> Team:
    """Exige une session équipe valide (401 sinon)."""
    _, team = auth_service.resolve_session(db, team_session, auth_service.TEAM_KIND)
    if team is None:
        raise HTTPException(status_code=401, detail="Session équipe absente ou expirée.")
    return team


def get_current_actor(
    staff_session: Optional[str] = Cookie(None),
    team_session: Optional[str] = Cookie(None),
    db: Session = Depends(get_db),
) -> Actor:
    """Accepte une session staff ou une session équipe (le staff est prioritaire)."""
    _, staff = auth_service.resolve_session(db, staff_session, auth_service.STAFF_KIND)
    if staff is not None:
        return Actor(auth_service.STAFF_KIND, staff)

    _, team = auth_service.resolve_session(db, team_session, auth_service.TEAM_KIND)
    if team is not None:
        return Actor(auth_service.TEAM_KIND, team)

    raise HTTPException(status_code=401, detail="Connexion requise.")
