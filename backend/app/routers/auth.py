"""
Routers de connexion des équipes et du staff.
Le cookie de session ne contient qu'un jeton opaque (httpOnly), validé en base à chaque requête.
"""

from typing import Optional

from fastapi import APIRouter, Cookie, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.dependencies import STAFF_COOKIE, TEAM_COOKIE, get_current_staff, get_current_team
from app.models.staff import Staff
from app.models.team import Team
from app.schemas.auth import (
    LogoutResponse,
    StaffDetail,
    StaffInfo,
    StaffLogin,
    StaffLoginResponse,
    StaffSessionResponse,
    TeamInfo,
    TeamLogin,
    TeamLoginResponse,
    TeamSessionResponse,
)
from app.services import auth_service

# Déclarés avant /api/v1/teams/{team_id} dans main.py
team_auth_router = APIRouter(prefix="/api/v1/teams", tags=["Connexion équipes"])
staff_router = APIRouter(prefix="/api/v1/staff", tags=["Staff"])


def _set_session_cookie(response: Response, name: str, token: str, hours: int) -> None:
    response.set_cookie(
        key=name,
        value=token,
        max_age=hours * 3600,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


# ============================================================
# Équipes
# ============================================================

@team_auth_router.post("/auth", response_model=TeamLoginResponse, summary="Connexion d'une équipe")
def team_login(data: TeamLogin, response: Response, db: Session = Depends(get_db)):
    team = auth_service.authenticate_team(db, data.team_code)
    if team is None:
        raise HTTPException(status_code=401, detail="Code d'équipe invalide.")

    session = auth_service.create_session(db, auth_service.TEAM_KIND, team.id)
    _set_session_cookie(response, TEAM_COOKIE, session.token, settings.TEAM_SESSION_HOURS)
    return TeamLoginResponse(success=True, message="Connexion réussie.", team=TeamInfo.model_validate(team))


@team_auth_router.get("/session", response_model=TeamSessionResponse, summary="Équipe connectée")
def team_session(team: Team = Depends(get_current_team)):
    return TeamSessionResponse(authenticated=True, team=TeamInfo.model_validate(team))


@team_auth_router.post("/logout", response_model=LogoutResponse, summary="Déconnexion d'une équipe")
def team_logout(
    response: Response,
    team_session: Optional[str] = Cookie(None),
    db: Session = Depends(get_db),
):
    auth_service.revoke_session(db, team_session)
    response.delete_cookie(TEAM_COOKIE, path="/")
    return LogoutResponse(success=True)


# ============================================================
# Staff
# ============================================================

@staff_router.post("/auth", response_model=StaffLoginResponse, summary="Connexion d'un membre du staff")
def staff_login(data: StaffLogin, response: Response, db: Session = Depends(get_db)):
    staff = auth_service.authenticate_staff(db, data.name, data.passcode)
    if staff is None:
        raise HTTPException(status_code=401, detail="Nom ou mot de passe incorrect.")

    session = auth_service.create_session(db, auth_service.STAFF_KIND, staff.id)
    _set_session_cookie(response, STAFF_COOKIE, session.token, settings.STAFF_SESSION_HOURS)
    return StaffLoginResponse(success=True, message="Connexion réussie.", data=StaffInfo.model_validate(staff))


@staff_router.get("/session", response_model=StaffSessionResponse, summary="Membre du staff connecté")
def staff_session(staff: Staff = Depends(get_current_staff)):
    return StaffSessionResponse(authenticated=True, staff=StaffInfo.model_validate(staff))


@staff_router.post("/logout", response_model=LogoutResponse, summary="Déconnexion du staff")
def staff_logout(
    response: Response,
    staff_session: Optional[str] = Cookie(None),
    db: Session = Depends(get_db),
):
    auth_service.revoke_session(db, staff_session)
    response.delete_cookie(STAFF_COOKIE, path="/")
    return LogoutResponse(success=True)


@staff_router.get(
    "/{staff_id}",
    response_model=StaffDetail,
    summary="Détail d'un membre du staff",
    dependencies=[Depends(get_current_staff)],
)
def get_staff(staff_id: int, db: Session = Depends(get_db)):
    """Retourne un membre du staff avec le checkpoint dont il a la charge (sans mot de passe)."""
    staff = auth_service.get_staff_detail(db, staff_id)
    if staff is None:
        raise HTTPException(status_code=404, detail="Membre du staff introuvable.")
    return staff
