"""
Service d'authentification des équipes et du staff.

- Staff : nom + mot de passe vérifié contre le hash werkzeug
- Équipe : code d'équipe
Une connexion réussie crée une ligne auth_sessions ; le cookie ne porte que le jeton
opaque, revalidé en base (existence + expiration + sujet encore présent) à chaque requête.
"""

import logging
import secrets
from datetime import timedelta
from typing import Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.config import settings
from app.database import as_utc, utcnow
from app.models.auth_session import AuthSession
from app.models.checkpoint import Checkpoint
from app.models.staff import Staff
from app.models.team import Team
from app.schemas.auth import StaffDetail
from app.schemas.checkpoint import CheckpointResponse

logger = logging.getLogger(__name__)

TEAM_KIND = "team"
STAFF_KIND = "staff"


def authenticate_staff(db: Session, name: str, passcode: str) -> Optional[Staff]:
    """Retourne le membre du staff si le couple nom / mot de passe est valide, sinon None."""
    staff = db.execute(select(Staff).where(Staff.name == name)).scalar()
    if staff is None or not staff.check_password(passcode):
        logger.info("Échec de connexion staff pour '%s'", name)
        return None
    return staff


def authenticate_team(db: Session, team_code: str) -> Optional[Team]:
    """Retourne l'équipe correspondant au code, sinon None."""
    team = db.execute(select(Team).where(Team.team_code == team_code)).scalar()
    if team is None:
        logger.info("Code d'équipe inconnu : '%s'", team_code)
    return team


def create_session(db: Session, kind: str, subject_id: int) -> AuthSession:
    """Émet un jeton de session pour une équipe ou un membre du staff."""
    hours = settings.STAFF_SESSION_HOURS if kind == STAFF_KIND else settings.TEAM_SESSION_HOURS
    session = AuthSession(
        token=secrets.token_urlsafe(32),
        kind=kind,
        subject_id=subject_id,
        expires_at=utcnow() + timedelta(hours=hours),
    )
    db.add(session)
    db.commit()

    logger.info("Session %s ouverte pour %s", kind, subject_id)
    return session


def resolve_session(db: Session, token: Optional[str], kind: str) -> Tuple[Optional[AuthSession], object]:
    """
    Retrouve la session et son sujet (Team ou Staff) à partir du jeton du cookie.
    Retourne (None, None) si le jeton est absent, inconnu, expiré ou si le sujet a disparu.
    Une session expirée est supprimée au passage.
    """
    if not token:
        return None, None

    session = db.get(AuthSession, token)
    if session is None or session.kind != kind:
        return None, None

    if as_utc(session.expires_at) <= utcnow():
        db.delete(session)
        db.commit()
        return None, None

    model = Staff if kind == STAFF_KIND else Team
    subject = db.get(model, session.subject_id)
    if subject is None:
        return None, None
    return session, subject


def revoke_session(db: Session, token: Optional[str]) -> bool:
    """Supprime la session associée au jeton. Retourne True si une session a été supprimée."""
    if not token:
        return False
    result = db.execute(delete(AuthSession).where(AuthSession.token == token))
    db.commit()
    return bool(result.rowcount)


def purge_expired_sessions(db: Session) -> int:
    """Supprime les sessions expirées (job planifié)."""
    result = db.execute(
        delete(AuthSession)
        .where(AuthSession.expires_at <= utcnow())
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount or 0


def get_staff_detail(db: Session, staff_id: int) -> Optional[StaffDetail]:
    """Membre du staff avec son checkpoint affecté, sans le hash du mot de passe."""
    staff = db.get(Staff, staff_id)
    if staff is None:
        return None

    checkpoint = db.get(Checkpoint, staff.checkpoint_id) if staff.checkpoint_id else None
    return StaffDetail(
        id=staff.id,
        name=staff.name,
        checkpoint_id=staff.checkpoint_id,
        is_admin=bool(staff.is_admin),
        checkpoint=CheckpointResponse.model_validate(checkpoint) if checkpoint else None,
    )
