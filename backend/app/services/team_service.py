"""
Service métier pour les équipes : CRUD staff, classement et ajustement manuel des points.
"""

import logging
import secrets
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.checkin import Checkin
from app.models.checkpoint import Checkpoint
from app.models.team import Team
from app.schemas.checkpoint import CheckpointResponse
from app.schemas.team import (
    AddPointsResponse,
    TeamCheckinResponse,
    TeamCreate,
    TeamResponse,
    TeamUpdate,
)

logger = logging.getLogger(__name__)


def _generate_team_code() -> str:
    """Code de connexion court, lisible et difficile à deviner (ex. 'k3f9a2')."""
    return secrets.token_hex(3)


def list_teams(db: Session) -> List[TeamResponse]:
    """Classement : équipes triées par score décroissant."""
    teams = db.execute(
        select(Team).order_by(Team.total_score.desc(), Team.id)
    ).scalars().all()
    return [TeamResponse.model_validate(t) for t in teams]


def get_team(db: Session, team_id: int) -> Optional[TeamResponse]:
    team = db.get(Team, team_id)
    if team is None:
        return None
    return TeamResponse.model_validate(team)


def create_team(db: Session, data: TeamCreate) -> TeamResponse:
    """
    Crée une équipe avec un score à 0.
    Lève ValueError si le code d'équipe est déjà utilisé.
    """
    team = Team(
        name=data.name,
        color=data.color,
        total_score=0,
        team_code=data.team_code or _generate_team_code(),
    )
    db.add(team)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValueError(f"Le code d'équipe '{team.team_code}' est déjà utilisé.")
    db.refresh(team)

    logger.info("Équipe créée : %s (%s)", team.name, team.id)
    return TeamResponse.model_validate(team)


def update_team(db: Session, team_id: int, data: TeamUpdate) -> Optional[TeamResponse]:
    """
    Met à jour le nom et/ou la couleur d'une équipe.
    Lève ValueError si aucun champ n'est fourni, retourne None si l'équipe n'existe pas.
    """
    update_data = data.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise ValueError("Au moins un champ (name ou color) doit être fourni.")

    team = db.get(Team, team_id)
    if team is None:
        return None

    for field, value in update_data.items():
        setattr(team, field, value)
    db.commit()
    db.refresh(team)
    return TeamResponse.model_validate(team)


def delete_team(db: Session, team_id: int) -> bool:
    """Supprime une équipe. Retourne False si elle n'existe pas."""
    team = db.get(Team, team_id)
    if team is None:
        return False

    db.delete(team)
    db.commit()
    logger.info("Équipe supprimée : %s", team_id)
    return True


def add_points(db: Session, team_id: int, points: int) -> AddPointsResponse:
    """
    Ajoute (ou retire si négatif) des points à une équipe par incrément atomique.
    Aucun plancher : un score peut devenir négatif.
    Lève ValueError si l'équipe est introuvable.
    """
    result = db.execute(
        update(Team)
        .where(Team.id == team_id)
        .values(total_score=Team.total_score + points)
    )
    if result.rowcount == 0:
        db.rollback()
        raise ValueError(f"Équipe {team_id} introuvable.")
    db.commit()

    total = db.execute(select(Team.total_score).where(Team.id == team_id)).scalar()
    logger.info("Ajustement manuel : équipe %s %+d points (total %s)", team_id, points, total)

    if points >= 0:
        message = f"{points} points ajoutés."
    else:
        message = f"{abs(points)} points retirés."
    return AddPointsResponse(success=True, message=message, total_score=total)


def get_team_checkins(db: Session, team_id: int) -> List[TeamCheckinResponse]:
    """Passages d'une équipe avec le checkpoint associé, du plus ancien au plus récent."""
    rows = db.execute(
        select(Checkin, Checkpoint)
        .outerjoin(Checkpoint, Checkpoint.id == Checkin.checkpoint_id)
        .where(Checkin.team_id == team_id)
        .order_by(Checkin.timestamp)
    ).all()

    return [
        TeamCheckinResponse(
            id=checkin.id,
            team_id=checkin.team_id,
            checkpoint_id=checkin.checkpoint_id,
            timestamp=checkin.timestamp,
            checkpoint=CheckpointResponse.model_validate(checkpoint) if checkpoint else None,
        )
        for checkin, checkpoint in rows
    ]
