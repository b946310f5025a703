"""
Service métier pour l'enregistrement des passages aux checkpoints.

Flux d'un passage :
  1. Refus si un passage existe déjà pour (équipe, checkpoint)
  2. Refus si le checkpoint ou l'équipe est introuvable
  3. Insertion du passage (la contrainte uq_checkin_team_checkpoint tranche
     entre deux requêtes concurrentes qui auraient passé l'étape 1)
  4. Incrément atomique du score : UPDATE teams SET total_score = total_score + :points
Les étapes 3 et 4 sont dans la même transaction.
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.checkin import Checkin
from app.models.checkpoint import Checkpoint
from app.models.team import Team
from app.schemas.checkin import CheckinResult

logger = logging.getLogger(__name__)

ALREADY_CHECKED_IN = "Ce checkpoint a déjà été validé par votre équipe."


def attempt_checkin(db: Session, team_id: int, checkpoint_id: int) -> CheckinResult:
    """
    Tente d'enregistrer le passage d'une équipe à un checkpoint.

    Un refus métier (doublon, checkpoint ou équipe inconnus) est renvoyé avec
    success=False. Une erreur de persistance est journalisée, annulée puis propagée.
    """
    existing = db.execute(
        select(Checkin).where(
            Checkin.team_id == team_id,
            Checkin.checkpoint_id == checkpoint_id,
        )
    ).scalar()
    if existing:
        logger.info("Passage refusé (doublon) : équipe %s, checkpoint %s", team_id, checkpoint_id)
        return CheckinResult(success=False, message=ALREADY_CHECKED_IN)

    checkpoint = db.get(Checkpoint, checkpoint_id)
    if checkpoint is None:
        return CheckinResult(success=False, message=f"Checkpoint {checkpoint_id} introuvable.")

    team = db.get(Team, team_id)
    if team is None:
        return CheckinResult(success=False, message=f"Équipe {team_id} introuvable.")

    points = checkpoint.point_value or 0
    checkin = Checkin(team_id=team_id, checkpoint_id=checkpoint_id)

    try:
        db.add(checkin)
        db.flush()
    except IntegrityError:
        # Une requête concurrente a inséré la même paire entre la vérification et l'insertion
        db.rollback()
        logger.info("Passage concurrent rejeté par la contrainte d'unicité : équipe %s, checkpoint %s",
                    team_id, checkpoint_id)
        return CheckinResult(success=False, message=ALREADY_CHECKED_IN)

    try:
        db.execute(
            update(Team)
            .where(Team.id == team_id)
            .values(total_score=Team.total_score + points)
        )
        db.commit()
    except Exception:
        db.rollback()
        logger.error("Échec de l'incrément du score : équipe %s, checkpoint %s", team_id, checkpoint_id)
        raise

    logger.info(
        "Passage enregistré : équipe %s au checkpoint %s (+%d points)",
        team_id, checkpoint_id, points,
    )
    return CheckinResult(
        success=True,
        message=f"Passage validé ! {points} points gagnés.",
        points_added=points,
        checkin_id=checkin.id,
    )
