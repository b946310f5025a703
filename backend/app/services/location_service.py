"""
Service des positions d'équipes (carte en direct).

Politique de rétention :
- Chaque relevé est ajouté au journal team_locations (append-only)
- team_latest_locations garde une ligne par équipe, remplacée seulement par un relevé
  au moins aussi récent : deux relevés arrivés dans le désordre ne font pas reculer
  la position courante
- Le journal est purgé au-delà de LOCATION_HISTORY_RETENTION_HOURS (job planifié)
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.config import settings
from app.database import as_utc, utcnow
from app.models.location import TeamLatestLocation, TeamLocation
from app.models.team import Team
from app.schemas.location import LocationReport, TeamLocationResponse

logger = logging.getLogger(__name__)


def report_location(db: Session, data: LocationReport) -> TeamLocationResponse:
    """
    Enregistre un relevé de position.
    Retourne la position courante de l'équipe après prise en compte du relevé.
    Lève ValueError si l'équipe est introuvable.
    """
    if db.get(Team, data.team_id) is None:
        raise ValueError(f"Équipe {data.team_id} introuvable.")

    observed_at = as_utc(data.timestamp) if data.timestamp else utcnow()

    db.add(TeamLocation(
        team_id=data.team_id,
        latitude=data.latitude,
        longitude=data.longitude,
        timestamp=observed_at,
    ))

    latest = db.get(TeamLatestLocation, data.team_id)
    if latest is None:
        latest = TeamLatestLocation(
            team_id=data.team_id,
            latitude=data.latitude,
            longitude=data.longitude,
            timestamp=observed_at,
        )
        db.add(latest)
    elif as_utc(latest.timestamp) <= observed_at:
        latest.latitude = data.latitude
        latest.longitude = data.longitude
        latest.timestamp = observed_at
    else:
        logger.debug("Relevé plus ancien que la position courante ignoré : équipe %s", data.team_id)

    db.commit()
    db.refresh(latest)
    return TeamLocationResponse.model_validate(latest)


def current_locations(db: Session) -> List[TeamLocationResponse]:
    """Retourne la position la plus récente de chaque équipe (une entrée par équipe)."""
    rows = db.execute(
        select(TeamLatestLocation).order_by(TeamLatestLocation.team_id)
    ).scalars().all()
    return [TeamLocationResponse.model_validate(r) for r in rows]


def team_location_history(db: Session, team_id: int, limit: int = 100) -> List[TeamLocationResponse]:
    """Retourne les derniers relevés d'une équipe, du plus récent au plus ancien."""
    rows = db.execute(
        select(TeamLocation)
        .where(TeamLocation.team_id == team_id)
        .order_by(TeamLocation.timestamp.desc())
        .limit(limit)
    ).scalars().all()
    return [TeamLocationResponse.model_validate(r) for r in rows]


def reset_locations(db: Session) -> int:
    """
    Supprime toutes les positions (nouvelle manche). Irréversible.
    Retourne le nombre de relevés historiques supprimés.
    """
    result = db.execute(delete(TeamLocation))
    db.execute(delete(TeamLatestLocation))
    db.commit()

    deleted = result.rowcount or 0
    logger.info("Positions réinitialisées : %d relevés supprimés", deleted)
    return deleted


def prune_location_history(db: Session, older_than: Optional[datetime] = None) -> int:
    """
    Purge le journal des relevés antérieurs à la fenêtre de rétention.
    Les positions courantes ne sont pas touchées.
    """
    if older_than is None:
        older_than = utcnow() - timedelta(hours=settings.LOCATION_HISTORY_RETENTION_HOURS)

    result = db.execute(
        delete(TeamLocation)
        .where(TeamLocation.timestamp < older_than)
        .execution_options(synchronize_session=False)
    )
    db.commit()

    deleted = result.rowcount or 0
    if deleted:
        logger.info("Rétention : %d relevés antérieurs à %s supprimés", deleted, older_than.isoformat())
    return deleted
