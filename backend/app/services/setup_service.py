"""
Initialisation des données d'un événement.

- Compte administrateur (mot de passe haché) si aucun membre du staff n'existe
- Équipes d'exemple si la table est vide
- Checkpoints d'exemple si la table est vide
Idempotent : un second appel ne crée rien.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.checkpoint import Checkpoint
from app.models.staff import Staff
from app.models.team import Team
from app.schemas.setup import SetupCounts, SetupRequest

logger = logging.getLogger(__name__)

SAMPLE_TEAMS = [
    {"name": "Équipe Rouge", "color": "#FF5555"},
    {"name": "Équipe Bleue", "color": "#5555FF"},
    {"name": "Équipe Verte", "color": "#55AA55"},
    {"name": "Équipe Jaune", "color": "#FFAA00"},
]

SAMPLE_CHECKPOINTS = [
    {"name": "Départ", "description": "Point de départ de la course", "latitude": 35.7219, "longitude": 139.7753, "point_value": 10},
    {"name": "Entrée principale", "description": "Devant le portail principal", "latitude": 35.7225, "longitude": 139.7748, "point_value": 20},
    {"name": "Bibliothèque", "description": "Parvis de la bibliothèque", "latitude": 35.723, "longitude": 139.776, "point_value": 30},
]


def _count(db: Session, model) -> int:
    return db.execute(select(func.count()).select_from(model)).scalar() or 0


def has_staff(db: Session) -> bool:
    return _count(db, Staff) > 0


def seed_initial_data(db: Session, data: SetupRequest) -> SetupCounts:
    """
    Crée les données initiales manquantes.
    Retourne le nombre d'enregistrements présents AVANT l'initialisation.
    """
    counts = SetupCounts(
        staff_count=_count(db, Staff),
        team_count=_count(db, Team),
        checkpoint_count=_count(db, Checkpoint),
    )

    if counts.staff_count == 0:
        admin = Staff(name=data.admin_name, is_admin=True)
        admin.set_password(data.admin_password)
        db.add(admin)

    if counts.team_count == 0:
        for i, team in enumerate(SAMPLE_TEAMS, start=1):
            # Codes d'exemple prévisibles : à remplacer avant l'événement
            db.add(Team(name=team["name"], color=team["color"], total_score=0, team_code=f"team{i:02d}"))

    if counts.checkpoint_count == 0:
        for checkpoint in SAMPLE_CHECKPOINTS:
            db.add(Checkpoint(**checkpoint))

    db.commit()

    logger.info(
        "Initialisation : staff=%d, équipes=%d, checkpoints=%d existants avant l'appel",
        counts.staff_count, counts.team_count, counts.checkpoint_count,
    )
    return counts
