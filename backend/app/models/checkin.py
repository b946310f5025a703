"""
Modèle SQLAlchemy pour les passages d'équipes aux checkpoints.

La contrainte d'unicité (team_id, checkpoint_id) est portée par la base :
deux requêtes concurrentes pour la même paire ne peuvent pas insérer deux lignes.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint

from app.database import Base, utcnow


class Checkin(Base):
    """Passage enregistré d'une équipe à un checkpoint (immuable)."""
    __tablename__ = "checkins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_id = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    checkpoint_id = Column(Integer, ForeignKey("checkpoints.id", ondelete="CASCADE"), nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("team_id", "checkpoint_id", name="uq_checkin_team_checkpoint"),
    )
