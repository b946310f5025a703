"""
Modèles SQLAlchemy pour les positions des équipes.

- team_locations        : journal append-only de tous les relevés (purgé par rétention)
- team_latest_locations : une ligne par équipe, le relevé le plus récent
"""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer

from app.database import Base, utcnow


class TeamLocation(Base):
    """Relevé de position historique."""
    __tablename__ = "team_locations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_id = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)


class TeamLatestLocation(Base):
    """Position courante d'une équipe (max timestamp)."""
    __tablename__ = "team_latest_locations"

    team_id = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow)
