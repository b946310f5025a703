"""
Modèle SQLAlchemy pour les équipes participantes.
"""

from sqlalchemy import Column, DateTime, Integer, String, func

from app.database import Base


class Team(Base):
    """Équipe identifiée par un code de connexion, cumulant un score."""
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    color = Column(String(7), nullable=False, default="#888888")  # Couleur d'affichage (#RRGGBB)
    total_score = Column(Integer, nullable=False, default=0)       # Pas de plancher à 0
    team_code = Column(String(50), unique=True, nullable=False)    # Identifiant de connexion
    created_at = Column(DateTime(timezone=True), server_default=func.now())
