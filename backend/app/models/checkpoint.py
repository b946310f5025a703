"""
Modèle SQLAlchemy pour les checkpoints (points de passage géolocalisés).
Créés et modifiés par le staff depuis le tableau de bord.
"""

from sqlalchemy import Column, DateTime, Float, Integer, String, Text, func

from app.database import Base


class Checkpoint(Base):
    """Point de passage physique portant une valeur en points."""
    __tablename__ = "checkpoints"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    point_value = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
