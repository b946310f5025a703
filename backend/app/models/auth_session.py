"""
Modèle SQLAlchemy pour les sessions émises par le serveur.
Le cookie ne contient qu'un jeton opaque, revalidé en base à chaque requête.
"""

from sqlalchemy import Column, DateTime, Integer, String

from app.database import Base, utcnow


class AuthSession(Base):
    __tablename__ = "auth_sessions"

    token = Column(String(64), primary_key=True)
    kind = Column(String(10), nullable=False)        # team, staff
    subject_id = Column(Integer, nullable=False)     # teams.id ou staff.id selon kind
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    expires_at = Column(DateTime(timezone=True), nullable=False)
