"""
Modèle SQLAlchemy pour les membres du staff (organisateurs).
Les mots de passe sont stockés hachés (werkzeug.security).
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func
from werkzeug.security import check_password_hash, generate_password_hash

from app.database import Base


class Staff(Base):
    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    checkpoint_id = Column(Integer, ForeignKey("checkpoints.id", ondelete="SET NULL"), nullable=True)
    is_admin = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)
