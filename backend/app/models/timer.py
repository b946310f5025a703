"""
Modèle SQLAlchemy du chrono partagé (ligne unique, id = 1).

La colonne version sert de jeton de concurrence optimiste : SQLAlchemy l'incrémente
à chaque UPDATE et lève StaleDataError si la ligne a été modifiée entre-temps.
"""

from sqlalchemy import Column, DateTime, Integer, String, func

from app.database import Base

TIMER_ROW_ID = 1


class TimerState(Base):
    __tablename__ = "timer_state"

    id = Column(Integer, primary_key=True, default=TIMER_ROW_ID)
    status = Column(String(20), nullable=False, default="not_started")  # not_started, running, finished
    end_time = Column(DateTime(timezone=True), nullable=True)           # Renseigné uniquement si running
    duration = Column(Integer, nullable=False)                          # Secondes
    version = Column(Integer, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __mapper_args__ = {"version_id_col": version}
