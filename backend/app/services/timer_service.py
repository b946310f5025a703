"""
Service du chrono partagé de l'événement.

Une seule ligne timer_state (id = 1) : {status, end_time, duration, version}.
Le temps restant se déduit de la ligne seule (end_time - now), chaque client
peut donc le recalculer indépendamment.

Transitions :
- start(duration) : running, end_time = now + duration (jamais cumulé avec un départ précédent)
- stop()          : not_started, end_time effacé, durée conservée
- reset()         : not_started, end_time effacé, durée par défaut
- finalisation    : running dont end_time est dépassé → finished, end_time effacé (job planifié)
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.config import settings
from app.database import as_utc, utcnow
from app.models.timer import TIMER_ROW_ID, TimerState
from app.schemas.timer import TimerView

logger = logging.getLogger(__name__)


class TimerConflictError(ValueError):
    """La ligne du chrono a été modifiée par une autre requête."""


def compute_timer_view(
    status: str,
    end_time: Optional[datetime],
    now: datetime,
) -> Tuple[str, Optional[int]]:
    """
    Calcule (statut effectif, secondes restantes) à partir de la ligne du chrono.

    - not_started            → (not_started, None)
    - finished               → (finished, 0)
    - running, now >= end    → (finished, 0)
    - running                → (running, floor(end - now))
    """
    if status == "finished":
        return "finished", 0
    if status != "running" or end_time is None:
        return "not_started", None

    remaining = (as_utc(end_time) - now).total_seconds()
    if remaining <= 0:
        return "finished", 0
    return "running", math.floor(remaining)


def to_view(timer: TimerState, now: Optional[datetime] = None) -> TimerView:
    status, remaining = compute_timer_view(timer.status, timer.end_time, now or utcnow())
    return TimerView(
        status=status,
        end_time=as_utc(timer.end_time),
        duration=timer.duration,
        remaining_seconds=remaining,
        version=timer.version,
    )


def get_timer(db: Session) -> TimerState:
    """Retourne la ligne du chrono, créée à la première lecture."""
    timer = db.get(TimerState, TIMER_ROW_ID)
    if timer is not None:
        return timer

    timer = TimerState(
        id=TIMER_ROW_ID,
        status="not_started",
        end_time=None,
        duration=settings.TIMER_DEFAULT_DURATION_SECONDS,
    )
    db.add(timer)
    try:
        db.commit()
    except IntegrityError:
        # Créée entre-temps par une requête concurrente
        db.rollback()
        return db.get(TimerState, TIMER_ROW_ID)

    db.refresh(timer)
    logger.info("Chrono initialisé (durée par défaut %ds)", timer.duration)
    return timer


def _save(db: Session, timer: TimerState) -> TimerState:
    """Commit avec contrôle de concurrence optimiste."""
    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        raise TimerConflictError("Le chrono a été modifié entre-temps, rechargez avant de réessayer.")
    db.refresh(timer)
    return timer


def _check_version(timer: TimerState, expected_version: Optional[int]) -> None:
    if expected_version is not None and expected_version != timer.version:
        raise TimerConflictError(
            f"Version du chrono obsolète (attendue {expected_version}, actuelle {timer.version})."
        )


def start_timer(db: Session, duration: int, expected_version: Optional[int] = None) -> TimerState:
    """
    Démarre (ou redémarre) le chrono pour `duration` secondes à partir de maintenant.
    Lève ValueError si la durée n'est pas strictement positive.
    """
    if duration is None or duration <= 0:
        raise ValueError("Une durée strictement positive est obligatoire pour démarrer le chrono.")

    timer = get_timer(db)
    _check_version(timer, expected_version)

    timer.status = "running"
    timer.duration = duration
    timer.end_time = utcnow() + timedelta(seconds=duration)
    timer = _save(db, timer)

    logger.info("Chrono démarré : %ds, fin prévue %s", duration, as_utc(timer.end_time).isoformat())
    return timer


def stop_timer(db: Session, expected_version: Optional[int] = None) -> TimerState:
    """Arrête le chrono : retour à not_started, end_time effacé, durée conservée."""
    timer = get_timer(db)
    _check_version(timer, expected_version)

    timer.status = "not_started"
    timer.end_time = None
    timer = _save(db, timer)

    logger.info("Chrono arrêté")
    return timer


def reset_timer(db: Session, expected_version: Optional[int] = None) -> TimerState:
    """Réinitialise le chrono : not_started, end_time effacé, durée par défaut."""
    timer = get_timer(db)
    _check_version(timer, expected_version)

    timer.status = "not_started"
    timer.end_time = None
    timer.duration = settings.TIMER_DEFAULT_DURATION_SECONDS
    timer = _save(db, timer)

    logger.info("Chrono réinitialisé")
    return timer


def finalize_expired_timer(db: Session) -> bool:
    """
    Réécrit un chrono running dont l'échéance est passée en finished.
    Retourne True si la ligne a été modifiée.
    """
    timer = db.get(TimerState, TIMER_ROW_ID)
    if timer is None or timer.status != "running" or timer.end_time is None:
        return False
    if as_utc(timer.end_time) > utcnow():
        return False

    timer.status = "finished"
    timer.end_time = None
    try:
        db.commit()
    except StaleDataError:
        # Un membre du staff a agi sur le chrono pendant la finalisation : sa modification prime
        db.rollback()
        return False

    logger.info("Chrono terminé (échéance atteinte)")
    return True
