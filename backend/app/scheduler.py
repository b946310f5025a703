"""
Planificateur APScheduler des tâches de maintenance de l'événement.

- Finalisation du chrono : un chrono running dont l'échéance est passée devient finished
- Rétention des positions : purge du journal au-delà de LOCATION_HISTORY_RETENTION_HOURS
- Purge des sessions expirées
"""

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from app.config import settings
from app.database import SessionLocal

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def _finalize_timer_scheduled() -> None:
    """Tâche planifiée : passe le chrono en finished une fois l'échéance atteinte."""
    from app.services.timer_service import finalize_expired_timer

    db = SessionLocal()
    try:
        finalize_expired_timer(db)
    except Exception as exc:
        logger.error("Erreur lors de la finalisation du chrono : %s", exc, exc_info=True)
    finally:
        db.close()


def _prune_locations_scheduled() -> None:
    """Tâche planifiée : applique la politique de rétention du journal des positions."""
    from app.services.location_service import prune_location_history

    db = SessionLocal()
    try:
        prune_location_history(db)
    except Exception as exc:
        logger.error("Erreur lors de la purge des positions : %s", exc, exc_info=True)
    finally:
        db.close()


def _purge_sessions_scheduled() -> None:
    from app.services.auth_service import purge_expired_sessions

    db = SessionLocal()
    try:
        count = purge_expired_sessions(db)
        if count:
            logger.info("%d sessions expirées supprimées", count)
    except Exception as exc:
        logger.error("Erreur lors de la purge des sessions : %s", exc, exc_info=True)
    finally:
        db.close()


def start_scheduler() -> None:
    """Démarre le planificateur en arrière-plan (appelé au démarrage de l'API)."""
    if not settings.SCHEDULER_ENABLED:
        logger.info("Scheduler désactivé (SCHEDULER_ENABLED=false).")
        return

    scheduler.add_job(
        _finalize_timer_scheduled,
        trigger="interval",
        seconds=settings.TIMER_FINALIZE_INTERVAL_SECONDS,
        id="timer_finalize",
        replace_existing=True,
    )
    scheduler.add_job(
        _prune_locations_scheduled,
        trigger="interval",
        hours=1,
        id="location_history_retention",
        replace_existing=True,
    )
    scheduler.add_job(
        _purge_sessions_scheduled,
        trigger="interval",
        hours=6,
        id="expired_sessions_purge",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        "Scheduler démarré : chrono toutes les %ds, rétention positions %dh.",
        settings.TIMER_FINALIZE_INTERVAL_SECONDS,
        settings.LOCATION_HISTORY_RETENTION_HOURS,
    )


def stop_scheduler() -> None:
    """Arrête le planificateur proprement (appelé à l'arrêt de l'API)."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler arrêté.")
