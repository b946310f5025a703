"""
Router pour le chrono partagé de l'événement.

Diffusion : les clients lisent GET /timer et s'abonnent à GET /timer/events
(Server-Sent Events) qui pousse la vue du chrono à chaque changement de version
ou de statut effectif.
"""

import asyncio

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.config import settings
from app.database import SessionLocal, get_db
from app.dependencies import get_current_staff
from app.schemas.timer import TimerAction, TimerResponse, TimerView
from app.services import timer_service

router = APIRouter(prefix="/api/v1/timer", tags=["Chrono"])


@router.get("", response_model=TimerResponse, summary="État du chrono")
def get_timer(db: Session = Depends(get_db)):
    """
    Retourne le chrono avec son statut effectif et le temps restant en secondes.
    La ligne est créée à la première lecture (durée par défaut, not_started).
    """
    return TimerResponse(success=True, data=timer_service.to_view(timer_service.get_timer(db)))


@router.post(
    "",
    response_model=TimerResponse,
    summary="Démarrer, arrêter ou réinitialiser le chrono",
    dependencies=[Depends(get_current_staff)],
)
def timer_action(data: TimerAction, db: Session = Depends(get_db)):
    """
    - start : durée obligatoire (> 0), fin = maintenant + durée
    - stop  : retour à not_started, durée conservée
    - reset : retour à not_started, durée par défaut

    expected_version (facultatif) : 409 si le chrono a changé depuis la dernière lecture.
    """
    try:
        if data.action == "start":
            timer = timer_service.start_timer(db, data.duration, data.expected_version)
        elif data.action == "stop":
            timer = timer_service.stop_timer(db, data.expected_version)
        else:
            timer = timer_service.reset_timer(db, data.expected_version)
    except timer_service.TimerConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return TimerResponse(success=True, data=timer_service.to_view(timer))


def _load_timer_view() -> TimerView:
    db = SessionLocal()
    try:
        return timer_service.to_view(timer_service.get_timer(db))
    finally:
        db.close()


async def timer_event_stream(request: Request):
    """Émet un événement SSE `timer` à chaque changement de version ou de statut effectif."""
    last_key = None
    while not await request.is_disconnected():
        view = await run_in_threadpool(_load_timer_view)
        key = (view.version, view.status)
        if key != last_key:
            last_key = key
            yield f"event: timer\ndata: {view.model_dump_json()}\n\n"
        await asyncio.sleep(settings.TIMER_EVENTS_POLL_SECONDS)


@router.get("/events", summary="Flux SSE des changements du chrono")
def timer_events(request: Request):
    return StreamingResponse(
        timer_event_stream(request),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )
