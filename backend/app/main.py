"""
Point d'entrée principal de l'API Rally (course d'orientation par QR codes).
Démarrage : uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

import app.models  # noqa: F401 enregistre tous les modèles dans Base.metadata avant les routers
from app.config import settings
from app.database import Base, engine
from app.routers import auth, checkin, checkpoints, locations, setup, teams, timer
from app.scheduler import start_scheduler, stop_scheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie : crée les tables manquantes, démarre et arrête le scheduler APScheduler."""
    Base.metadata.create_all(bind=engine)
    start_scheduler()
    yield
    stop_scheduler()


app = FastAPI(
    title="Rally API",
    description="API de course d'orientation : passages aux checkpoints, scores, positions et chrono partagé",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS : l'application web est servie sur un autre port en développement.
# allow_credentials=True : les sessions passent par des cookies httpOnly.
app.add_middleware(
    CORSMiddleware,
    allow_origins=[],
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept"],
)


# Les routes /teams/auth et /teams/session doivent précéder /teams/{team_id}
app.include_router(auth.team_auth_router)
app.include_router(auth.staff_router)
app.include_router(teams.router)
app.include_router(checkpoints.router)
app.include_router(checkin.router)
app.include_router(locations.router)
app.include_router(timer.router)
app.include_router(setup.router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Champs manquants ou invalides → 400 avec le premier message lisible."""
    errors = jsonable_encoder(exc.errors())
    message = errors[0].get("msg", "Requête invalide.") if errors else "Requête invalide."
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": message, "detail": errors},
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """
    Base indisponible ou opération refusée par la base.
    Le message brut n'est renvoyé qu'en développement, pour le diagnostic pendant la préparation.
    """
    logger.error("Erreur base de données sur %s : %s", request.url.path, exc, exc_info=True)
    content = {"success": False, "message": "Erreur d'accès à la base de données."}
    if settings.ENV == "development":
        content["debug"] = str(exc)
    return JSONResponse(status_code=500, content=content)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées pour garantir que la réponse 500
    passe bien par CORSMiddleware (qui injecte les headers CORS).
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Une erreur interne est survenue."},
    )


@app.get("/api/health", tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {"status": "ok", "service": "Rally API", "version": "0.1.0"}


@app.get("/api/v1/client-config", tags=["Santé"])
def client_config():
    """Cadences de rafraîchissement que l'application web applique côté client."""
    return {
        "location_report_interval_seconds": settings.LOCATION_REPORT_INTERVAL_SECONDS,
        "location_poll_interval_seconds": settings.LOCATION_POLL_INTERVAL_SECONDS,
        "geolocation_timeout_seconds": settings.GEOLOCATION_TIMEOUT_SECONDS,
        "timer_events_url": "/api/v1/timer/events",
    }
