"""
Router pour les positions des équipes (carte en direct).
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import Actor, get_current_actor, get_current_staff
from app.schemas.location import LocationReport, LocationResetResponse, TeamLocationsResponse
from app.services import location_service

router = APIRouter(prefix="/api/v1", tags=["Positions"])


@router.post("/team-location", summary="Envoyer la position d'une équipe")
def report_team_location(
    data: LocationReport,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    Enregistre un relevé de position (appelé périodiquement par l'appareil de l'équipe
    et à la demande via « actualiser »). Un relevé plus ancien que la position courante
    est conservé dans l'historique sans remplacer la position courante.
    """
    if not actor.can_act_for_team(data.team_id):
        raise HTTPException(status_code=403, detail="Une équipe ne peut envoyer que sa propre position.")
    try:
        location_service.report_location(db, data)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True}


@router.get("/team-locations", response_model=TeamLocationsResponse, summary="Positions courantes")
def get_team_locations(db: Session = Depends(get_db)):
    """Retourne la position la plus récente de chaque équipe (une entrée par équipe)."""
    return TeamLocationsResponse(data=location_service.current_locations(db))


@router.get(
    "/team-locations/{team_id}/history",
    response_model=TeamLocationsResponse,
    summary="Historique des positions d'une équipe",
    dependencies=[Depends(get_current_staff)],
)
def get_team_location_history(
    team_id: int,
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    return TeamLocationsResponse(data=location_service.team_location_history(db, team_id, limit))


@router.post(
    "/reset-team-locations",
    response_model=LocationResetResponse,
    summary="Effacer toutes les positions (nouvelle manche)",
    dependencies=[Depends(get_current_staff)],
)
def reset_team_locations(db: Session = Depends(get_db)):
    """Supprime définitivement l'historique et les positions courantes de toutes les équipes."""
    deleted = location_service.reset_locations(db)
    return LocationResetResponse(
        success=True,
        message="Les positions de toutes les équipes ont été réinitialisées.",
        deleted_count=deleted,
    )
