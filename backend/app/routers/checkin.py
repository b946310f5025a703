"""
Router pour l'enregistrement des passages (scan du QR code d'un checkpoint).
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import Actor, get_current_actor
from app.schemas.checkin import CheckinRequest, CheckinResult
from app.services import checkin_service

router = APIRouter(prefix="/api/v1", tags=["Passages"])


@router.post("/checkin", response_model=CheckinResult, summary="Valider le passage d'une équipe")
def checkin(
    data: CheckinRequest,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    Enregistre le passage d'une équipe à un checkpoint et crédite ses points.

    - Une équipe ne peut valider que pour elle-même ; le staff pour n'importe quelle équipe
    - Doublon ou checkpoint inconnu → 200 avec success=false (pas une erreur HTTP)
    - Une seule validation par couple équipe / checkpoint, garantie par la base
    """
    if not actor.can_act_for_team(data.team_id):
        raise HTTPException(status_code=403, detail="Une équipe ne peut valider que ses propres passages.")
    return checkin_service.attempt_checkin(db, data.team_id, data.checkpoint_id)
