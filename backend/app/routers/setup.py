"""
Router d'initialisation des données d'un événement.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_optional_staff
from app.models.staff import Staff
from app.schemas.setup import SetupRequest, SetupResponse
from app.services import setup_service

router = APIRouter(prefix="/api/v1", tags=["Initialisation"])


@router.post("/setup", response_model=SetupResponse, summary="Initialiser les données de l'événement")
def setup(
    data: SetupRequest,
    staff: Optional[Staff] = Depends(get_optional_staff),
    db: Session = Depends(get_db),
):
    """
    Crée le compte administrateur (si aucun staff n'existe), des équipes et des
    checkpoints d'exemple (si leurs tables sont vides).

    Sans staff existant, l'appel est ouvert (premier démarrage) ; ensuite une session
    staff est exigée.
    """
    if setup_service.has_staff(db) and staff is None:
        raise HTTPException(status_code=401, detail="Session staff requise : l'événement est déjà initialisé.")

    counts = setup_service.seed_initial_data(db, data)
    return SetupResponse(success=True, message="Initialisation terminée.", data=counts)
