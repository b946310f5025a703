"""
Routers pour les checkpoints.
Lecture publique (carte des équipes), création / modification / suppression par le staff.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_staff
from app.schemas.checkpoint import (
    CheckpointCreate,
    CheckpointQrResponse,
    CheckpointResponse,
    CheckpointUpdate,
    NearestCheckpointResponse,
)
from app.services import checkpoint_service

router = APIRouter(prefix="/api/v1/checkpoints", tags=["Checkpoints"])


@router.get("", response_model=List[CheckpointResponse], summary="Lister les checkpoints")
def list_checkpoints(db: Session = Depends(get_db)):
    return checkpoint_service.list_checkpoints(db)


@router.get(
    "/nearest",
    response_model=NearestCheckpointResponse,
    summary="Checkpoint le plus proche d'une position",
)
def nearest_checkpoint(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    db: Session = Depends(get_db),
):
    """Retourne le checkpoint le plus proche et la distance en mètres (formule de haversine)."""
    result = checkpoint_service.nearest_checkpoint(db, latitude, longitude)
    if result is None:
        raise HTTPException(status_code=404, detail="Aucun checkpoint n'est défini.")
    return result


@router.get("/{checkpoint_id}", response_model=CheckpointResponse, summary="Détail d'un checkpoint")
def get_checkpoint(checkpoint_id: int, db: Session = Depends(get_db)):
    checkpoint = checkpoint_service.get_checkpoint(db, checkpoint_id)
    if checkpoint is None:
        raise HTTPException(status_code=404, detail="Checkpoint introuvable.")
    return checkpoint


@router.post(
    "",
    response_model=CheckpointResponse,
    status_code=201,
    summary="Créer un checkpoint",
    dependencies=[Depends(get_current_staff)],
)
def create_checkpoint(data: CheckpointCreate, db: Session = Depends(get_db)):
    """Crée un checkpoint. `points` est accepté comme alias de `point_value` (0 par défaut)."""
    return checkpoint_service.create_checkpoint(db, data)


@router.put(
    "/{checkpoint_id}",
    response_model=CheckpointResponse,
    summary="Modifier un checkpoint",
    dependencies=[Depends(get_current_staff)],
)
def update_checkpoint(checkpoint_id: int, data: CheckpointUpdate, db: Session = Depends(get_db)):
    """Met à jour un checkpoint. Seuls les champs fournis sont modifiés."""
    checkpoint = checkpoint_service.update_checkpoint(db, checkpoint_id, data)
    if checkpoint is None:
        raise HTTPException(status_code=404, detail="Checkpoint introuvable.")
    return checkpoint


@router.delete(
    "/{checkpoint_id}",
    status_code=204,
    summary="Supprimer un checkpoint",
    dependencies=[Depends(get_current_staff)],
)
def delete_checkpoint(checkpoint_id: int, db: Session = Depends(get_db)):
    if not checkpoint_service.delete_checkpoint(db, checkpoint_id):
        raise HTTPException(status_code=404, detail="Checkpoint introuvable.")


@router.get(
    "/{checkpoint_id}/qr",
    response_model=CheckpointQrResponse,
    summary="URL du QR code d'un checkpoint",
)
def get_checkpoint_qr(checkpoint_id: int, db: Session = Depends(get_db)):
    """Retourne l'URL de la page de passage encodée dans le QR code du checkpoint."""
    checkpoint = checkpoint_service.get_checkpoint(db, checkpoint_id)
    if checkpoint is None:
        raise HTTPException(status_code=404, detail="Checkpoint introuvable.")
    return CheckpointQrResponse(
        checkpoint_id=checkpoint.id,
        checkpoint_name=checkpoint.name,
        qr_url=checkpoint_service.checkpoint_qr_url(checkpoint.id),
    )


@router.get("/{checkpoint_id}/qr.png", summary="Image PNG du QR code d'un checkpoint")
def get_checkpoint_qr_image(checkpoint_id: int, db: Session = Depends(get_db)):
    """Image à imprimer et afficher physiquement au checkpoint."""
    checkpoint = checkpoint_service.get_checkpoint(db, checkpoint_id)
    if checkpoint is None:
        raise HTTPException(status_code=404, detail="Checkpoint introuvable.")
    png = checkpoint_service.generate_qr_image(checkpoint_service.checkpoint_qr_url(checkpoint.id))
    return Response(content=png, media_type="image/png")
