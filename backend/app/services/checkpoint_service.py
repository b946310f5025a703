"""
Service métier pour les checkpoints.
CRUD par le staff, recherche du checkpoint le plus proche et génération des QR codes.
"""

import io
import logging
import math
from typing import List, Optional

import qrcode
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import settings
from app.models.checkpoint import Checkpoint
from app.schemas.checkpoint import (
    CheckpointCreate,
    CheckpointResponse,
    CheckpointUpdate,
    NearestCheckpointResponse,
)

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6371e3


def list_checkpoints(db: Session) -> List[CheckpointResponse]:
    checkpoints = db.execute(select(Checkpoint).order_by(Checkpoint.id)).scalars().all()
    return [CheckpointResponse.model_validate(cp) for cp in checkpoints]


def get_checkpoint(db: Session, checkpoint_id: int) -> Optional[CheckpointResponse]:
    checkpoint = db.get(Checkpoint, checkpoint_id)
    if checkpoint is None:
        return None
    return CheckpointResponse.model_validate(checkpoint)


def create_checkpoint(db: Session, data: CheckpointCreate) -> CheckpointResponse:
    checkpoint = Checkpoint(
        name=data.name,
        description=data.description,
        latitude=data.latitude,
        longitude=data.longitude,
        point_value=data.point_value,
    )
    db.add(checkpoint)
    db.commit()
    db.refresh(checkpoint)

    logger.info("Checkpoint créé : %s (%s, %d points)", checkpoint.name, checkpoint.id, checkpoint.point_value)
    return CheckpointResponse.model_validate(checkpoint)


def update_checkpoint(
    db: Session,
    checkpoint_id: int,
    data: CheckpointUpdate,
) -> Optional[CheckpointResponse]:
    """Met à jour les champs fournis. Retourne None si le checkpoint n'existe pas."""
    checkpoint = db.get(Checkpoint, checkpoint_id)
    if checkpoint is None:
        return None

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(checkpoint, field, value)
    db.commit()
    db.refresh(checkpoint)
    return CheckpointResponse.model_validate(checkpoint)


def delete_checkpoint(db: Session, checkpoint_id: int) -> bool:
    """
    Supprime un checkpoint (et ses passages, par cascade).
    Les points déjà crédités aux équipes ne sont pas retirés.
    """
    checkpoint = db.get(Checkpoint, checkpoint_id)
    if checkpoint is None:
        return False

    db.delete(checkpoint)
    db.commit()
    logger.info("Checkpoint supprimé : %s", checkpoint_id)
    return True


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance orthodromique entre deux points, en mètres."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def nearest_checkpoint(db: Session, latitude: float, longitude: float) -> Optional[NearestCheckpointResponse]:
    """Retourne le checkpoint le plus proche d'une position, ou None s'il n'y en a aucun."""
    checkpoints = db.execute(select(Checkpoint)).scalars().all()
    if not checkpoints:
        return None

    nearest = min(
        checkpoints,
        key=lambda cp: haversine_m(latitude, longitude, cp.latitude, cp.longitude),
    )
    return NearestCheckpointResponse(
        checkpoint=CheckpointResponse.model_validate(nearest),
        distance_m=round(haversine_m(latitude, longitude, nearest.latitude, nearest.longitude), 1),
    )


def checkpoint_qr_url(checkpoint_id: int) -> str:
    """URL encodée dans le QR code affiché au checkpoint (page de passage de l'app web)."""
    return f"{settings.APP_URL.rstrip('/')}/checkpoint/{checkpoint_id}"


def generate_qr_image(url: str) -> bytes:
    """Génère une image PNG du QR code encodant l'URL donnée."""
    qr = qrcode.QRCode(version=1, box_size=10, border=4)
    qr.add_data(url)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
