"""
Router pour les équipes : classement public, gestion par le staff, ajustement des points.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_staff
from app.schemas.team import (
    AddPointsRequest,
    AddPointsResponse,
    TeamCheckinsResponse,
    TeamCreate,
    TeamResponse,
    TeamUpdate,
)
from app.services import team_service

router = APIRouter(prefix="/api/v1/teams", tags=["Équipes"])


@router.get("", response_model=List[TeamResponse], summary="Classement des équipes")
def list_teams(db: Session = Depends(get_db)):
    """Retourne toutes les équipes, triées par score décroissant."""
    return team_service.list_teams(db)


@router.post(
    "",
    response_model=TeamResponse,
    status_code=201,
    summary="Créer une équipe",
    dependencies=[Depends(get_current_staff)],
)
def create_team(data: TeamCreate, db: Session = Depends(get_db)):
    """Crée une équipe (score 0). Le code de connexion est généré s'il n'est pas fourni."""
    try:
        return team_service.create_team(db, data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/{team_id}", response_model=TeamResponse, summary="Détail d'une équipe")
def get_team(team_id: int, db: Session = Depends(get_db)):
    team = team_service.get_team(db, team_id)
    if team is None:
        raise HTTPException(status_code=404, detail="Équipe introuvable.")
    return team


@router.put(
    "/{team_id}",
    response_model=TeamResponse,
    summary="Modifier une équipe",
    dependencies=[Depends(get_current_staff)],
)
def update_team(team_id: int, data: TeamUpdate, db: Session = Depends(get_db)):
    try:
        team = team_service.update_team(db, team_id, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if team is None:
        raise HTTPException(status_code=404, detail="Équipe introuvable.")
    return team


@router.delete(
    "/{team_id}",
    status_code=204,
    summary="Supprimer une équipe",
    dependencies=[Depends(get_current_staff)],
)
def delete_team(team_id: int, db: Session = Depends(get_db)):
    if not team_service.delete_team(db, team_id):
        raise HTTPException(status_code=404, detail="Équipe introuvable.")


@router.get(
    "/{team_id}/checkins",
    response_model=TeamCheckinsResponse,
    summary="Passages d'une équipe",
)
def get_team_checkins(team_id: int, db: Session = Depends(get_db)):
    return TeamCheckinsResponse(data=team_service.get_team_checkins(db, team_id))


@router.post(
    "/{team_id}/add-points",
    response_model=AddPointsResponse,
    summary="Ajuster manuellement le score d'une équipe",
    dependencies=[Depends(get_current_staff)],
)
def add_points(team_id: int, data: AddPointsRequest, db: Session = Depends(get_db)):
    """
    Ajoute des points (valeur positive) ou en retire (valeur négative).
    Le score n'a pas de plancher : il peut devenir négatif.
    """
    try:
        return team_service.add_points(db, team_id, data.points)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
