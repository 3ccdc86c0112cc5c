# modules/teams/router.py
"""
Endpoints de gestion des équipes du lead.
"""
from fastapi import APIRouter, HTTPException, status
from typing import List

from app.shared.deps import DbDep, UserDep
from app.modules.teams.service import TeamService
from app.modules.teams.schemas import TeamCreateIn, TeamSizeIn, TeamOut

router = APIRouter(prefix="/teams", tags=["Teams"])
service = TeamService()


@router.post(
    "",
    response_model=TeamOut,
    status_code=status.HTTP_201_CREATED,
    summary="Créer une équipe",
)
async def create_team(payload: TeamCreateIn, db: DbDep, current_user: UserDep):
    return await service.create_team(db, owner=current_user, payload=payload)


@router.get(
    "",
    response_model=List[TeamOut],
    summary="Mes équipes",
)
async def list_teams(db: DbDep, current_user: UserDep):
    return await service.list_teams(db, owner=current_user)


@router.patch(
    "/{team_id}/size",
    response_model=TeamOut,
    summary="Mettre à jour la taille de l'équipe",
)
async def update_team_size(team_id: int, payload: TeamSizeIn, db: DbDep, current_user: UserDep):
    try:
        return await service.update_team_size(
            db, team_id=team_id, owner=current_user, team_size=payload.team_size
        )
    except PermissionError:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Accès refusé.")
    except ValueError:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Équipe introuvable.")
