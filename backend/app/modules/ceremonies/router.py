# modules/ceremonies/router.py
"""
Endpoints des cérémonies (sessions structurées sur un angle).

Deux acteurs :
- Lead : création, démarrage, clôture, synthèse, niveau Shu-Ha-Ri
- Participant (anonyme) : lecture des statements et réponse via le code de session

Règle : ce fichier ne touche jamais la DB ni l'engine.
Tout passe par CeremonyService.
"""
from fastapi import APIRouter, HTTPException, status
from typing import List

from app.shared.deps import DbDep, UserDep
from app.modules.ceremonies.service import CeremonyService
from app.modules.ceremonies.schemas import (
    SessionCreateIn,
    SessionCloseIn,
    SessionOut,
    SessionDetailOut,
    PublicSessionOut,
    ResponseIn,
    ResponseOut,
    LevelEvaluationOut,
)

router = APIRouter(prefix="/ceremonies", tags=["Ceremonies"])
service = CeremonyService()


def _raise_for(e: ValueError):
    code = str(e)
    if code in ("TEAM_NOT_FOUND", "SESSION_NOT_FOUND"):
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Introuvable.")
    if code == "ANGLE_LOCKED":
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Angle non débloqué pour ce niveau.")
    if code in ("INVALID_TRANSITION", "SESSION_NOT_ACTIVE"):
        raise HTTPException(status.HTTP_409_CONFLICT, "Statut de session incompatible.")
    if code == "ALREADY_RESPONDED":
        raise HTTPException(status.HTTP_409_CONFLICT, "Réponse déjà transmise.")
    raise HTTPException(status.HTTP_400_BAD_REQUEST, code)


# ─────────────────────────────────────────────
# LEAD — Sessions
# ─────────────────────────────────────────────

@router.post(
    "/teams/{team_id}/sessions",
    response_model=SessionOut,
    status_code=status.HTTP_201_CREATED,
    summary="Créer une session (draft)",
)
async def create_session(team_id: int, payload: SessionCreateIn, db: DbDep, current_user: UserDep):
    try:
        return await service.create_session(db, team_id=team_id, user=current_user, payload=payload)
    except PermissionError:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Accès refusé.")
    except ValueError as e:
        _raise_for(e)


@router.get(
    "/teams/{team_id}/sessions",
    response_model=List[SessionOut],
    summary="Sessions d'une équipe",
)
async def list_sessions(team_id: int, db: DbDep, current_user: UserDep):
    try:
        return await service.list_sessions(db, team_id=team_id, user=current_user)
    except PermissionError:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Accès refusé.")
    except ValueError as e:
        _raise_for(e)


@router.get(
    "/teams/{team_id}/level",
    response_model=LevelEvaluationOut,
    summary="Niveau Shu-Ha-Ri",
    description="Progression, conditions de déblocage, état de risque et angles disponibles.",
)
async def get_level(team_id: int, db: DbDep, current_user: UserDep):
    try:
        return await service.get_level_evaluation(db, team_id=team_id, user=current_user)
    except PermissionError:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Accès refusé.")
    except ValueError as e:
        _raise_for(e)


@router.get(
    "/sessions/{session_id}",
    response_model=SessionDetailOut,
    summary="Détail et synthèse d'une session",
    description="La synthèse reste null tant que le seuil minimal de répondants n'est pas atteint.",
)
async def get_session(session_id: int, db: DbDep, current_user: UserDep):
    try:
        return await service.get_session_detail(db, session_id=session_id, user=current_user)
    except PermissionError:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Accès refusé.")
    except ValueError as e:
        _raise_for(e)


@router.post(
    "/sessions/{session_id}/start",
    response_model=SessionOut,
    summary="Ouvrir une session aux réponses",
)
async def start_session(session_id: int, db: DbDep, current_user: UserDep):
    try:
        return await service.start_session(db, session_id=session_id, user=current_user)
    except PermissionError:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Accès refusé.")
    except ValueError as e:
        _raise_for(e)


@router.post(
    "/sessions/{session_id}/close",
    response_model=SessionDetailOut,
    summary="Clôturer une session",
    description="Fige la synthèse et enregistre le focus, l'expérience et son responsable.",
)
async def close_session(session_id: int, payload: SessionCloseIn, db: DbDep, current_user: UserDep):
    try:
        return await service.close_session(db, session_id=session_id, user=current_user, payload=payload)
    except PermissionError:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Accès refusé.")
    except ValueError as e:
        _raise_for(e)


# ─────────────────────────────────────────────
# PARTICIPANT (public, anonyme)
# ─────────────────────────────────────────────

@router.get(
    "/d/{session_code}",
    response_model=PublicSessionOut,
    summary="Statements d'une session",
)
async def get_public_session(session_code: str, db: DbDep):
    session = await service.get_public_session(db, session_code=session_code)
    if session is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Lien invalide.")
    return session


@router.post(
    "/d/{session_code}/responses",
    response_model=ResponseOut,
    status_code=status.HTTP_201_CREATED,
    summary="Répondre à une session",
    description="Réponse anonyme, une seule par appareil. Scores 1-5, statements optionnels.",
)
async def submit_response(session_code: str, payload: ResponseIn, db: DbDep):
    try:
        return await service.submit_response(db, session_code=session_code, payload=payload)
    except ValueError as e:
        _raise_for(e)
