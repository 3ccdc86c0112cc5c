# modules/pulse/router.py
"""
Endpoints du Pulse quotidien.

Deux acteurs :
- Membre d'équipe (anonyme) : check-in via le lien public de l'équipe
- Lead : métriques, insights et questions de coaching

Règle : ce fichier ne touche jamais la DB ni l'engine.
Tout passe par PulseService.
"""
from fastapi import APIRouter, HTTPException, status
from typing import List

from app.shared.deps import DbDep, UserDep
from app.shared.enums import Language
from app.modules.pulse.service import PulseService
from app.modules.pulse.schemas import (
    CheckInIn,
    CheckInOut,
    TeamMetricsOut,
    PulseInsightOut,
    CoachQuestionsOut,
)

router = APIRouter(prefix="/pulse", tags=["Pulse"])
service = PulseService()


# ─────────────────────────────────────────────
# CHECK-IN (public, anonyme)
# ─────────────────────────────────────────────

@router.post(
    "/t/{slug}/checkin",
    response_model=CheckInOut,
    status_code=status.HTTP_201_CREATED,
    summary="Check-in du jour",
    description="Check-in anonyme (1-5). Un seul check-in par appareil et par jour.",
)
async def submit_checkin(slug: str, payload: CheckInIn, db: DbDep):
    try:
        return await service.submit_checkin(db, slug=slug, payload=payload)
    except ValueError as e:
        code = str(e)
        if code == "TEAM_NOT_FOUND":
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Lien invalide.")
        if code == "ALREADY_CHECKED_IN_TODAY":
            raise HTTPException(status.HTTP_409_CONFLICT, "Check-in déjà transmis aujourd'hui.")
        raise HTTPException(status.HTTP_400_BAD_REQUEST, code)


# ─────────────────────────────────────────────
# LEAD — Métriques
# ─────────────────────────────────────────────

@router.get(
    "/teams/{team_id}/metrics",
    response_model=TeamMetricsOut,
    summary="Métriques Pulse d'une équipe",
    description=(
        "Live / jour / semaine / semaine précédente, momentum, participation, "
        "états jour et semaine, maturité des données. "
        "Les valeurs null signifient 'pas assez de données'."
    ),
)
async def get_team_metrics(team_id: int, db: DbDep, current_user: UserDep, lang: Language = Language.EN):
    try:
        metrics = await service.get_team_metrics(db, team_id=team_id, user=current_user, lang=lang)
    except PermissionError:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Accès refusé.")
    if metrics is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Équipe introuvable.")
    return metrics


@router.get(
    "/teams/{team_id}/insights",
    response_model=List[PulseInsightOut],
    summary="Insights Pulse",
)
async def get_team_insights(team_id: int, db: DbDep, current_user: UserDep):
    try:
        insights = await service.get_team_insights(db, team_id=team_id, user=current_user)
    except PermissionError:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Accès refusé.")
    if insights is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Équipe introuvable.")
    return insights


@router.get(
    "/teams/{team_id}/coach-questions",
    response_model=CoachQuestionsOut,
    summary="Questions de coaching",
)
async def get_coach_questions(team_id: int, db: DbDep, current_user: UserDep):
    try:
        result = await service.get_coach_questions(db, team_id=team_id, user=current_user)
    except PermissionError:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Accès refusé.")
    if result is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Équipe introuvable.")
    return result
