# tests/modules/pulse/test_service.py
"""
Tests unitaires pour modules.pulse.service — PulseService.

Couverture :
    submit_checkin       → succès, lien invalide, doublon du jour
    get_team_metrics     → succès (schéma complet), introuvable (None), accès refusé
    get_team_insights    → liste sérialisable
    get_coach_questions  → tensions de cérémonie prises en compte
    team_today           → fuseau de l'équipe
"""
import pytest
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

from app.content.coaching import COACH_QUESTIONS
from app.modules.pulse.schemas import TeamMetricsOut, PulseInsightOut
from app.modules.pulse.service import PulseService, team_today
from app.shared.enums import CeremonyAngle, CeremonyStatus, Language
from tests.conftest import (
    make_team,
    make_session,
    make_series,
    make_user,
    make_async_db,
)

pytestmark = pytest.mark.service

service = PulseService()


def _checkin(**kwargs):
    defaults = {"score": 4, "device_id": "device-0001"}
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


# ── team_today ────────────────────────────────────────────────────────────────

def test_team_today_fuseau_equipe():
    """23h30 UTC le 12 mars = 00h30 le 13 mars à Amsterdam."""
    now = datetime(2026, 3, 12, 23, 30, tzinfo=timezone.utc)
    assert team_today(make_team(timezone="Europe/Amsterdam"), now).isoformat() == "2026-03-13"
    assert team_today(make_team(timezone="UTC"), now).isoformat() == "2026-03-12"


def test_team_today_fuseau_par_defaut():
    now = datetime(2026, 3, 12, 23, 30, tzinfo=timezone.utc)
    assert team_today(make_team(timezone=None), now).isoformat() == "2026-03-13"


# ── submit_checkin ────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_submit_checkin_succes(mocker):
    team = make_team()
    mocker.patch("app.modules.pulse.service.team_repo.get_by_slug", AsyncMock(return_value=team))
    mocker.patch("app.modules.pulse.service.pulse_repo.has_checkin", AsyncMock(return_value=False))
    mock_create = mocker.patch("app.modules.pulse.service.pulse_repo.create_checkin", AsyncMock())

    result = await service.submit_checkin(make_async_db(), slug=team.slug, payload=_checkin(score=5))

    assert result["status"] == "submitted"
    assert result["team_name"] == team.name
    kwargs = mock_create.await_args.kwargs
    assert kwargs["team_id"] == team.id
    assert kwargs["score"] == 5
    assert kwargs["day"] == result["checkin_date"]


@pytest.mark.asyncio
async def test_submit_checkin_lien_invalide(mocker):
    mocker.patch("app.modules.pulse.service.team_repo.get_by_slug", AsyncMock(return_value=None))

    with pytest.raises(ValueError, match="TEAM_NOT_FOUND"):
        await service.submit_checkin(make_async_db(), slug="nope", payload=_checkin())


@pytest.mark.asyncio
async def test_submit_checkin_doublon(mocker):
    mocker.patch("app.modules.pulse.service.team_repo.get_by_slug", AsyncMock(return_value=make_team()))
    mocker.patch("app.modules.pulse.service.pulse_repo.has_checkin", AsyncMock(return_value=True))
    mock_create = mocker.patch("app.modules.pulse.service.pulse_repo.create_checkin", AsyncMock())

    with pytest.raises(ValueError, match="ALREADY_CHECKED_IN_TODAY"):
        await service.submit_checkin(make_async_db(), slug="platform", payload=_checkin())
    mock_create.assert_not_awaited()


@pytest.mark.asyncio
async def test_submit_checkin_doublon_concurrent(mocker):
    """Le check-in concurrent passe has_checkin mais la contrainte unique le rejette."""
    mocker.patch("app.modules.pulse.service.team_repo.get_by_slug", AsyncMock(return_value=make_team()))
    mocker.patch("app.modules.pulse.service.pulse_repo.has_checkin", AsyncMock(return_value=False))
    mocker.patch("app.modules.pulse.service.pulse_repo.create_checkin", AsyncMock(return_value=None))

    with pytest.raises(ValueError, match="ALREADY_CHECKED_IN_TODAY"):
        await service.submit_checkin(make_async_db(), slug="platform", payload=_checkin())


# ── get_team_metrics ──────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_get_team_metrics_succes(mocker):
    team = make_team(team_size=6)
    today = team_today(team)
    mocker.patch("app.modules.pulse.service.team_repo.get_team", AsyncMock(return_value=team))
    mock_daily = mocker.patch(
        "app.modules.pulse.service.pulse_repo.get_daily_aggregates",
        AsyncMock(return_value=make_series(today, [4.0] * 14, count=3, participant_count=6)),
    )

    result = await service.get_team_metrics(make_async_db(), team_id=1, user=make_user(), lang=Language.NL)

    TeamMetricsOut.model_validate(result)
    assert result["team_id"] == team.id
    assert result["week_pulse"]["value"] == 4.0
    assert result["week_pulse"]["zone_label"] == "Stabiel"
    assert result["participation"]["rate_label"] == "50%"
    assert result["has_enough_data"] is True
    assert mock_daily.await_args.kwargs["team_size"] == 6


@pytest.mark.asyncio
async def test_get_team_metrics_sans_donnees(mocker):
    mocker.patch("app.modules.pulse.service.team_repo.get_team", AsyncMock(return_value=make_team()))
    mocker.patch("app.modules.pulse.service.pulse_repo.get_daily_aggregates", AsyncMock(return_value=[]))

    result = await service.get_team_metrics(make_async_db(), team_id=1, user=make_user())

    TeamMetricsOut.model_validate(result)
    assert result["week_pulse"]["value"] is None
    assert result["week_pulse"]["zone_label"] == "No data"
    assert result["has_enough_data"] is False


@pytest.mark.asyncio
async def test_get_team_metrics_introuvable(mocker):
    mocker.patch("app.modules.pulse.service.team_repo.get_team", AsyncMock(return_value=None))

    result = await service.get_team_metrics(make_async_db(), team_id=99, user=make_user())
    assert result is None


@pytest.mark.asyncio
async def test_get_team_metrics_acces_refuse(mocker):
    mocker.patch(
        "app.modules.pulse.service.team_repo.get_team",
        AsyncMock(return_value=make_team(owner_id="someone_else")),
    )

    with pytest.raises(PermissionError):
        await service.get_team_metrics(make_async_db(), team_id=1, user=make_user())


# ── get_team_insights ─────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_get_team_insights_serialisables(mocker):
    team = make_team(team_size=6)
    today = team_today(team)
    mocker.patch("app.modules.pulse.service.team_repo.get_team", AsyncMock(return_value=team))
    mocker.patch(
        "app.modules.pulse.service.pulse_repo.get_daily_aggregates",
        AsyncMock(return_value=make_series(today, [2.0] * 14, count=3, participant_count=6)),
    )

    result = await service.get_team_insights(make_async_db(), team_id=1, user=make_user())

    assert [i["id"] for i in result] == ["zone_under_pressure", "maturity_pattern_forming"]
    for insight in result:
        PulseInsightOut.model_validate(insight)


# ── get_coach_questions ───────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_get_coach_questions_tension_ceremonie(mocker):
    team = make_team(team_size=6)
    today = team_today(team)
    mocker.patch("app.modules.pulse.service.team_repo.get_team", AsyncMock(return_value=team))
    mocker.patch(
        "app.modules.pulse.service.pulse_repo.get_daily_aggregates",
        AsyncMock(return_value=make_series(today, [4.0] * 7, count=5, participant_count=6)),
    )
    closed = [
        make_session(id=1, angle=CeremonyAngle.FLOW, status=CeremonyStatus.CLOSED, overall_score=2.6),
        make_session(id=2, angle=CeremonyAngle.SCRUM, status=CeremonyStatus.CLOSED, overall_score=4.1),
    ]
    mock_closed = mocker.patch(
        "app.modules.pulse.service.ceremony_repo.get_closed_sessions",
        AsyncMock(return_value=closed),
    )

    result = await service.get_coach_questions(make_async_db(), team_id=1, user=make_user())

    assert result["team_id"] == team.id
    assert COACH_QUESTIONS["flow_problems"][0] in result["questions"]
    assert COACH_QUESTIONS["scrum_problems"][0] not in result["questions"]
    assert mock_closed.await_args.kwargs["limit"] == 3


@pytest.mark.asyncio
async def test_get_coach_questions_introuvable(mocker):
    mocker.patch("app.modules.pulse.service.team_repo.get_team", AsyncMock(return_value=None))

    assert await service.get_coach_questions(make_async_db(), team_id=5, user=make_user()) is None
