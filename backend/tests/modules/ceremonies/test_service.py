# tests/modules/ceremonies/test_service.py
"""
Tests unitaires pour modules.ceremonies.service — CeremonyService.

Couverture :
    create_session        → succès (draft), angle verrouillé, accès refusé, équipe introuvable
    start_session         → draft → active, transition invalide
    submit_response       → succès, session introuvable / inactive, statement inconnu,
                            score invalide, doublon appareil
    get_public_session    → statements de l'angle, code inconnu
    get_session_detail    → synthèse masquée sous 3 réponses, synthèse live, synthèse figée
    close_session         → synthèse figée + résultat, niveau débloqué, transition invalide
    list_sessions         → compteurs de réponses
    get_level_evaluation  → schéma complet, angles débloqués
"""
import pytest
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

from app.modules.ceremonies.schemas import (
    LevelEvaluationOut,
    PublicSessionOut,
    SessionDetailOut,
    SessionOut,
)
from app.modules.ceremonies.service import CeremonyService
from app.shared.enums import CeremonyAngle, CeremonyLevel, CeremonyStatus
from tests.conftest import (
    make_team,
    make_session,
    make_response,
    make_user,
    make_async_db,
)

pytestmark = pytest.mark.service

service = CeremonyService()

SVC = "app.modules.ceremonies.service"

THREE_ANSWERS = [
    {"retro_1": 5, "retro_2": 1},
    {"retro_1": 4, "retro_2": 2},
    {"retro_1": 5, "retro_2": 1},
]


def _owned(mocker, session):
    mocker.patch(f"{SVC}.ceremony_repo.get_session", AsyncMock(return_value=session))
    mocker.patch(f"{SVC}.team_repo.is_owner", AsyncMock(return_value=True))


def _save(mocker):
    async def save(db, session):
        return session
    return mocker.patch(f"{SVC}.ceremony_repo.save", AsyncMock(side_effect=save))


def _close_payload(**kwargs):
    defaults = {
        "focus_area": "Following through on retro actions",
        "experiment": "One action only, checked every Daily Scrum.",
        "experiment_owner": "Sam",
        "followup_date": date(2026, 4, 1),
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


# ── create_session ────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_create_session_succes(mocker):
    mocker.patch(f"{SVC}.team_repo.get_team", AsyncMock(return_value=make_team()))
    mocker.patch(f"{SVC}.ceremony_repo.code_exists", AsyncMock(return_value=False))
    mock_create = mocker.patch(
        f"{SVC}.ceremony_repo.create_session",
        AsyncMock(return_value=make_session(status=CeremonyStatus.DRAFT)),
    )

    payload = SimpleNamespace(angle=CeremonyAngle.RETRO, title="Sprint 42 retro")
    result = await service.create_session(make_async_db(), team_id=1, user=make_user(), payload=payload)

    SessionOut.model_validate(result)
    assert result["status"] == CeremonyStatus.DRAFT
    assert result["response_count"] == 0
    data = mock_create.await_args.args[1]
    assert data["status"] == CeremonyStatus.DRAFT
    assert data["angle"] == CeremonyAngle.RETRO
    assert len(data["session_code"]) == 8


@pytest.mark.asyncio
async def test_create_session_code_unique(mocker):
    mocker.patch(f"{SVC}.team_repo.get_team", AsyncMock(return_value=make_team()))
    mock_exists = mocker.patch(f"{SVC}.ceremony_repo.code_exists", AsyncMock(side_effect=[True, False]))
    mocker.patch(f"{SVC}.ceremony_repo.create_session", AsyncMock(return_value=make_session()))

    payload = SimpleNamespace(angle=CeremonyAngle.RETRO, title=None)
    await service.create_session(make_async_db(), team_id=1, user=make_user(), payload=payload)

    assert mock_exists.await_count == 2


@pytest.mark.asyncio
async def test_create_session_angle_verrouille(mocker):
    mocker.patch(
        f"{SVC}.team_repo.get_team",
        AsyncMock(return_value=make_team(ceremony_level=CeremonyLevel.SHU)),
    )
    payload = SimpleNamespace(angle=CeremonyAngle.OWNERSHIP, title=None)

    with pytest.raises(ValueError, match="ANGLE_LOCKED"):
        await service.create_session(make_async_db(), team_id=1, user=make_user(), payload=payload)


@pytest.mark.asyncio
async def test_create_session_acces_refuse(mocker):
    mocker.patch(f"{SVC}.team_repo.get_team", AsyncMock(return_value=make_team(owner_id="other")))
    payload = SimpleNamespace(angle=CeremonyAngle.RETRO, title=None)

    with pytest.raises(PermissionError):
        await service.create_session(make_async_db(), team_id=1, user=make_user(), payload=payload)


@pytest.mark.asyncio
async def test_create_session_equipe_introuvable(mocker):
    mocker.patch(f"{SVC}.team_repo.get_team", AsyncMock(return_value=None))
    payload = SimpleNamespace(angle=CeremonyAngle.RETRO, title=None)

    with pytest.raises(ValueError, match="TEAM_NOT_FOUND"):
        await service.create_session(make_async_db(), team_id=9, user=make_user(), payload=payload)


# ── start_session ─────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_start_session_draft_vers_active(mocker):
    session = make_session(status=CeremonyStatus.DRAFT)
    _owned(mocker, session)
    _save(mocker)

    result = await service.start_session(make_async_db(), session_id=1, user=make_user())

    assert result["status"] == CeremonyStatus.ACTIVE
    assert session.started_at is not None


@pytest.mark.asyncio
async def test_start_session_deja_active(mocker):
    _owned(mocker, make_session(status=CeremonyStatus.ACTIVE))

    with pytest.raises(ValueError, match="INVALID_TRANSITION"):
        await service.start_session(make_async_db(), session_id=1, user=make_user())


@pytest.mark.asyncio
async def test_start_session_acces_refuse(mocker):
    mocker.patch(f"{SVC}.ceremony_repo.get_session", AsyncMock(return_value=make_session()))
    mocker.patch(f"{SVC}.team_repo.is_owner", AsyncMock(return_value=False))

    with pytest.raises(PermissionError):
        await service.start_session(make_async_db(), session_id=1, user=make_user())


@pytest.mark.asyncio
async def test_start_session_introuvable(mocker):
    mocker.patch(f"{SVC}.ceremony_repo.get_session", AsyncMock(return_value=None))

    with pytest.raises(ValueError, match="SESSION_NOT_FOUND"):
        await service.start_session(make_async_db(), session_id=1, user=make_user())


# ── submit_response ───────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_submit_response_succes(mocker):
    mocker.patch(f"{SVC}.ceremony_repo.get_by_code", AsyncMock(return_value=make_session()))
    mocker.patch(f"{SVC}.ceremony_repo.has_responded", AsyncMock(return_value=False))
    mock_create = mocker.patch(
        f"{SVC}.ceremony_repo.create_response",
        AsyncMock(return_value=make_response(id=12)),
    )

    payload = SimpleNamespace(device_id="device-0001", answers={"retro_1": 4, "retro_3": 2})
    result = await service.submit_response(make_async_db(), session_code="A1B2C3D4", payload=payload)

    assert result == {"status": "submitted", "response_id": 12}
    assert mock_create.await_args.args[1]["answers"] == {"retro_1": 4, "retro_3": 2}


@pytest.mark.asyncio
async def test_submit_response_session_introuvable(mocker):
    mocker.patch(f"{SVC}.ceremony_repo.get_by_code", AsyncMock(return_value=None))
    payload = SimpleNamespace(device_id="device-0001", answers={"retro_1": 4})

    with pytest.raises(ValueError, match="SESSION_NOT_FOUND"):
        await service.submit_response(make_async_db(), session_code="XXXX", payload=payload)


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [CeremonyStatus.DRAFT, CeremonyStatus.CLOSED])
async def test_submit_response_session_inactive(mocker, status):
    mocker.patch(f"{SVC}.ceremony_repo.get_by_code", AsyncMock(return_value=make_session(status=status)))
    payload = SimpleNamespace(device_id="device-0001", answers={"retro_1": 4})

    with pytest.raises(ValueError, match="SESSION_NOT_ACTIVE"):
        await service.submit_response(make_async_db(), session_code="A1B2C3D4", payload=payload)


@pytest.mark.asyncio
async def test_submit_response_statement_inconnu(mocker):
    mocker.patch(f"{SVC}.ceremony_repo.get_by_code", AsyncMock(return_value=make_session()))
    payload = SimpleNamespace(device_id="device-0001", answers={"flow_1": 4})

    with pytest.raises(ValueError, match="UNKNOWN_STATEMENT"):
        await service.submit_response(make_async_db(), session_code="A1B2C3D4", payload=payload)


@pytest.mark.asyncio
async def test_submit_response_score_invalide(mocker):
    mocker.patch(f"{SVC}.ceremony_repo.get_by_code", AsyncMock(return_value=make_session()))
    payload = SimpleNamespace(device_id="device-0001", answers={"retro_1": 0})

    with pytest.raises(ValueError, match="INVALID_SCORE"):
        await service.submit_response(make_async_db(), session_code="A1B2C3D4", payload=payload)


@pytest.mark.asyncio
async def test_submit_response_doublon(mocker):
    mocker.patch(f"{SVC}.ceremony_repo.get_by_code", AsyncMock(return_value=make_session()))
    mocker.patch(f"{SVC}.ceremony_repo.has_responded", AsyncMock(return_value=True))
    mock_create = mocker.patch(f"{SVC}.ceremony_repo.create_response", AsyncMock())
    payload = SimpleNamespace(device_id="device-0001", answers={"retro_1": 4})

    with pytest.raises(ValueError, match="ALREADY_RESPONDED"):
        await service.submit_response(make_async_db(), session_code="A1B2C3D4", payload=payload)
    mock_create.assert_not_awaited()


@pytest.mark.asyncio
async def test_submit_response_doublon_concurrent(mocker):
    """Deux envois simultanés : la contrainte unique rejette le second (repo → None)."""
    mocker.patch(f"{SVC}.ceremony_repo.get_by_code", AsyncMock(return_value=make_session()))
    mocker.patch(f"{SVC}.ceremony_repo.has_responded", AsyncMock(return_value=False))
    mocker.patch(f"{SVC}.ceremony_repo.create_response", AsyncMock(return_value=None))
    payload = SimpleNamespace(device_id="device-0001", answers={"retro_1": 4})

    with pytest.raises(ValueError, match="ALREADY_RESPONDED"):
        await service.submit_response(make_async_db(), session_code="A1B2C3D4", payload=payload)


# ── get_public_session ────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_get_public_session(mocker):
    mocker.patch(
        f"{SVC}.ceremony_repo.get_by_code",
        AsyncMock(return_value=make_session(angle=CeremonyAngle.FLOW)),
    )

    result = await service.get_public_session(make_async_db(), session_code="A1B2C3D4")

    PublicSessionOut.model_validate(result)
    assert len(result["statements"]) == 6
    assert result["statements"][0]["id"] == "flow_1"


@pytest.mark.asyncio
async def test_get_public_session_code_inconnu(mocker):
    mocker.patch(f"{SVC}.ceremony_repo.get_by_code", AsyncMock(return_value=None))
    assert await service.get_public_session(make_async_db(), session_code="NOPE") is None


# ── get_session_detail ────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_detail_synthese_masquee_sous_le_seuil(mocker):
    _owned(mocker, make_session())
    mocker.patch(f"{SVC}.ceremony_repo.count_responses", AsyncMock(return_value=2))
    mocker.patch(f"{SVC}.ceremony_repo.get_answers", AsyncMock(return_value=THREE_ANSWERS[:2]))

    result = await service.get_session_detail(make_async_db(), session_id=1, user=make_user())

    assert result["synthesis"] is None
    assert result["session"]["response_count"] == 2


@pytest.mark.asyncio
async def test_detail_synthese_live(mocker):
    _owned(mocker, make_session())
    mocker.patch(f"{SVC}.ceremony_repo.count_responses", AsyncMock(return_value=3))
    mocker.patch(f"{SVC}.ceremony_repo.get_answers", AsyncMock(return_value=THREE_ANSWERS))

    result = await service.get_session_detail(make_async_db(), session_id=1, user=make_user())

    SessionDetailOut.model_validate(result)
    synthesis = result["synthesis"]
    assert synthesis["overall_score"] == 3.0
    assert synthesis["response_count"] == 3
    assert synthesis["tensions"][0]["statement"]["id"] == "retro_2"
    assert synthesis["tensions"][0]["score"] == 1.33
    assert synthesis["strengths"][0]["score"] == 4.67
    assert synthesis["focus_area"] == "Following through on retro actions"


@pytest.mark.asyncio
async def test_detail_synthese_figee_apres_cloture(mocker):
    frozen = {"overall_score": 3.2, "response_count": 4}
    _owned(mocker, make_session(status=CeremonyStatus.CLOSED, synthesis=frozen))
    mocker.patch(f"{SVC}.ceremony_repo.count_responses", AsyncMock(return_value=4))
    mock_answers = mocker.patch(f"{SVC}.ceremony_repo.get_answers", AsyncMock())

    result = await service.get_session_detail(make_async_db(), session_id=1, user=make_user())

    assert result["synthesis"] is frozen
    mock_answers.assert_not_awaited()


# ── close_session ─────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_close_session_fige_la_synthese(mocker):
    session = make_session()
    team = make_team()
    _owned(mocker, session)
    _save(mocker)
    mocker.patch(f"{SVC}.ceremony_repo.get_answers", AsyncMock(return_value=THREE_ANSWERS))
    mocker.patch(f"{SVC}.ceremony_repo.count_responses", AsyncMock(return_value=3))
    mocker.patch(f"{SVC}.team_repo.get_team", AsyncMock(return_value=team))
    mocker.patch(f"{SVC}.ceremony_repo.get_closed_sessions", AsyncMock(return_value=[]))
    mocker.patch(f"{SVC}.ceremony_repo.count_responses_by_session", AsyncMock(return_value={}))
    mock_level = mocker.patch(f"{SVC}.team_repo.update_level", AsyncMock())

    result = await service.close_session(make_async_db(), session_id=1, user=make_user(), payload=_close_payload())

    SessionDetailOut.model_validate(result)
    assert session.status == CeremonyStatus.CLOSED
    assert session.closed_at is not None
    assert session.experiment_owner == "Sam"
    assert session.overall_score == 3.0
    assert session.synthesis["overall_score"] == 3.0
    mock_level.assert_not_awaited()


@pytest.mark.asyncio
async def test_close_session_sous_le_seuil_sans_score(mocker):
    session = make_session()
    _owned(mocker, session)
    _save(mocker)
    mocker.patch(f"{SVC}.ceremony_repo.get_answers", AsyncMock(return_value=THREE_ANSWERS[:1]))
    mocker.patch(f"{SVC}.ceremony_repo.count_responses", AsyncMock(return_value=1))
    mocker.patch(f"{SVC}.team_repo.get_team", AsyncMock(return_value=make_team()))
    mocker.patch(f"{SVC}.ceremony_repo.get_closed_sessions", AsyncMock(return_value=[]))
    mocker.patch(f"{SVC}.ceremony_repo.count_responses_by_session", AsyncMock(return_value={}))
    mocker.patch(f"{SVC}.team_repo.update_level", AsyncMock())

    result = await service.close_session(make_async_db(), session_id=1, user=make_user(), payload=_close_payload())

    assert result["synthesis"] is None
    assert session.overall_score is None
    assert session.status == CeremonyStatus.CLOSED


@pytest.mark.asyncio
async def test_close_session_debloque_ha(mocker):
    session = make_session(id=4)
    team = make_team(team_size=6, ceremony_level=CeremonyLevel.SHU)
    now = datetime.now(timezone.utc)
    closed = [
        make_session(id=i, status=CeremonyStatus.CLOSED, overall_score=3.6,
                     closed_at=now - timedelta(days=days),
                     experiment_owner="Sam", followup_date=date(2026, 4, 1))
        for i, days in ((1, 20), (2, 10), (3, 0))
    ]
    _owned(mocker, session)
    _save(mocker)
    mocker.patch(f"{SVC}.ceremony_repo.get_answers", AsyncMock(return_value=THREE_ANSWERS))
    mocker.patch(f"{SVC}.ceremony_repo.count_responses", AsyncMock(return_value=5))
    mocker.patch(f"{SVC}.team_repo.get_team", AsyncMock(return_value=team))
    mocker.patch(f"{SVC}.ceremony_repo.get_closed_sessions", AsyncMock(return_value=closed))
    mocker.patch(f"{SVC}.ceremony_repo.count_responses_by_session", AsyncMock(return_value={1: 5, 2: 5, 3: 5}))
    mock_level = mocker.patch(f"{SVC}.team_repo.update_level", AsyncMock())

    await service.close_session(make_async_db(), session_id=4, user=make_user(), payload=_close_payload())

    mock_level.assert_awaited_once()
    assert mock_level.await_args.args[2] == CeremonyLevel.HA


@pytest.mark.asyncio
async def test_close_session_non_active(mocker):
    _owned(mocker, make_session(status=CeremonyStatus.DRAFT))

    with pytest.raises(ValueError, match="INVALID_TRANSITION"):
        await service.close_session(make_async_db(), session_id=1, user=make_user(), payload=_close_payload())


@pytest.mark.asyncio
async def test_close_session_pas_de_reouverture(mocker):
    _owned(mocker, make_session(status=CeremonyStatus.CLOSED))

    with pytest.raises(ValueError, match="INVALID_TRANSITION"):
        await service.close_session(make_async_db(), session_id=1, user=make_user(), payload=_close_payload())


# ── list_sessions ─────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_list_sessions_compteurs(mocker):
    mocker.patch(f"{SVC}.team_repo.get_team", AsyncMock(return_value=make_team()))
    mocker.patch(
        f"{SVC}.ceremony_repo.list_for_team",
        AsyncMock(return_value=[make_session(id=1), make_session(id=2, session_code="B2")]),
    )
    mocker.patch(f"{SVC}.ceremony_repo.count_responses_by_session", AsyncMock(return_value={1: 4}))

    result = await service.list_sessions(make_async_db(), team_id=1, user=make_user())

    assert [s["response_count"] for s in result] == [4, 0]


# ── get_level_evaluation ──────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_get_level_evaluation(mocker):
    mocker.patch(
        f"{SVC}.team_repo.get_team",
        AsyncMock(return_value=make_team(ceremony_level=CeremonyLevel.HA)),
    )
    mocker.patch(f"{SVC}.ceremony_repo.get_closed_sessions", AsyncMock(return_value=[]))
    mocker.patch(f"{SVC}.ceremony_repo.count_responses_by_session", AsyncMock(return_value={}))

    result = await service.get_level_evaluation(make_async_db(), team_id=1, user=make_user())

    LevelEvaluationOut.model_validate(result)
    assert result["level"] == CeremonyLevel.HA
    assert len(result["requirements"]) == 6
    unlocked = {a["id"] for a in result["angles"] if a["unlocked"]}
    assert CeremonyAngle.FLOW in unlocked
    assert CeremonyAngle.DEMO not in unlocked
