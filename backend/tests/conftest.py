# tests/conftest.py
"""
Fixtures et factories partagées sur l'ensemble de la suite de tests.

Trois couches :
    1. Engine  — fonctions pures, aucun mock nécessaire (factories d'agrégats)
    2. Service — mocks AsyncSession + repos via pytest-mock
    3. Router  — httpx.AsyncClient + dependency_overrides FastAPI
"""
import pytest
from types import SimpleNamespace
from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession

from app.main import app
from app.core.database import get_db
from app.engine.pulse.metrics import DailyAggregate
from app.shared.deps import CurrentUser, get_current_user
from app.shared.enums import CeremonyAngle, CeremonyLevel, CeremonyStatus

LEAD_ID = "user_lead_123"


# ── Agrégats journaliers (input principal de l'engine Pulse) ──────────────────

def make_day(day: date, average: float, count: int, participant_count: int = 10) -> DailyAggregate:
    return DailyAggregate(date=day, average=average, count=count, participant_count=participant_count)


def make_series(today: date, averages, count: int = 5, participant_count: int = 10):
    """Un agrégat par jour, le dernier élément tombant sur `today`."""
    n = len(averages)
    return [
        make_day(today - timedelta(days=n - 1 - i), avg, count, participant_count)
        for i, avg in enumerate(averages)
    ]


# ── Factories de modèles ORM (SimpleNamespace — léger, sans ORM) ──────────────

def make_user(**kwargs) -> CurrentUser:
    defaults = {"id": LEAD_ID, "email": "lead@test.com"}
    defaults.update(kwargs)
    return CurrentUser(**defaults)


def make_team(**kwargs) -> SimpleNamespace:
    defaults = {
        "id": 1,
        "name": "Platform Team",
        "slug": "platform-team-a1b2c3",
        "owner_id": LEAD_ID,
        "team_size": 6,
        "timezone": "Europe/Amsterdam",
        "ceremony_level": CeremonyLevel.SHU,
        "created_at": datetime(2026, 1, 1, tzinfo=timezone.utc),
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def make_session(**kwargs) -> SimpleNamespace:
    defaults = {
        "id": 1,
        "team_id": 1,
        "session_code": "A1B2C3D4",
        "angle": CeremonyAngle.RETRO,
        "title": "Sprint 42 retro",
        "status": CeremonyStatus.ACTIVE,
        "focus_area": None,
        "experiment": None,
        "experiment_owner": None,
        "followup_date": None,
        "overall_score": None,
        "synthesis": None,
        "created_by": LEAD_ID,
        "created_at": datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc),
        "started_at": None,
        "closed_at": None,
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def make_response(**kwargs) -> SimpleNamespace:
    defaults = {
        "id": 1,
        "session_id": 1,
        "answers": {"retro_1": 4, "retro_2": 3},
        "device_id": "device-0001",
        "created_at": datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc),
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


# ── DB mock factory ───────────────────────────────────────────────────────────

def make_async_db() -> AsyncMock:
    """
    AsyncMock simulant une AsyncSession SQLAlchemy.
    Fournit une side_effect sur refresh() pour simuler le SET d'ID par le DB.
    """
    db = AsyncMock(spec=AsyncSession)
    db.add = MagicMock()

    async def refresh_side_effect(obj):
        if not getattr(obj, "id", None):
            try:
                obj.id = 1
            except (AttributeError, TypeError):
                pass

    db.refresh = AsyncMock(side_effect=refresh_side_effect)
    db.commit = AsyncMock()
    db.close = AsyncMock()

    return db


# ── Fixtures HTTP (httpx.AsyncClient + dependency_overrides) ─────────────────

@pytest.fixture
async def client():
    """Client sans auth — pour endpoints publics ou mocker le service entier."""
    mock_db = AsyncMock(spec=AsyncSession)
    app.dependency_overrides[get_db] = lambda: mock_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def lead_client():
    """Client authentifié comme lead d'équipe."""
    mock_db = AsyncMock(spec=AsyncSession)
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_current_user] = lambda: make_user()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
