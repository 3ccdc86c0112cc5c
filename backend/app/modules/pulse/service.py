# modules/pulse/service.py
"""
Pulse — check-ins anonymes quotidiens et métriques d'équipe.

Le service ne calcule rien lui-même : il charge les agrégats journaliers
via le repository, appelle l'engine (engine/pulse/*) et ajoute les
libellés d'affichage dans la langue demandée.
"""
import logging
from dataclasses import asdict
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo

from sqlalchemy.ext.asyncio import AsyncSession

from app.content import labels
from app.core.config import settings
from app.engine.coaching import generate_coach_questions
from app.engine.pulse.insights import generate_insights
from app.engine.pulse.metrics import PulseMetric, format_participation_rate
from app.engine.pulse.team import TeamMetrics, build_team_metrics
from app.modules.ceremonies.repository import CeremonyRepository
from app.modules.pulse.repository import PulseRepository
from app.modules.teams.repository import TeamRepository
from app.shared.deps import CurrentUser
from app.shared.enums import Language
from app.shared.models import Team

logger = logging.getLogger(__name__)

pulse_repo = PulseRepository()
team_repo = TeamRepository()
ceremony_repo = CeremonyRepository()

# Sessions récentes dont le score global marque une tension
CEREMONY_TENSION_SCORE = 3.0
CEREMONY_TENSION_LOOKBACK = 3


def team_today(team: Team, now: Optional[datetime] = None) -> date:
    """Date du jour dans le fuseau de l'équipe."""
    tz = ZoneInfo(team.timezone or settings.TEAM_TIMEZONE)
    return (now or datetime.now(tz)).astimezone(tz).date()


class PulseService:

    # ── Check-in (public) ─────────────────────────────────────

    async def submit_checkin(self, db: AsyncSession, slug: str, payload) -> Dict:
        team = await team_repo.get_by_slug(db, slug)
        if not team:
            raise ValueError("TEAM_NOT_FOUND")

        today = team_today(team)
        if await pulse_repo.has_checkin(db, team.id, payload.device_id, today):
            raise ValueError("ALREADY_CHECKED_IN_TODAY")

        checkin = await pulse_repo.create_checkin(
            db,
            team_id=team.id,
            device_id=payload.device_id,
            score=payload.score,
            day=today,
        )
        if checkin is None:
            raise ValueError("ALREADY_CHECKED_IN_TODAY")
        logger.info("pulse check-in team=%s date=%s", team.id, today)
        return {"status": "submitted", "team_name": team.name, "checkin_date": today}

    # ── Lecture (lead) ────────────────────────────────────────

    async def get_team_metrics(
        self, db: AsyncSession, team_id: int, user: CurrentUser, lang: Language = Language.EN
    ) -> Optional[Dict]:
        loaded = await self._load_metrics(db, team_id, user)
        if loaded is None:
            return None
        team, metrics = loaded
        return self._metrics_out(team.id, metrics, lang)

    async def get_team_insights(
        self, db: AsyncSession, team_id: int, user: CurrentUser
    ) -> Optional[List[Dict]]:
        loaded = await self._load_metrics(db, team_id, user)
        if loaded is None:
            return None
        _, metrics = loaded
        return [asdict(i) for i in generate_insights(metrics)]

    async def get_coach_questions(
        self, db: AsyncSession, team_id: int, user: CurrentUser
    ) -> Optional[Dict]:
        loaded = await self._load_metrics(db, team_id, user)
        if loaded is None:
            return None
        team, metrics = loaded

        recent = await ceremony_repo.get_closed_sessions(db, team.id, limit=CEREMONY_TENSION_LOOKBACK)
        tensions = sorted(
            (s for s in recent if s.overall_score is not None and s.overall_score < CEREMONY_TENSION_SCORE),
            key=lambda s: s.overall_score,
        )
        questions = generate_coach_questions(
            pulse_score=metrics.week_pulse.value,
            participation_percent=metrics.participation.rate,
            tension_angles=[s.angle for s in tensions],
        )
        return {"team_id": team.id, "questions": questions}

    # ── Internals ─────────────────────────────────────────────

    async def _load_metrics(self, db: AsyncSession, team_id: int, user: CurrentUser):
        """None → équipe introuvable. PermissionError → pas le lead de l'équipe."""
        team = await team_repo.get_team(db, team_id)
        if not team:
            return None
        if team.owner_id != user.id:
            raise PermissionError("Accès refusé.")

        today = team_today(team)
        daily = await pulse_repo.get_daily_aggregates(
            db,
            team_id=team.id,
            since=today - timedelta(days=settings.PULSE_HISTORY_DAYS),
            team_size=team.team_size,
        )
        return team, build_team_metrics(daily, team.team_size, today)

    def _metrics_out(self, team_id: int, m: TeamMetrics, lang: Language) -> Dict:
        return {
            "team_id":             team_id,
            "live_pulse":          self._metric_out(m.live_pulse, lang),
            "day_pulse":           self._metric_out(m.day_pulse, lang),
            "week_pulse":          self._metric_out(m.week_pulse, lang),
            "previous_week_pulse": self._metric_out(m.previous_week_pulse, lang),
            "momentum":            asdict(m.momentum),
            "participation": {
                **asdict(m.participation),
                "rate_label": format_participation_rate(m.participation.today, m.participation.team_size),
            },
            "day_state":        m.day_state,
            "day_state_label":  labels.day_state_label(m.day_state, lang),
            "week_state":       m.week_state,
            "week_state_label": labels.week_state_label(m.week_state, lang),
            "maturity": {
                **asdict(m.maturity),
                "label":       labels.maturity_label(m.maturity.level, lang),
                "description": labels.maturity_description(m.maturity.level, m.maturity.days_of_data, lang),
            },
            "last_updated":    m.last_updated,
            "has_enough_data": m.has_enough_data,
        }

    def _metric_out(self, metric: PulseMetric, lang: Language) -> Dict:
        return {
            **asdict(metric),
            "value":            round(metric.value, 2) if metric.value is not None else None,
            "zone_label":       labels.zone_label(metric.zone, lang),
            "confidence_label": labels.confidence_label(metric.confidence, lang),
        }
