# engine/pulse/team.py
"""
Composition du TeamMetrics — ZÉRO accès DB.
Assemble les PulseMetric (live / jour / semaine / semaine précédente),
le momentum, la participation, les états jour/semaine et la maturité.

Appelé par : modules/pulse/service.py

Architecture :
    pulse/service.get_team_metrics()
        → pulse_repo.get_daily_aggregates()   → List[DailyAggregate]
        → build_team_metrics(daily, team_size, today)
        → TeamMetricsOut
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Sequence

from app.engine.pulse.metrics import (
    DailyAggregate,
    PulseMetric,
    Momentum,
    CONFIDENCE_LOW_RATE,
    build_pulse_metric,
    calculate_momentum,
    calculate_data_maturity,
    calculate_day_state,
    calculate_week_state,
    has_minimum_data,
    participation_rate,
)
from app.shared.enums import TrendDirection, DayState, WeekState, DataMaturity

WEEK_DAYS = 7
MOMENTUM_LOOKBACK_DAYS = 14
END_OF_WEEK_WEEKDAY = 4          # vendredi
PARTICIPATION_TREND_THRESHOLD = 10.0   # points de pourcentage


@dataclass
class Participation:
    today: int
    team_size: int
    rate: float                # 0-100
    trend: TrendDirection      # semaine vs semaine précédente


@dataclass
class Maturity:
    level: DataMaturity
    days_of_data: int
    consistency_rate: float    # % des jours avec 30%+ de participation


@dataclass
class TeamMetrics:
    live_pulse: PulseMetric            # aujourd'hui, temps réel
    day_pulse: PulseMetric             # hier (dernier jour complet)
    week_pulse: PulseMetric            # 7 jours glissants
    previous_week_pulse: PulseMetric   # 7 jours précédents
    momentum: Momentum
    participation: Participation
    day_state: DayState
    week_state: WeekState
    maturity: Maturity
    last_updated: str                  # ISO timestamp
    has_enough_data: bool


def build_team_metrics(
    daily: Sequence[DailyAggregate],
    participant_count: int,
    today: date,
    now: Optional[datetime] = None,
) -> TeamMetrics:
    """
    Args:
        daily            : agrégats journaliers de l'équipe, ordre indifférent.
                           Les jours postérieurs à `today` sont ignorés.
        participant_count: taille actuelle de l'équipe.
        today            : jour de référence (fuseau de l'équipe, résolu en amont).
    """
    history = sorted((d for d in daily if d.date <= today), key=lambda d: d.date)

    def window(days_back_start: int, days_back_end: int) -> List[DailyAggregate]:
        start = today - timedelta(days=days_back_start)
        end = today - timedelta(days=days_back_end)
        return [d for d in history if start <= d.date <= end]

    today_days      = window(0, 0)
    yesterday       = window(1, 1)
    day_before      = window(2, 2)
    week            = window(WEEK_DAYS - 1, 0)
    previous_week   = window(2 * WEEK_DAYS - 1, WEEK_DAYS)
    two_weeks_ago   = window(3 * WEEK_DAYS - 1, 2 * WEEK_DAYS)

    week_pulse = build_pulse_metric(week, previous_week, participant_count)

    momentum_days = [d for d in window(MOMENTUM_LOOKBACK_DAYS - 1, 0) if d.count > 0]

    today_entries = sum(d.count for d in today_days)
    today_rate = participation_rate(today_entries, participant_count)

    return TeamMetrics(
        live_pulse=build_pulse_metric(today_days, yesterday, participant_count),
        day_pulse=build_pulse_metric(yesterday, day_before, participant_count),
        week_pulse=week_pulse,
        previous_week_pulse=build_pulse_metric(previous_week, two_weeks_ago, participant_count),
        momentum=calculate_momentum(momentum_days),
        participation=Participation(
            today=today_entries,
            team_size=participant_count,
            rate=round(today_rate, 1),
            trend=_participation_trend(week, previous_week, participant_count),
        ),
        day_state=calculate_day_state(today_rate),
        week_state=_week_state(history, today),
        maturity=_maturity(history, participant_count),
        last_updated=(now or datetime.now(timezone.utc)).isoformat(),
        has_enough_data=has_minimum_data(week_pulse.entry_count),
    )


# ── Internals ─────────────────────────────────────────────────────────────────

def _participation_trend(
    week: Sequence[DailyAggregate],
    previous_week: Sequence[DailyAggregate],
    participant_count: int,
) -> TrendDirection:
    """Taux moyen journalier sur 7 jours calendaires, comparé semaine à semaine."""
    if participant_count == 0 or not any(d.count for d in previous_week):
        return TrendDirection.STABLE

    capacity = WEEK_DAYS * participant_count
    current = sum(d.count for d in week) / capacity * 100
    previous = sum(d.count for d in previous_week) / capacity * 100
    delta = current - previous

    if delta >= PARTICIPATION_TREND_THRESHOLD:
        return TrendDirection.RISING
    if delta <= -PARTICIPATION_TREND_THRESHOLD:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


def _week_state(history: Sequence[DailyAggregate], today: date) -> WeekState:
    monday = today - timedelta(days=today.weekday())
    days_with_data = sum(1 for d in history if monday <= d.date <= today and d.count > 0)
    return calculate_week_state(days_with_data, today.weekday() >= END_OF_WEEK_WEEKDAY)


def _maturity(history: Sequence[DailyAggregate], participant_count: int) -> Maturity:
    data_days = [d for d in history if d.count > 0]
    if not data_days:
        return Maturity(level=calculate_data_maturity(0, 0.0), days_of_data=0, consistency_rate=0.0)

    consistent = 0
    for d in data_days:
        team_size = d.participant_count or participant_count
        if team_size and d.count / team_size >= CONFIDENCE_LOW_RATE:
            consistent += 1

    consistency_rate = round(consistent / len(data_days) * 100, 1)
    return Maturity(
        level=calculate_data_maturity(len(data_days), consistency_rate),
        days_of_data=len(data_days),
        consistency_rate=consistency_rate,
    )
