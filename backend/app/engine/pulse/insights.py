# engine/pulse/insights.py
"""
Insights Pulse — ZÉRO accès DB.
Transforme un TeamMetrics en liste d'insights textuels pour le lead.

Règles (ordre = priorité d'affichage) :
    1. Zone "under_pressure" sur la semaine        → warning
    2. Semaine en baisse vs semaine précédente      → attention
       Semaine en hausse                            → info
    3. Série de 3+ jours dans le même sens          → pattern
    4. Participation moyenne < 30% sur 7 jours ou en baisse → participation
    5. Palier de maturité atteint                   → milestone

Aucun insight n'est produit tant que has_enough_data est faux,
sauf le palier de maturité.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from app.content.coaching import COACH_QUESTIONS
from app.engine.pulse.metrics import participation_rate
from app.engine.pulse.team import TeamMetrics, WEEK_DAYS
from app.shared.enums import (
    InsightType,
    InsightSeverity,
    PulseZone,
    TrendDirection,
    DataMaturity,
)

LOW_PARTICIPATION_RATE = 30.0
PATTERN_MIN_DAYS = 3


@dataclass
class PulseInsight:
    id: str
    type: InsightType
    severity: InsightSeverity
    message: str
    detail: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)


def generate_insights(metrics: TeamMetrics) -> List[PulseInsight]:
    insights: List[PulseInsight] = []
    week = metrics.week_pulse

    if metrics.has_enough_data:
        if week.zone == PulseZone.UNDER_PRESSURE:
            insights.append(PulseInsight(
                id="zone_under_pressure",
                type=InsightType.TREND,
                severity=InsightSeverity.WARNING,
                message="The team has been under pressure this week.",
                detail=f"7-day average {week.value:.1f} based on {week.entry_count} check-ins.",
                suggestions=COACH_QUESTIONS["low_pulse"][:2],
                data={"value": round(week.value, 2), "zone": week.zone.value},
            ))

        if week.trend == TrendDirection.DECLINING:
            insights.append(PulseInsight(
                id="week_declining",
                type=InsightType.TREND,
                severity=InsightSeverity.ATTENTION,
                message="The team signal is lower than last week.",
                detail=f"Change of {week.delta:+.1f} compared to the previous 7 days.",
                suggestions=COACH_QUESTIONS["general"][1:2],
                data={"delta": week.delta},
            ))
        elif week.trend == TrendDirection.RISING:
            insights.append(PulseInsight(
                id="week_rising",
                type=InsightType.TREND,
                severity=InsightSeverity.INFO,
                message="The team signal is higher than last week.",
                detail=f"Change of {week.delta:+.1f} compared to the previous 7 days.",
                suggestions=COACH_QUESTIONS["general"][:1],
                data={"delta": week.delta},
            ))

        momentum = metrics.momentum
        if momentum.days_trending >= PATTERN_MIN_DAYS and momentum.direction != TrendDirection.STABLE:
            declining = momentum.direction == TrendDirection.DECLINING
            insights.append(PulseInsight(
                id=f"momentum_{momentum.direction.value}",
                type=InsightType.PATTERN,
                severity=InsightSeverity.WARNING if declining else InsightSeverity.INFO,
                message=(
                    f"The signal has been {'dropping' if declining else 'rising'} "
                    f"for {momentum.days_trending} days in a row."
                ),
                data={
                    "direction": momentum.direction.value,
                    "velocity": momentum.velocity.value,
                    "days_trending": momentum.days_trending,
                },
            ))

        participation = metrics.participation
        week_rate = participation_rate(week.entry_count, WEEK_DAYS * participation.team_size)
        if participation.trend == TrendDirection.DECLINING or week_rate < LOW_PARTICIPATION_RATE:
            insights.append(PulseInsight(
                id="participation_low",
                type=InsightType.PARTICIPATION,
                severity=InsightSeverity.ATTENTION,
                message="Fewer team members are sharing their signal.",
                detail=f"{week_rate:.0f}% average daily participation over the last 7 days.",
                suggestions=COACH_QUESTIONS["low_participation"][:2],
                data={"week_rate": round(week_rate, 1), "trend": participation.trend.value},
            ))

    maturity = metrics.maturity
    if maturity.level != DataMaturity.CALIBRATING:
        insights.append(PulseInsight(
            id=f"maturity_{maturity.level.value}",
            type=InsightType.MILESTONE,
            severity=InsightSeverity.INFO,
            message=f"{maturity.days_of_data} days of data collected.",
            detail=f"{maturity.consistency_rate:.0f}% of days had at least 30% participation.",
            data={"level": maturity.level.value, "days_of_data": maturity.days_of_data},
        ))

    return insights
