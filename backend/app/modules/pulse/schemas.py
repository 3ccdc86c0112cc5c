# app/modules/pulse/schemas.py
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import date
from app.shared.enums import (
    PulseZone,
    TrendDirection,
    ConfidenceLevel,
    Velocity,
    DayState,
    WeekState,
    DataMaturity,
    InsightType,
    InsightSeverity,
)


# ── Check-in (public, anonyme) ─────────────────────────────

class CheckInIn(BaseModel):
    """Score 1-5. device_id : identifiant opaque généré côté navigateur."""
    score: int = Field(..., ge=1, le=5)
    device_id: str = Field(..., min_length=8, max_length=128)


class CheckInOut(BaseModel):
    status: str
    team_name: str
    checkin_date: date


# ── Métriques (lead) ───────────────────────────────────────

class PulseMetricOut(BaseModel):
    value: Optional[float] = None      # None = pas assez de données, pas une erreur
    zone: Optional[PulseZone] = None
    zone_label: str
    trend: TrendDirection
    delta: float
    entry_count: int
    participant_count: int
    confidence: ConfidenceLevel
    confidence_label: str


class MomentumOut(BaseModel):
    direction: TrendDirection
    velocity: Velocity
    days_trending: int


class ParticipationOut(BaseModel):
    today: int
    team_size: int
    rate: float
    rate_label: str
    trend: TrendDirection


class MaturityOut(BaseModel):
    level: DataMaturity
    label: str
    description: str
    days_of_data: int
    consistency_rate: float


class TeamMetricsOut(BaseModel):
    team_id: int
    live_pulse: PulseMetricOut
    day_pulse: PulseMetricOut
    week_pulse: PulseMetricOut
    previous_week_pulse: PulseMetricOut
    momentum: MomentumOut
    participation: ParticipationOut
    day_state: DayState
    day_state_label: str
    week_state: WeekState
    week_state_label: str
    maturity: MaturityOut
    last_updated: str
    has_enough_data: bool


class PulseInsightOut(BaseModel):
    id: str
    type: InsightType
    severity: InsightSeverity
    message: str
    detail: Optional[str] = None
    suggestions: List[str] = []
    data: Dict[str, Any] = {}


class CoachQuestionsOut(BaseModel):
    team_id: int
    questions: List[str]
