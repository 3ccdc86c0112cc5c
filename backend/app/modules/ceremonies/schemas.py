# app/modules/ceremonies/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Tuple, Union
from datetime import datetime, date
from app.shared.enums import CeremonyAngle, CeremonyStatus, CeremonyLevel, CeremonyRiskState


# ── Session (lead) ─────────────────────────────────────────

class SessionCreateIn(BaseModel):
    angle: CeremonyAngle
    title: Optional[str] = Field(None, max_length=200)


class SessionCloseIn(BaseModel):
    """Résultat saisi par le lead — peut reprendre ou réécrire la suggestion."""
    focus_area: str = Field(..., min_length=1, max_length=500)
    experiment: str = Field(..., min_length=1, max_length=1000)
    experiment_owner: str = Field(..., min_length=1, max_length=200)
    followup_date: Optional[date] = None


class SessionOut(BaseModel):
    id: int
    team_id: int
    session_code: str
    angle: CeremonyAngle
    title: Optional[str] = None
    status: CeremonyStatus
    focus_area: Optional[str] = None
    experiment: Optional[str] = None
    experiment_owner: Optional[str] = None
    followup_date: Optional[date] = None
    overall_score: Optional[float] = None
    created_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    response_count: int = 0
    model_config = ConfigDict(from_attributes=True)


# ── Réponse (public, anonyme) ──────────────────────────────

class StatementOut(BaseModel):
    id: str
    text: str
    angle: CeremonyAngle
    theme: str


class PublicSessionOut(BaseModel):
    session_code: str
    angle: CeremonyAngle
    title: Optional[str] = None
    status: CeremonyStatus
    statements: List[StatementOut]


class ResponseIn(BaseModel):
    """answers : statement_id → score 1-5. Un statement peut être sauté."""
    device_id: str = Field(..., min_length=8, max_length=128)
    answers: Dict[str, int] = Field(..., min_length=1)


class ResponseOut(BaseModel):
    status: str
    response_id: int


# ── Synthèse ───────────────────────────────────────────────

class StatementScoreOut(BaseModel):
    statement: StatementOut
    score: float
    response_count: int
    distribution: Tuple[int, int, int, int, int]
    variance: float


class SynthesisOut(BaseModel):
    strengths: List[StatementScoreOut]
    tensions: List[StatementScoreOut]
    all_scores: List[StatementScoreOut]
    overall_score: Optional[float] = None
    disagreement_count: int
    focus_area: Optional[str] = None
    suggested_experiment: Optional[str] = None
    response_count: int
    flags: List[str] = []


class SessionDetailOut(BaseModel):
    session: SessionOut
    # None tant que response_count < MIN_RESPONSES_FOR_SYNTHESIS
    synthesis: Optional[SynthesisOut] = None


# ── Niveaux Shu-Ha-Ri ──────────────────────────────────────

class UnlockRequirementOut(BaseModel):
    key: str
    label: str
    met: bool
    current: Union[int, str, None] = None
    required: Union[int, str, None] = None


class LevelProgressOut(BaseModel):
    sessions_30d: int
    sessions_45d: int
    sessions_total: int
    followups_count: int
    unique_angles: int
    last_2_avg_score: Optional[float] = None
    last_3_avg_score: Optional[float] = None
    last_2_participation: Optional[float] = None
    last_3_participation: Optional[float] = None
    days_since_last_session: Optional[int] = None
    can_unlock_ha: bool
    can_unlock_ri: bool


class LevelRiskOut(BaseModel):
    state: CeremonyRiskState
    reason: Optional[str] = None


class AngleOut(BaseModel):
    id: CeremonyAngle
    label: str
    description: str
    level: CeremonyLevel
    unlocked: bool


class LevelEvaluationOut(BaseModel):
    level: CeremonyLevel
    previous_level: CeremonyLevel
    level_changed: bool
    risk: LevelRiskOut
    progress: LevelProgressOut
    requirements: List[UnlockRequirementOut]
    angles: List[AngleOut]
