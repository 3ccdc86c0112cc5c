# engine/ceremonies/levels.py
"""
Progression Shu-Ha-Ri (守破離) d'une équipe — ZÉRO accès DB.
Reçoit l'historique des sessions clôturées, retourne la progression,
les conditions de déblocage et l'état de risque.

Appelé par : modules/ceremonies/service.py

Règles :
    Shu → Ha : 3 sessions / 30 j, score moyen >= 3.2 et participation >= 60%
               sur les 2 dernières sessions
    Ha  → Ri : 6 sessions au total, 3 angles différents, 4 sessions avec
               follow-up, 3 sessions / 45 j, score >= 3.5 et participation
               >= 70% sur les 3 dernières
    Un seul niveau débloqué par évaluation. Jamais de régression :
    le risque est purement indicatif.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Sequence, Union

from app.content.statements import ANGLES, LEVEL_ORDER, AngleInfo
from app.shared.enums import CeremonyAngle, CeremonyLevel, CeremonyRiskState

# --- SEUILS ---
HA_SESSIONS_30D       = 3
HA_MIN_SCORE          = 3.2
HA_MIN_PARTICIPATION  = 0.60

RI_SESSIONS_TOTAL     = 6
RI_UNIQUE_ANGLES      = 3
RI_FOLLOWUPS          = 4
RI_SESSIONS_45D       = 3
RI_MIN_SCORE          = 3.5
RI_MIN_PARTICIPATION  = 0.70

STALE_AFTER_DAYS          = 45
LOW_PARTICIPATION_RATE    = 0.50


@dataclass(frozen=True)
class SessionRecord:
    """Session clôturée, réduite à ce dont la progression a besoin."""
    closed_on: date
    angle: CeremonyAngle
    overall_score: Optional[float]
    response_count: int
    has_followup: bool


@dataclass
class LevelProgress:
    sessions_30d: int
    sessions_45d: int
    sessions_total: int
    followups_count: int
    unique_angles: int
    last_2_avg_score: Optional[float]
    last_3_avg_score: Optional[float]
    last_2_participation: Optional[float]   # 0-1
    last_3_participation: Optional[float]
    days_since_last_session: Optional[int]
    can_unlock_ha: bool = False
    can_unlock_ri: bool = False


@dataclass
class UnlockRequirement:
    key: str
    label: str
    met: bool
    current: Union[int, str, None] = None
    required: Union[int, str, None] = None


@dataclass
class LevelRisk:
    state: CeremonyRiskState
    reason: Optional[str]


@dataclass
class LevelEvaluation:
    level: CeremonyLevel
    previous_level: CeremonyLevel
    level_changed: bool
    risk: LevelRisk
    progress: LevelProgress


# ── Progression ───────────────────────────────────────────────────────────────

def compute_level_progress(
    sessions: Sequence[SessionRecord],
    team_size: int,
    today: date,
) -> LevelProgress:
    recent_first = sorted(sessions, key=lambda s: s.closed_on, reverse=True)

    progress = LevelProgress(
        sessions_30d=sum(1 for s in recent_first if s.closed_on >= today - timedelta(days=30)),
        sessions_45d=sum(1 for s in recent_first if s.closed_on >= today - timedelta(days=45)),
        sessions_total=len(recent_first),
        followups_count=sum(1 for s in recent_first if s.has_followup),
        unique_angles=len({s.angle for s in recent_first}),
        last_2_avg_score=_avg_score(recent_first[:2], 2),
        last_3_avg_score=_avg_score(recent_first[:3], 3),
        last_2_participation=_avg_participation(recent_first[:2], 2, team_size),
        last_3_participation=_avg_participation(recent_first[:3], 3, team_size),
        days_since_last_session=(today - recent_first[0].closed_on).days if recent_first else None,
    )
    progress.can_unlock_ha = all(r.met for r in _ha_requirements(progress))
    progress.can_unlock_ri = all(r.met for r in _ri_requirements(progress))
    return progress


def get_unlock_requirements(
    current_level: CeremonyLevel, progress: LevelProgress
) -> List[UnlockRequirement]:
    """Conditions vers le niveau suivant. Ri → liste vide."""
    if current_level == CeremonyLevel.SHU:
        return _ha_requirements(progress)
    if current_level == CeremonyLevel.HA:
        return _ri_requirements(progress)
    return []


def evaluate_level(current_level: CeremonyLevel, progress: LevelProgress) -> LevelEvaluation:
    level = CeremonyLevel(current_level)
    if level == CeremonyLevel.SHU and progress.can_unlock_ha:
        level = CeremonyLevel.HA
    elif level == CeremonyLevel.HA and progress.can_unlock_ri:
        level = CeremonyLevel.RI

    return LevelEvaluation(
        level=level,
        previous_level=CeremonyLevel(current_level),
        level_changed=level != current_level,
        risk=_assess_risk(level, progress),
        progress=progress,
    )


# ── Angles débloqués ──────────────────────────────────────────────────────────

def get_angles_for_level(level: CeremonyLevel) -> List[AngleInfo]:
    """Angles du niveau courant et des niveaux inférieurs."""
    max_index = LEVEL_ORDER.index(CeremonyLevel(level))
    return [a for a in ANGLES if LEVEL_ORDER.index(a.level) <= max_index]


def is_angle_unlocked(angle: CeremonyAngle, team_level: CeremonyLevel) -> bool:
    return any(a.id == angle for a in get_angles_for_level(team_level))


# ── Internals ─────────────────────────────────────────────────────────────────

def _avg_score(sessions: Sequence[SessionRecord], n: int) -> Optional[float]:
    scores = [s.overall_score for s in sessions if s.overall_score is not None]
    if len(sessions) < n or not scores:
        return None
    return round(sum(scores) / len(scores), 2)


def _avg_participation(sessions: Sequence[SessionRecord], n: int, team_size: int) -> Optional[float]:
    if len(sessions) < n or team_size <= 0:
        return None
    rates = [min(s.response_count / team_size, 1.0) for s in sessions]
    return round(sum(rates) / len(rates), 2)


def _fmt_score(value: Optional[float]) -> str:
    return f"{value:.1f}" if value is not None else "—"


def _fmt_rate(value: Optional[float]) -> str:
    return f"{round(value * 100)}%" if value is not None else "—"


def _ha_requirements(p: LevelProgress) -> List[UnlockRequirement]:
    return [
        UnlockRequirement(
            key="sessions", label=f"{HA_SESSIONS_30D} sessions in 30 days",
            met=p.sessions_30d >= HA_SESSIONS_30D,
            current=p.sessions_30d, required=HA_SESSIONS_30D,
        ),
        UnlockRequirement(
            key="score", label=f"Avg score ≥ {HA_MIN_SCORE}",
            met=(p.last_2_avg_score or 0) >= HA_MIN_SCORE,
            current=_fmt_score(p.last_2_avg_score), required=str(HA_MIN_SCORE),
        ),
        UnlockRequirement(
            key="participation", label=f"Participation ≥ {round(HA_MIN_PARTICIPATION * 100)}%",
            met=(p.last_2_participation or 0) >= HA_MIN_PARTICIPATION,
            current=_fmt_rate(p.last_2_participation), required=f"{round(HA_MIN_PARTICIPATION * 100)}%",
        ),
    ]


def _ri_requirements(p: LevelProgress) -> List[UnlockRequirement]:
    return [
        UnlockRequirement(
            key="total_sessions", label=f"{RI_SESSIONS_TOTAL} total sessions",
            met=p.sessions_total >= RI_SESSIONS_TOTAL,
            current=p.sessions_total, required=RI_SESSIONS_TOTAL,
        ),
        UnlockRequirement(
            key="diversity", label=f"{RI_UNIQUE_ANGLES} different ceremony types",
            met=p.unique_angles >= RI_UNIQUE_ANGLES,
            current=p.unique_angles, required=RI_UNIQUE_ANGLES,
        ),
        UnlockRequirement(
            key="followups", label=f"{RI_FOLLOWUPS} sessions with follow-up",
            met=p.followups_count >= RI_FOLLOWUPS,
            current=p.followups_count, required=RI_FOLLOWUPS,
        ),
        UnlockRequirement(
            key="recency", label=f"{RI_SESSIONS_45D} sessions in 45 days",
            met=p.sessions_45d >= RI_SESSIONS_45D,
            current=p.sessions_45d, required=RI_SESSIONS_45D,
        ),
        UnlockRequirement(
            key="score", label=f"Avg score ≥ {RI_MIN_SCORE}",
            met=(p.last_3_avg_score or 0) >= RI_MIN_SCORE,
            current=_fmt_score(p.last_3_avg_score), required=str(RI_MIN_SCORE),
        ),
        UnlockRequirement(
            key="participation", label=f"Participation ≥ {round(RI_MIN_PARTICIPATION * 100)}%",
            met=(p.last_3_participation or 0) >= RI_MIN_PARTICIPATION,
            current=_fmt_rate(p.last_3_participation), required=f"{round(RI_MIN_PARTICIPATION * 100)}%",
        ),
    ]


def _assess_risk(level: CeremonyLevel, p: LevelProgress) -> LevelRisk:
    """Ordre de priorité : stale > low_participation > slipping."""
    if p.days_since_last_session is not None and p.days_since_last_session > STALE_AFTER_DAYS:
        return LevelRisk(
            CeremonyRiskState.STALE,
            f"No session in {p.days_since_last_session} days.",
        )
    if p.last_2_participation is not None and p.last_2_participation < LOW_PARTICIPATION_RATE:
        return LevelRisk(
            CeremonyRiskState.LOW_PARTICIPATION,
            f"Participation in the last sessions is {_fmt_rate(p.last_2_participation)}.",
        )
    threshold = {CeremonyLevel.HA: HA_MIN_SCORE, CeremonyLevel.RI: RI_MIN_SCORE}.get(level)
    if threshold is not None and p.last_2_avg_score is not None and p.last_2_avg_score < threshold:
        return LevelRisk(
            CeremonyRiskState.SLIPPING,
            f"Average score {_fmt_score(p.last_2_avg_score)} is below the {level.value} level ({threshold}).",
        )
    return LevelRisk(CeremonyRiskState.NONE, None)
