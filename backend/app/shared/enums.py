# app/shared/enums.py
"""
Toutes les énumérations du projet Team Pulse.

Source unique de vérité pour les zones, tendances, statuts et niveaux.
Importé par les modèles, schemas, services et engine.
"""

from enum import Enum


# ── Pulse (check-in quotidien) ─────────────────────────────

class PulseZone(str, Enum):
    UNDER_PRESSURE  = "under_pressure"
    MIXED_SIGNALS   = "mixed_signals"
    STEADY_STATE    = "steady_state"
    HIGH_CONFIDENCE = "high_confidence"


class TrendDirection(str, Enum):
    RISING    = "rising"
    STABLE    = "stable"
    DECLINING = "declining"


class ConfidenceLevel(str, Enum):
    LOW      = "low"        # < 30% de participation
    MODERATE = "moderate"   # 30-60%
    HIGH     = "high"       # >= 60%


class Velocity(str, Enum):
    SLOW     = "slow"
    MODERATE = "moderate"
    FAST     = "fast"


class DayState(str, Enum):
    DAY_FORMING     = "day_forming"
    SIGNAL_EMERGING = "signal_emerging"
    DAY_COMPLETE    = "day_complete"


class WeekState(str, Enum):
    WEEK_BUILDING  = "week_building"
    SIGNAL_FORMING = "signal_forming"
    WEEK_COMPLETE  = "week_complete"


class DataMaturity(str, Enum):
    CALIBRATING           = "calibrating"             # < 7 jours
    ESTABLISHING_BASELINE = "establishing_baseline"   # 7-14 jours
    PATTERN_FORMING       = "pattern_forming"         # 14-30 jours
    RELIABLE_SIGNAL       = "reliable_signal"         # 30+ jours et régulier


class InsightType(str, Enum):
    TREND         = "trend"
    PARTICIPATION = "participation"
    PATTERN       = "pattern"
    MILESTONE     = "milestone"


class InsightSeverity(str, Enum):
    INFO      = "info"
    ATTENTION = "attention"
    WARNING   = "warning"


# ── Ceremonies ─────────────────────────────────────────────

class CeremonyAngle(str, Enum):
    SCRUM                = "scrum"
    FLOW                 = "flow"
    OWNERSHIP            = "ownership"
    COLLABORATION        = "collaboration"
    TECHNICAL_EXCELLENCE = "technical_excellence"
    REFINEMENT           = "refinement"
    PLANNING             = "planning"
    RETRO                = "retro"
    DEMO                 = "demo"


class CeremonyStatus(str, Enum):
    DRAFT  = "draft"
    ACTIVE = "active"
    CLOSED = "closed"     # Définitif — pas de réouverture


class CeremonyLevel(str, Enum):
    SHU = "shu"   # 守 Apprendre les bases
    HA  = "ha"    # 破 Adapter consciemment
    RI  = "ri"    # 離 Maîtrise


class CeremonyRiskState(str, Enum):
    NONE              = "none"
    SLIPPING          = "slipping"
    LOW_PARTICIPATION = "low_participation"
    STALE             = "stale"


class Language(str, Enum):
    NL = "nl"
    EN = "en"
