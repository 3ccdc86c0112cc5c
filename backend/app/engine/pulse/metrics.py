# engine/pulse/metrics.py
"""
Métriques Pulse — ZÉRO accès DB.
Reçoit des agrégats journaliers (moyenne + nombre de check-ins), retourne
zones, tendances, confiance, momentum et maturité des données.

Appelé par : engine/pulse/team.py, modules/pulse/service.py

Toutes les fonctions sont totales et sans effet de bord : l'absence de
données donne None / 0 / "stable" / "low", jamais une exception.
Les préconditions (comptes négatifs, moyennes hors [1, 5]) sont vérifiées
par des assert : elles cassent en test, et relèvent d'un bug appelant en prod.
"""
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence

from app.shared.enums import (
    PulseZone,
    TrendDirection,
    ConfidenceLevel,
    Velocity,
    DayState,
    WeekState,
    DataMaturity,
)

# --- SEUILS ---
# Bornes hautes des zones (échelle 1-5)
ZONE_UNDER_PRESSURE_MAX = 2.4
ZONE_MIXED_SIGNALS_MAX  = 3.4
ZONE_STEADY_STATE_MAX   = 4.0

# Taux de participation pour la confiance
CONFIDENCE_LOW_RATE      = 0.30
CONFIDENCE_MODERATE_RATE = 0.60

# Variation minimale pour compter comme rising / declining
TREND_THRESHOLD = 0.3

# Momentum
MOMENTUM_WINDOW        = 3
VELOCITY_FAST_CHANGE     = 0.5
VELOCITY_MODERATE_CHANGE = 0.3

# Maturité
MATURITY_RELIABLE_DAYS        = 30
MATURITY_RELIABLE_CONSISTENCY = 70.0
MATURITY_PATTERN_DAYS         = 14
MATURITY_BASELINE_DAYS        = 7

# États jour / semaine (pourcentages)
DAY_COMPLETE_RATE       = 60
DAY_SIGNAL_RATE         = 30
WEEK_COMPLETE_DAYS      = 4
WEEK_SIGNAL_DAYS        = 3

MIN_ENTRIES_FOR_AGGREGATES = 3

SCORE_MIN = 1.0
SCORE_MAX = 5.0


# ── Dataclasses ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DailyAggregate:
    """Check-ins d'une équipe pour une journée, déjà groupés par le repository."""
    date: date
    average: float          # 1-5 (sans signification si count == 0)
    count: int              # nombre de check-ins
    participant_count: int  # taille de l'équipe ce jour-là


@dataclass
class PulseMetric:
    value: Optional[float]           # moyenne pondérée, None si aucune donnée
    zone: Optional[PulseZone]
    trend: TrendDirection
    delta: float                     # arrondi à 1 décimale
    entry_count: int
    participant_count: int
    confidence: ConfidenceLevel


@dataclass
class Momentum:
    direction: TrendDirection
    velocity: Velocity
    days_trending: int


# ── Classification ───────────────────────────────────────────────────────────

def value_to_zone(value: Optional[float]) -> Optional[PulseZone]:
    if value is None:
        return None
    if value <= ZONE_UNDER_PRESSURE_MAX:
        return PulseZone.UNDER_PRESSURE
    if value <= ZONE_MIXED_SIGNALS_MAX:
        return PulseZone.MIXED_SIGNALS
    if value <= ZONE_STEADY_STATE_MAX:
        return PulseZone.STEADY_STATE
    return PulseZone.HIGH_CONFIDENCE


def calculate_confidence(entry_count: int, participant_count: int) -> ConfidenceLevel:
    """Confiance = f(taux de participation). Équipe vide → low."""
    assert entry_count >= 0 and participant_count >= 0, "comptes négatifs"
    if participant_count == 0:
        return ConfidenceLevel.LOW

    rate = entry_count / participant_count
    if rate < CONFIDENCE_LOW_RATE:
        return ConfidenceLevel.LOW
    if rate < CONFIDENCE_MODERATE_RATE:
        return ConfidenceLevel.MODERATE
    return ConfidenceLevel.HIGH


def calculate_trend(delta: float) -> TrendDirection:
    """Bande morte de ±0.3 pour ne pas amplifier le bruit jour à jour."""
    if delta >= TREND_THRESHOLD:
        return TrendDirection.RISING
    if delta <= -TREND_THRESHOLD:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


# ── Agrégation ───────────────────────────────────────────────────────────────

def calculate_average(days: Sequence[DailyAggregate]) -> Optional[float]:
    """
    Moyenne pondérée par le nombre de check-ins :
        Σ(average_i × count_i) / Σ(count_i)

    Ce n'est PAS la moyenne des moyennes : un jour à 10 réponses pèse
    cinq fois plus qu'un jour à 2 réponses.
    """
    if not days:
        return None

    total_weighted = 0.0
    total_count = 0
    for d in days:
        assert d.count >= 0, "count négatif"
        assert d.count == 0 or SCORE_MIN <= d.average <= SCORE_MAX, "moyenne hors [1, 5]"
        total_weighted += d.average * d.count
        total_count += d.count

    if total_count == 0:
        return None
    return total_weighted / total_count


def build_pulse_metric(
    current_days: Sequence[DailyAggregate],
    previous_days: Sequence[DailyAggregate],
    participant_count: int,
) -> PulseMetric:
    """
    Compose un PulseMetric pour une période, comparée à la période précédente.
    Delta = 0 si l'une des deux périodes est vide. Ne lève jamais.
    """
    current_avg = calculate_average(current_days)
    previous_avg = calculate_average(previous_days)
    entry_count = sum(d.count for d in current_days)

    if current_avg is not None and previous_avg is not None:
        delta = current_avg - previous_avg
    else:
        delta = 0.0

    return PulseMetric(
        value=current_avg,
        zone=value_to_zone(current_avg),
        trend=calculate_trend(delta),
        delta=round(delta, 1),
        entry_count=entry_count,
        participant_count=participant_count,
        confidence=calculate_confidence(entry_count, participant_count),
    )


def calculate_momentum(days: Sequence[DailyAggregate]) -> Momentum:
    """
    Momentum sur une série chronologique de moyennes journalières.

    1. Deltas jour à jour.
    2. Série récente : depuis le dernier delta en remontant, on compte les
       deltas non-stables de même sens. Arrêt au premier delta stable ou au
       premier changement de sens → days_trending.
    3. Moyenne des 3 derniers deltas → direction lissée + vitesse.

    La direction de la série récente l'emporte sur la direction lissée ;
    la direction lissée n'est utilisée que si aucune série n'a été trouvée.
    """
    if len(days) < 2:
        return Momentum(TrendDirection.STABLE, Velocity.SLOW, 0)

    changes: List[float] = [
        days[i].average - days[i - 1].average for i in range(1, len(days))
    ]

    run_direction: Optional[TrendDirection] = None
    days_trending = 0
    for change in reversed(changes):
        direction = calculate_trend(change)
        if direction == TrendDirection.STABLE:
            break
        if run_direction is None:
            run_direction = direction
            days_trending = 1
        elif direction == run_direction:
            days_trending += 1
        else:
            break

    recent = changes[-MOMENTUM_WINDOW:]
    avg_change = sum(recent) / len(recent)
    averaged_direction = calculate_trend(avg_change)

    abs_change = abs(avg_change)
    if abs_change > VELOCITY_FAST_CHANGE:
        velocity = Velocity.FAST
    elif abs_change > VELOCITY_MODERATE_CHANGE:
        velocity = Velocity.MODERATE
    else:
        velocity = Velocity.SLOW

    return Momentum(
        direction=run_direction or averaged_direction,
        velocity=velocity,
        days_trending=days_trending,
    )


# ── États & maturité ─────────────────────────────────────────────────────────

def calculate_data_maturity(total_days_with_data: int, consistency_rate: float) -> DataMaturity:
    """
    consistency_rate : % des jours avec au moins 30% de participation
    (calculé par l'appelant).
    """
    if (
        total_days_with_data >= MATURITY_RELIABLE_DAYS
        and consistency_rate >= MATURITY_RELIABLE_CONSISTENCY
    ):
        return DataMaturity.RELIABLE_SIGNAL
    if total_days_with_data >= MATURITY_PATTERN_DAYS:
        return DataMaturity.PATTERN_FORMING
    if total_days_with_data >= MATURITY_BASELINE_DAYS:
        return DataMaturity.ESTABLISHING_BASELINE
    return DataMaturity.CALIBRATING


def calculate_day_state(participation_rate: float) -> DayState:
    """participation_rate en pourcentage (0-100)."""
    if participation_rate >= DAY_COMPLETE_RATE:
        return DayState.DAY_COMPLETE
    if participation_rate >= DAY_SIGNAL_RATE:
        return DayState.SIGNAL_EMERGING
    return DayState.DAY_FORMING


def calculate_week_state(days_with_data: int, is_end_of_week: bool) -> WeekState:
    if is_end_of_week and days_with_data >= WEEK_COMPLETE_DAYS:
        return WeekState.WEEK_COMPLETE
    if days_with_data >= WEEK_SIGNAL_DAYS:
        return WeekState.SIGNAL_FORMING
    return WeekState.WEEK_BUILDING


# ── Helpers d'affichage ──────────────────────────────────────────────────────

def has_minimum_data(entry_count: int) -> bool:
    return entry_count >= MIN_ENTRIES_FOR_AGGREGATES


def participation_rate(entries: int, total: int) -> float:
    """Taux en pourcentage (0-100). Équipe vide → 0."""
    if total == 0:
        return 0.0
    return entries / total * 100


def format_participation_rate(entries: int, total: int) -> str:
    return f"{round(participation_rate(entries, total))}%"
