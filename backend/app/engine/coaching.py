# engine/coaching.py
"""
Questions de coaching pour le lead — ZÉRO accès DB.
Sélection par règles à partir du score Pulse, de la participation
et des tensions de la dernière cérémonie.

Déterministe par défaut (premières questions de chaque catégorie) ;
passer un random.Random pour varier les questions d'un appel à l'autre.
"""
import random
from typing import List, Optional, Sequence

from app.content.coaching import COACH_QUESTIONS, ANGLE_TO_CATEGORY

LOW_PULSE_SCORE = 3.0
LOW_PARTICIPATION_PERCENT = 50.0
MAX_TENSIONS = 2
DEFAULT_LIMIT = 5


def generate_coach_questions(
    pulse_score: Optional[float],
    participation_percent: float,
    tension_angles: Sequence[str] = (),
    rng: Optional[random.Random] = None,
    limit: int = DEFAULT_LIMIT,
) -> List[str]:
    """
    Args:
        pulse_score          : moyenne Pulse de la semaine (None si pas de données)
        participation_percent: participation 0-100
        tension_angles       : angles des tensions récentes, la plus basse en premier
    """
    picked: List[str] = []

    if pulse_score is not None and pulse_score < LOW_PULSE_SCORE:
        picked += _pick("low_pulse", 2, rng)

    if participation_percent < LOW_PARTICIPATION_PERCENT:
        picked += _pick("low_participation", 1, rng)

    for angle in list(tension_angles)[:MAX_TENSIONS]:
        category = ANGLE_TO_CATEGORY.get(getattr(angle, "value", angle), "general")
        picked += _pick(category, 1, rng)

    picked += _pick("general", 2, rng)

    # dict.fromkeys : dédoublonne en conservant l'ordre
    return list(dict.fromkeys(picked))[:limit]


def _pick(category: str, count: int, rng: Optional[random.Random]) -> List[str]:
    questions = COACH_QUESTIONS[category]
    if rng is None:
        return questions[:count]
    return rng.sample(questions, min(count, len(questions)))
