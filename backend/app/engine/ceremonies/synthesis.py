# engine/ceremonies/synthesis.py
"""
Synthèse d'une session de cérémonie — ZÉRO accès DB.
Reçoit le catalogue de statements de l'angle + les réponses anonymes
(statement_id → score 1-5), retourne un SynthesisResult classé.

Appelé par : modules/ceremonies/service.py

Modèles implémentés :
- Score par statement   : mean(réponses)
- Désaccord             : std(réponses) > 1.0  (écart-type de population, ddof=0)
- Score global          : mean(toutes les réponses aplaties) — pas la moyenne
                          des moyennes, les statements plus répondus pèsent plus
- Focus area            : theme de la tension la plus basse → content/experiments.py

Le seuil d'affichage (>= 3 répondants) est appliqué par le service, pas ici.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from app.content.experiments import THEME_GUIDANCE, ANGLE_EXPERIMENTS, GENERIC_EXPERIMENT
from app.shared.enums import CeremonyAngle

# --- SEUILS ---
DISAGREEMENT_THRESHOLD = 1.0
TOP_N = 2
SCORE_MIN = 1
SCORE_MAX = 5

ScoreDistribution = Tuple[int, int, int, int, int]   # nombre de 1, 2, 3, 4, 5
ResponseAnswers = Mapping[str, Optional[int]]        # statement_id → score 1-5


@dataclass(frozen=True)
class Statement:
    id: str
    text: str
    angle: CeremonyAngle
    theme: str = ""


@dataclass
class StatementScore:
    statement: Statement
    score: float                     # moyenne 1-5
    response_count: int              # nombre de réponses à CE statement
    distribution: ScoreDistribution
    variance: float                  # écart-type (0 = accord, > 1 = désaccord)


@dataclass
class SynthesisResult:
    strengths: List[StatementScore]     # 2 plus hauts
    tensions: List[StatementScore]      # 2 plus bas, le plus bas en premier
    all_scores: List[StatementScore]    # tous, triés du plus haut au plus bas
    overall_score: Optional[float]      # None si aucune réponse
    disagreement_count: int
    focus_area: Optional[str]
    suggested_experiment: Optional[str]
    response_count: int                 # nombre de répondants
    flags: List[str] = field(default_factory=list)


def synthesize(
    statements: Sequence[Statement],
    responses: Sequence[ResponseAnswers],
) -> SynthesisResult:
    """
    Agrège N réponses anonymes d'une session en synthèse classée.

    Args:
        statements: catalogue de l'angle (ordre du catalogue = ordre de départage)
        responses : une map statement_id → score par répondant. Les clés
                    absentes ou None = statement sauté. Les ids hors catalogue
                    sont ignorés.
    """
    answers_by_statement: Dict[str, List[int]] = {s.id: [] for s in statements}
    for answers in responses:
        for statement_id, value in answers.items():
            if value is None or statement_id not in answers_by_statement:
                continue
            assert SCORE_MIN <= value <= SCORE_MAX, f"score hors [1, 5] : {value}"
            answers_by_statement[statement_id].append(int(value))

    scored = [
        _score_statement(s, answers_by_statement[s.id])
        for s in statements
        if answers_by_statement[s.id]
    ]

    # sorted() est stable : à score égal, l'ordre du catalogue est conservé
    all_scores = sorted(scored, key=lambda s: s.score, reverse=True)
    strengths = all_scores[:TOP_N]
    tensions = list(reversed(all_scores[-TOP_N:]))

    flat = [v for values in answers_by_statement.values() for v in values]
    overall = float(np.mean(flat)) if flat else None

    focus_area, experiment = _derive_focus(tensions[0]) if tensions else (None, None)

    return SynthesisResult(
        strengths=strengths,
        tensions=tensions,
        all_scores=all_scores,
        overall_score=overall,
        disagreement_count=sum(1 for s in all_scores if s.variance > DISAGREEMENT_THRESHOLD),
        focus_area=focus_area,
        suggested_experiment=experiment,
        response_count=len(responses),
        flags=_generate_flags(all_scores),
    )


# ── Internals ─────────────────────────────────────────────────────────────────

def _score_statement(statement: Statement, values: List[int]) -> StatementScore:
    distribution = tuple(values.count(v) for v in range(SCORE_MIN, SCORE_MAX + 1))
    return StatementScore(
        statement=statement,
        score=float(np.mean(values)),
        response_count=len(values),
        distribution=distribution,
        variance=float(np.std(values)) if len(values) > 1 else 0.0,
    )


def _derive_focus(lowest: StatementScore) -> Tuple[str, str]:
    """Theme connu → texte dédié ; sinon fallback angle, puis générique."""
    guidance = THEME_GUIDANCE.get(lowest.statement.theme)
    if guidance:
        return guidance["focus_area"], guidance["experiment"]

    angle = getattr(lowest.statement.angle, "value", lowest.statement.angle)
    return lowest.statement.text, ANGLE_EXPERIMENTS.get(angle, GENERIC_EXPERIMENT)


def _generate_flags(all_scores: List[StatementScore]) -> List[str]:
    flags = []
    polarized = [s for s in all_scores if s.distribution[0] and s.distribution[-1]]
    if polarized:
        flags.append(f"POLARIZED: {len(polarized)} statement(s) rated both 1 and 5.")
    if all_scores and all(s.score >= 4.0 for s in all_scores):
        flags.append("ALL_STRONG: every statement averages 4.0 or higher.")
    return flags
