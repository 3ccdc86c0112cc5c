# modules/ceremonies/service.py
"""
Cérémonies — sessions d'évaluation structurées (statements notés 1-5).

Cycle de vie (sens unique) :
    draft  → active  : start_session()  — le lien public accepte les réponses
    active → closed  : close_session()  — synthèse finale figée + résultat du lead

Pipeline de synthèse :
    1. Catalogue de l'angle (content/statements.py)
    2. Réponses anonymes (repository)
    3. engine.ceremonies.synthesis.synthesize()
    4. Masquée tant que response_count < MIN_RESPONSES_FOR_SYNTHESIS

La clôture réévalue le niveau Shu-Ha-Ri de l'équipe (jamais de régression).
"""
import logging
import secrets
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.content.statements import ANGLES, get_statements
from app.core.config import settings
from app.engine.ceremonies.levels import (
    LevelEvaluation,
    SessionRecord,
    compute_level_progress,
    evaluate_level,
    get_unlock_requirements,
    is_angle_unlocked,
)
from app.engine.ceremonies.synthesis import SynthesisResult, synthesize
from app.modules.ceremonies.repository import CeremonyRepository
from app.modules.pulse.service import team_today
from app.modules.teams.repository import TeamRepository
from app.shared.deps import CurrentUser
from app.shared.enums import CeremonyStatus
from app.shared.models import CeremonySession, Team

logger = logging.getLogger(__name__)

ceremony_repo = CeremonyRepository()
team_repo = TeamRepository()

SESSION_CODE_BYTES = 4
SCORE_MIN = 1
SCORE_MAX = 5


class CeremonyService:

    # ── Sessions (lead) ───────────────────────────────────────

    async def create_session(
        self, db: AsyncSession, team_id: int, user: CurrentUser, payload
    ) -> Dict:
        team = await self._get_owned_team(db, team_id, user)
        if not is_angle_unlocked(payload.angle, team.ceremony_level):
            raise ValueError("ANGLE_LOCKED")

        session = await ceremony_repo.create_session(db, {
            "team_id":      team.id,
            "session_code": await self._unique_code(db),
            "angle":        payload.angle,
            "title":        payload.title,
            "status":       CeremonyStatus.DRAFT,
            "created_by":   user.id,
        })
        logger.info("ceremony session created id=%s team=%s angle=%s", session.id, team.id, session.angle)
        return self._session_out(session, response_count=0)

    async def list_sessions(self, db: AsyncSession, team_id: int, user: CurrentUser) -> List[Dict]:
        team = await self._get_owned_team(db, team_id, user)
        sessions = await ceremony_repo.list_for_team(db, team.id)
        counts = await ceremony_repo.count_responses_by_session(db, team.id)
        return [self._session_out(s, counts.get(s.id, 0)) for s in sessions]

    async def start_session(self, db: AsyncSession, session_id: int, user: CurrentUser) -> Dict:
        session = await self._get_owned_session(db, session_id, user)
        if session.status != CeremonyStatus.DRAFT:
            raise ValueError("INVALID_TRANSITION")

        session.status = CeremonyStatus.ACTIVE
        session.started_at = datetime.now(timezone.utc)
        session = await ceremony_repo.save(db, session)
        logger.info("ceremony session started id=%s", session.id)
        return self._session_out(session, response_count=0)

    async def get_session_detail(self, db: AsyncSession, session_id: int, user: CurrentUser) -> Dict:
        session = await self._get_owned_session(db, session_id, user)
        count = await ceremony_repo.count_responses(db, session.id)

        if session.status == CeremonyStatus.CLOSED and session.synthesis is not None:
            synthesis = session.synthesis
        else:
            synthesis = await self._live_synthesis(db, session)

        return {"session": self._session_out(session, count), "synthesis": synthesis}

    async def close_session(
        self, db: AsyncSession, session_id: int, user: CurrentUser, payload
    ) -> Dict:
        """
        Fige la synthèse finale et le résultat saisi par le lead.
        Sens unique : une session clôturée ne peut pas être rouverte.
        """
        session = await self._get_owned_session(db, session_id, user)
        if session.status != CeremonyStatus.ACTIVE:
            raise ValueError("INVALID_TRANSITION")

        synthesis = await self._live_synthesis(db, session)
        count = await ceremony_repo.count_responses(db, session.id)

        session.status = CeremonyStatus.CLOSED
        session.closed_at = datetime.now(timezone.utc)
        session.focus_area = payload.focus_area
        session.experiment = payload.experiment
        session.experiment_owner = payload.experiment_owner
        session.followup_date = payload.followup_date
        session.synthesis = synthesis
        session.overall_score = synthesis["overall_score"] if synthesis else None
        session = await ceremony_repo.save(db, session)
        logger.info("ceremony session closed id=%s responses=%s", session.id, count)

        team = await team_repo.get_team(db, session.team_id)
        evaluation = await self._evaluate_team_level(db, team)
        if evaluation.level_changed:
            await team_repo.update_level(db, team, evaluation.level)
            logger.info(
                "team level unlocked team=%s %s → %s",
                team.id, evaluation.previous_level.value, evaluation.level.value,
            )

        return {"session": self._session_out(session, count), "synthesis": synthesis}

    # ── Niveau Shu-Ha-Ri (lead) ───────────────────────────────

    async def get_level_evaluation(self, db: AsyncSession, team_id: int, user: CurrentUser) -> Dict:
        team = await self._get_owned_team(db, team_id, user)
        evaluation = await self._evaluate_team_level(db, team)
        return {
            **asdict(evaluation),
            "requirements": [
                asdict(r) for r in get_unlock_requirements(evaluation.level, evaluation.progress)
            ],
            "angles": [
                {
                    **asdict(a),
                    "unlocked": is_angle_unlocked(a.id, evaluation.level),
                }
                for a in ANGLES
            ],
        }

    # ── Réponses (public, anonyme) ────────────────────────────

    async def get_public_session(self, db: AsyncSession, session_code: str) -> Optional[Dict]:
        session = await ceremony_repo.get_by_code(db, session_code)
        if not session:
            return None
        return {
            "session_code": session.session_code,
            "angle":        session.angle,
            "title":        session.title,
            "status":       session.status,
            "statements":   [asdict(s) for s in get_statements(session.angle)],
        }

    async def submit_response(self, db: AsyncSession, session_code: str, payload) -> Dict:
        session = await ceremony_repo.get_by_code(db, session_code)
        if not session:
            raise ValueError("SESSION_NOT_FOUND")
        if session.status != CeremonyStatus.ACTIVE:
            raise ValueError("SESSION_NOT_ACTIVE")

        catalog_ids = {s.id for s in get_statements(session.angle)}
        for statement_id, score in payload.answers.items():
            if statement_id not in catalog_ids:
                raise ValueError("UNKNOWN_STATEMENT")
            if not SCORE_MIN <= score <= SCORE_MAX:
                raise ValueError("INVALID_SCORE")

        if await ceremony_repo.has_responded(db, session.id, payload.device_id):
            raise ValueError("ALREADY_RESPONDED")

        response = await ceremony_repo.create_response(db, {
            "session_id": session.id,
            "answers":    dict(payload.answers),
            "device_id":  payload.device_id,
        })
        if response is None:
            raise ValueError("ALREADY_RESPONDED")
        return {"status": "submitted", "response_id": response.id}

    # ── Internals ─────────────────────────────────────────────

    async def _get_owned_team(self, db: AsyncSession, team_id: int, user: CurrentUser) -> Team:
        team = await team_repo.get_team(db, team_id)
        if not team:
            raise ValueError("TEAM_NOT_FOUND")
        if team.owner_id != user.id:
            raise PermissionError("Accès refusé.")
        return team

    async def _get_owned_session(
        self, db: AsyncSession, session_id: int, user: CurrentUser
    ) -> CeremonySession:
        session = await ceremony_repo.get_session(db, session_id)
        if not session:
            raise ValueError("SESSION_NOT_FOUND")
        if not await team_repo.is_owner(db, session.team_id, user.id):
            raise PermissionError("Accès refusé.")
        return session

    async def _live_synthesis(self, db: AsyncSession, session: CeremonySession) -> Optional[Dict]:
        """None sous le seuil de répondants : l'écran de synthèse est masqué."""
        answers = await ceremony_repo.get_answers(db, session.id)
        if len(answers) < settings.MIN_RESPONSES_FOR_SYNTHESIS:
            return None
        return synthesis_to_dict(synthesize(get_statements(session.angle), answers))

    async def _evaluate_team_level(self, db: AsyncSession, team: Team) -> LevelEvaluation:
        closed = await ceremony_repo.get_closed_sessions(db, team.id)
        counts = await ceremony_repo.count_responses_by_session(db, team.id)
        records = [
            SessionRecord(
                closed_on=team_today(team, s.closed_at),
                angle=s.angle,
                overall_score=s.overall_score,
                response_count=counts.get(s.id, 0),
                has_followup=bool(s.followup_date and s.experiment_owner),
            )
            for s in closed
            if s.closed_at is not None
        ]
        progress = compute_level_progress(records, team.team_size, team_today(team))
        return evaluate_level(team.ceremony_level, progress)

    async def _unique_code(self, db: AsyncSession) -> str:
        while True:
            code = secrets.token_hex(SESSION_CODE_BYTES).upper()
            if not await ceremony_repo.code_exists(db, code):
                return code

    def _session_out(self, session: CeremonySession, response_count: int) -> Dict:
        return {
            "id":               session.id,
            "team_id":          session.team_id,
            "session_code":     session.session_code,
            "angle":            session.angle,
            "title":            session.title,
            "status":           session.status,
            "focus_area":       session.focus_area,
            "experiment":       session.experiment,
            "experiment_owner": session.experiment_owner,
            "followup_date":    session.followup_date,
            "overall_score":    session.overall_score,
            "created_at":       session.created_at,
            "started_at":       session.started_at,
            "closed_at":        session.closed_at,
            "response_count":   response_count,
        }


def synthesis_to_dict(result: SynthesisResult) -> Dict:
    """SynthesisResult → dict JSON-sérialisable (stocké tel quel à la clôture)."""
    def score_out(s):
        return {
            "statement": {
                "id":    s.statement.id,
                "text":  s.statement.text,
                "angle": getattr(s.statement.angle, "value", s.statement.angle),
                "theme": s.statement.theme,
            },
            "score":          round(s.score, 2),
            "response_count": s.response_count,
            "distribution":   list(s.distribution),
            "variance":       round(s.variance, 2),
        }

    return {
        "strengths":            [score_out(s) for s in result.strengths],
        "tensions":             [score_out(s) for s in result.tensions],
        "all_scores":           [score_out(s) for s in result.all_scores],
        "overall_score":        round(result.overall_score, 2) if result.overall_score is not None else None,
        "disagreement_count":   result.disagreement_count,
        "focus_area":           result.focus_area,
        "suggested_experiment": result.suggested_experiment,
        "response_count":       result.response_count,
        "flags":                result.flags,
    }
