# modules/ceremonies/repository.py
"""
Accès DB pour les sessions de cérémonie et leurs réponses anonymes.
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Dict

from app.shared.enums import CeremonyStatus
from app.shared.models import CeremonySession, CeremonyResponse


class CeremonyRepository:

    # ── Sessions ──────────────────────────────────────────────

    async def create_session(self, db: AsyncSession, data: Dict) -> CeremonySession:
        db_obj = CeremonySession(**data)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def get_session(self, db: AsyncSession, session_id: int) -> Optional[CeremonySession]:
        r = await db.execute(select(CeremonySession).where(CeremonySession.id == session_id))
        return r.scalar_one_or_none()

    async def get_by_code(self, db: AsyncSession, session_code: str) -> Optional[CeremonySession]:
        r = await db.execute(
            select(CeremonySession).where(CeremonySession.session_code == session_code)
        )
        return r.scalar_one_or_none()

    async def code_exists(self, db: AsyncSession, session_code: str) -> bool:
        return await self.get_by_code(db, session_code) is not None

    async def list_for_team(self, db: AsyncSession, team_id: int) -> List[CeremonySession]:
        r = await db.execute(
            select(CeremonySession)
            .where(CeremonySession.team_id == team_id)
            .order_by(CeremonySession.created_at.desc())
        )
        return r.scalars().all()

    async def get_closed_sessions(
        self, db: AsyncSession, team_id: int, limit: Optional[int] = None
    ) -> List[CeremonySession]:
        """Sessions clôturées, la plus récente en premier."""
        q = (
            select(CeremonySession)
            .where(
                CeremonySession.team_id == team_id,
                CeremonySession.status == CeremonyStatus.CLOSED,
            )
            .order_by(CeremonySession.closed_at.desc())
        )
        if limit is not None:
            q = q.limit(limit)
        r = await db.execute(q)
        return r.scalars().all()

    async def save(self, db: AsyncSession, session: CeremonySession) -> CeremonySession:
        await db.commit()
        await db.refresh(session)
        return session

    # ── Réponses ──────────────────────────────────────────────

    async def has_responded(self, db: AsyncSession, session_id: int, device_id: str) -> bool:
        r = await db.execute(
            select(CeremonyResponse.id).where(
                CeremonyResponse.session_id == session_id,
                CeremonyResponse.device_id == device_id,
            )
        )
        return r.scalar_one_or_none() is not None

    async def create_response(self, db: AsyncSession, data: Dict) -> Optional[CeremonyResponse]:
        """None si l'appareil a déjà répondu (contrainte uq_ceremony_response_device)."""
        db_obj = CeremonyResponse(**data)
        try:
            db.add(db_obj)
            await db.commit()
            await db.refresh(db_obj)
            return db_obj
        except IntegrityError:
            await db.rollback()
            return None

    async def get_answers(self, db: AsyncSession, session_id: int) -> List[Dict]:
        r = await db.execute(
            select(CeremonyResponse.answers).where(CeremonyResponse.session_id == session_id)
        )
        return [answers or {} for answers in r.scalars().all()]

    async def count_responses(self, db: AsyncSession, session_id: int) -> int:
        r = await db.execute(
            select(func.count(CeremonyResponse.id)).where(CeremonyResponse.session_id == session_id)
        )
        return r.scalar_one()

    async def count_responses_by_session(self, db: AsyncSession, team_id: int) -> Dict[int, int]:
        r = await db.execute(
            select(CeremonyResponse.session_id, func.count(CeremonyResponse.id))
            .join(CeremonySession, CeremonySession.id == CeremonyResponse.session_id)
            .where(CeremonySession.team_id == team_id)
            .group_by(CeremonyResponse.session_id)
        )
        return {session_id: count for session_id, count in r.all()}
