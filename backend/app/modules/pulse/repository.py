# modules/pulse/repository.py
"""
Accès DB pour les check-ins Pulse.

Le regroupement par jour se fait en SQL (GROUP BY checkin_date) :
l'engine ne reçoit que des DailyAggregate, jamais les check-ins bruts.
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from typing import List, Optional
from datetime import date

from app.engine.pulse.metrics import DailyAggregate
from app.shared.models import CheckIn


class PulseRepository:

    async def has_checkin(
        self, db: AsyncSession, team_id: int, device_id: str, day: date
    ) -> bool:
        r = await db.execute(
            select(CheckIn.id).where(
                CheckIn.team_id == team_id,
                CheckIn.device_id == device_id,
                CheckIn.checkin_date == day,
            )
        )
        return r.scalar_one_or_none() is not None

    async def create_checkin(
        self,
        db: AsyncSession,
        team_id: int,
        device_id: str,
        score: int,
        day: date,
    ) -> Optional[CheckIn]:
        """None si le check-in du jour existe déjà (contrainte uq_checkin_device_day)."""
        db_obj = CheckIn(
            team_id=team_id,
            device_id=device_id,
            score=score,
            checkin_date=day,
        )
        try:
            db.add(db_obj)
            await db.commit()
            await db.refresh(db_obj)
            return db_obj
        except IntegrityError:
            await db.rollback()
            return None

    async def get_daily_aggregates(
        self, db: AsyncSession, team_id: int, since: date, team_size: int
    ) -> List[DailyAggregate]:
        """Un DailyAggregate par jour avec au moins un check-in, ordre chronologique."""
        r = await db.execute(
            select(
                CheckIn.checkin_date,
                func.avg(CheckIn.score),
                func.count(CheckIn.id),
            )
            .where(CheckIn.team_id == team_id, CheckIn.checkin_date >= since)
            .group_by(CheckIn.checkin_date)
            .order_by(CheckIn.checkin_date)
        )
        return [
            DailyAggregate(
                date=day,
                average=float(avg),
                count=int(count),
                participant_count=team_size,
            )
            for day, avg, count in r.all()
        ]
