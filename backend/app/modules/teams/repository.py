# modules/teams/repository.py
"""
Accès DB pour les équipes.
Utilisé par les modules teams, pulse et ceremonies (contrôle d'ownership).
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional, Dict

from app.shared.enums import CeremonyLevel
from app.shared.models import Team


class TeamRepository:

    async def create_team(self, db: AsyncSession, data: Dict) -> Team:
        db_obj = Team(**data)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def get_team(self, db: AsyncSession, team_id: int) -> Optional[Team]:
        r = await db.execute(select(Team).where(Team.id == team_id))
        return r.scalar_one_or_none()

    async def get_by_slug(self, db: AsyncSession, slug: str) -> Optional[Team]:
        r = await db.execute(select(Team).where(Team.slug == slug))
        return r.scalar_one_or_none()

    async def slug_exists(self, db: AsyncSession, slug: str) -> bool:
        return await self.get_by_slug(db, slug) is not None

    async def is_owner(self, db: AsyncSession, team_id: int, owner_id: str) -> bool:
        r = await db.execute(
            select(Team.id).where(Team.id == team_id, Team.owner_id == owner_id)
        )
        return r.scalar_one_or_none() is not None

    async def list_for_owner(self, db: AsyncSession, owner_id: str) -> List[Team]:
        r = await db.execute(
            select(Team).where(Team.owner_id == owner_id).order_by(Team.name)
        )
        return r.scalars().all()

    async def update_team_size(self, db: AsyncSession, team: Team, team_size: int) -> Team:
        team.team_size = team_size
        await db.commit()
        await db.refresh(team)
        return team

    async def update_level(self, db: AsyncSession, team: Team, level: CeremonyLevel) -> None:
        team.ceremony_level = level
        await db.commit()
