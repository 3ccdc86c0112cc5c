# modules/teams/service.py
"""
Gestion minimale des équipes d'un lead : création (slug public de
check-in) et taille d'équipe (dénominateur de la participation).
"""
import logging
import re
import secrets
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.modules.teams.repository import TeamRepository
from app.shared.deps import CurrentUser
from app.shared.enums import CeremonyLevel
from app.shared.models import Team

logger = logging.getLogger(__name__)

team_repo = TeamRepository()

SLUG_SUFFIX_BYTES = 3


class TeamService:

    async def create_team(self, db: AsyncSession, owner: CurrentUser, payload) -> Team:
        slug = await self._unique_slug(db, payload.name)
        team = await team_repo.create_team(db, {
            "name":           payload.name,
            "slug":           slug,
            "owner_id":       owner.id,
            "team_size":      payload.team_size,
            "timezone":       payload.timezone,
            "ceremony_level": CeremonyLevel.SHU,
        })
        logger.info("team created id=%s slug=%s", team.id, slug)
        return team

    async def list_teams(self, db: AsyncSession, owner: CurrentUser) -> List[Team]:
        return await team_repo.list_for_owner(db, owner.id)

    async def update_team_size(
        self, db: AsyncSession, team_id: int, owner: CurrentUser, team_size: int
    ) -> Team:
        team = await team_repo.get_team(db, team_id)
        if not team:
            raise ValueError("TEAM_NOT_FOUND")
        if team.owner_id != owner.id:
            raise PermissionError("Accès refusé.")
        return await team_repo.update_team_size(db, team, team_size)

    # ── Internals ─────────────────────────────────────────────

    async def _unique_slug(self, db: AsyncSession, name: str) -> str:
        base = slugify(name) or "team"
        while True:
            slug = f"{base}-{secrets.token_hex(SLUG_SUFFIX_BYTES)}"
            if not await team_repo.slug_exists(db, slug):
                return slug


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
