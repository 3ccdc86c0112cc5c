# app/modules/teams/schemas.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from app.shared.enums import CeremonyLevel


class TeamCreateIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    team_size: int = Field(..., ge=1, le=500)
    timezone: Optional[str] = None

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, v: Optional[str]) -> Optional[str]:
        """Fuseau IANA (ex. "Europe/Amsterdam") — sert au calcul du jour local."""
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Fuseau horaire inconnu : {v}")
        return v


class TeamSizeIn(BaseModel):
    team_size: int = Field(..., ge=1, le=500)


class TeamOut(BaseModel):
    id: int
    name: str
    slug: str
    team_size: int
    timezone: Optional[str] = None
    ceremony_level: CeremonyLevel
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)
