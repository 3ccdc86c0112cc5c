# app/shared/models/Team.py
"""
Équipe suivie par un lead.

Le lead est identifié par son user id Clerk (owner_id) : la résolution
utilisateur / organisation est externe, on ne stocke que l'identifiant.
Le slug sert au lien public de check-in anonyme (/t/{slug}).
"""
from sqlalchemy import Column, Integer, String, DateTime, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base
from app.shared.enums import CeremonyLevel


def _values(enum_cls):
    return [m.value for m in enum_cls]


class Team(Base):
    __tablename__ = "teams"

    id        = Column(Integer, primary_key=True, index=True)
    name      = Column(String, nullable=False)
    slug      = Column(String, nullable=False, unique=True, index=True)
    owner_id  = Column(String, nullable=False, index=True)     # Clerk user id du lead

    team_size = Column(Integer, nullable=False, default=0)     # participants attendus
    timezone  = Column(String, nullable=True)                  # None → settings.TEAM_TIMEZONE

    ceremony_level = Column(
        SAEnum(CeremonyLevel, name="ceremonylevel", values_callable=_values),
        nullable=False,
        default=CeremonyLevel.SHU,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # ── Relations ────────────────────────────────────────────
    checkins = relationship("CheckIn", back_populates="team", cascade="all, delete-orphan")
    ceremony_sessions = relationship("CeremonySession", back_populates="team", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Team id={self.id} slug={self.slug} level={self.ceremony_level}>"
