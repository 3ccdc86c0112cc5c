# app/shared/models/Ceremony.py
"""
Sessions de cérémonie et réponses anonymes.

Cycle de vie : draft → active → closed (sens unique, pas de réouverture).
À la clôture, la synthèse finale est figée dans `synthesis` avec le
focus area / expérience / owner / date de follow-up saisis par le lead.
"""
from sqlalchemy import (
    Column, Integer, String, Float, Date, DateTime, JSON, ForeignKey,
    UniqueConstraint, Enum as SAEnum,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base
from app.shared.enums import CeremonyAngle, CeremonyStatus


def _values(enum_cls):
    return [m.value for m in enum_cls]


class CeremonySession(Base):
    __tablename__ = "ceremony_sessions"

    id           = Column(Integer, primary_key=True, index=True)
    team_id      = Column(Integer, ForeignKey("teams.id"), nullable=False, index=True)
    session_code = Column(String, nullable=False, unique=True, index=True)   # lien public /d/{code}

    angle  = Column(SAEnum(CeremonyAngle, name="ceremonyangle", values_callable=_values), nullable=False)
    title  = Column(String, nullable=True)
    status = Column(
        SAEnum(CeremonyStatus, name="ceremonystatus", values_callable=_values),
        nullable=False,
        default=CeremonyStatus.DRAFT,
    )

    # ── Résultat (renseigné à la clôture) ────────────────────
    focus_area       = Column(String, nullable=True)
    experiment       = Column(String, nullable=True)
    experiment_owner = Column(String, nullable=True)
    followup_date    = Column(Date, nullable=True)
    overall_score    = Column(Float, nullable=True)
    synthesis        = Column(JSON, nullable=True)     # SynthesisOut figée

    created_by = Column(String, nullable=True)         # Clerk user id
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    started_at = Column(DateTime(timezone=True), nullable=True)
    closed_at  = Column(DateTime(timezone=True), nullable=True)

    # ── Relations ────────────────────────────────────────────
    team      = relationship("Team", back_populates="ceremony_sessions")
    responses = relationship("CeremonyResponse", back_populates="session", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<CeremonySession id={self.id} angle={self.angle} status={self.status}>"


class CeremonyResponse(Base):
    __tablename__ = "ceremony_responses"

    id         = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("ceremony_sessions.id"), nullable=False, index=True)
    answers    = Column(JSON, nullable=False, default=dict)   # {statement_id: 1-5}
    device_id  = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("session_id", "device_id", name="uq_ceremony_response_device"),
    )

    session = relationship("CeremonySession", back_populates="responses")

    def __repr__(self):
        return f"<CeremonyResponse id={self.id} session={self.session_id}>"
