# app/shared/models/Pulse.py
"""
Check-in Pulse — signal quotidien anonyme de l'humeur d'équipe (score 1-5).

Anonyme : seul un device_id opaque est conservé, pour limiter à un
check-in par appareil et par jour. Jamais exposé au lead.
checkin_date est la date locale de l'équipe au moment du check-in :
c'est la clé de regroupement des DailyAggregate.
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class CheckIn(Base):
    __tablename__ = "pulse_checkins"

    id           = Column(Integer, primary_key=True, index=True)
    team_id      = Column(Integer, ForeignKey("teams.id"), nullable=False, index=True)
    device_id    = Column(String, nullable=False)

    score        = Column(Integer, nullable=False)        # 1 à 5
    checkin_date = Column(Date, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("team_id", "device_id", "checkin_date", name="uq_checkin_device_day"),
    )

    # ── Relations ────────────────────────────────────────────
    team = relationship("Team", back_populates="checkins")

    def __repr__(self):
        return f"<CheckIn id={self.id} team={self.team_id} date={self.checkin_date} score={self.score}>"
