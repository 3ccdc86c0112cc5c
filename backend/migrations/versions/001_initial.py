"""initial schema — team pulse — équipes, pulse, cérémonies

Revision ID: 001_initial
Create Date: 19/10/2026
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = '001_initial'
down_revision = None

# Valeurs des Enums
CEREMONY_LEVEL = ('shu', 'ha', 'ri')
CEREMONY_ANGLE = (
    'retro', 'planning', 'scrum',
    'flow', 'collaboration', 'refinement',
    'ownership', 'technical_excellence', 'demo',
)
CEREMONY_STATUS = ('draft', 'active', 'closed')

def upgrade() -> None:
    # ── 1. CREATION MANUELLE DES TYPES ENUM (SÉCURISÉE) ──
    enums = {
        "ceremonylevel": CEREMONY_LEVEL,
        "ceremonyangle": CEREMONY_ANGLE,
        "ceremonystatus": CEREMONY_STATUS,
    }

    for name, values in enums.items():
        vals_str = ", ".join([f"'{v}'" for v in values])
        op.execute(f"""
            DO $$
            BEGIN
                IF NOT EXISTS (SELECT 1 FROM pg_type WHERE typname = '{name}') THEN
                    CREATE TYPE {name} AS ENUM ({vals_str});
                END IF;
            END $$;
        """)

    # ── 2. CREATION DES TABLES ──
    # Note : On utilise postgresql.ENUM(..., create_type=False)
    # pour empêcher SQLAlchemy de tenter une double création.

    op.create_table("teams",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("slug", sa.String, nullable=False),
        sa.Column("owner_id", sa.String, nullable=False),
        sa.Column("team_size", sa.Integer, nullable=False, server_default="0"),
        sa.Column("timezone", sa.String, nullable=True),
        sa.Column("ceremony_level", postgresql.ENUM(*CEREMONY_LEVEL, name='ceremonylevel', create_type=False), nullable=False, server_default="shu"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_teams_slug", "teams", ["slug"], unique=True)
    op.create_index("ix_teams_owner_id", "teams", ["owner_id"])

    op.create_table("pulse_checkins",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("team_id", sa.Integer, sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("device_id", sa.String, nullable=False),
        sa.Column("score", sa.Integer, nullable=False),
        sa.Column("checkin_date", sa.Date, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("team_id", "device_id", "checkin_date", name="uq_checkin_device_day"),
        sa.CheckConstraint("score BETWEEN 1 AND 5", name="ck_checkin_score_range"),
    )
    op.create_index("ix_pulse_checkins_team_id", "pulse_checkins", ["team_id"])
    op.create_index("ix_pulse_checkins_checkin_date", "pulse_checkins", ["checkin_date"])

    op.create_table("ceremony_sessions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("team_id", sa.Integer, sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("session_code", sa.String, nullable=False),
        sa.Column("angle", postgresql.ENUM(*CEREMONY_ANGLE, name='ceremonyangle', create_type=False), nullable=False),
        sa.Column("title", sa.String, nullable=True),
        sa.Column("status", postgresql.ENUM(*CEREMONY_STATUS, name='ceremonystatus', create_type=False), nullable=False, server_default="draft"),
        sa.Column("focus_area", sa.String, nullable=True),
        sa.Column("experiment", sa.String, nullable=True),
        sa.Column("experiment_owner", sa.String, nullable=True),
        sa.Column("followup_date", sa.Date, nullable=True),
        sa.Column("overall_score", sa.Float, nullable=True),
        sa.Column("synthesis", sa.JSON, nullable=True),
        sa.Column("created_by", sa.String, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_ceremony_sessions_team_id", "ceremony_sessions", ["team_id"])
    op.create_index("ix_ceremony_sessions_session_code", "ceremony_sessions", ["session_code"], unique=True)

    op.create_table("ceremony_responses",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("session_id", sa.Integer, sa.ForeignKey("ceremony_sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("answers", sa.JSON, nullable=False),
        sa.Column("device_id", sa.String, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("session_id", "device_id", name="uq_ceremony_response_device"),
    )
    op.create_index("ix_ceremony_responses_session_id", "ceremony_responses", ["session_id"])

def downgrade() -> None:
    tables = ["ceremony_responses", "ceremony_sessions", "pulse_checkins", "teams"]
    for table in tables:
        op.drop_table(table)

    enums = ["ceremonystatus", "ceremonyangle", "ceremonylevel"]
    for e in enums:
        op.execute(f"DROP TYPE IF EXISTS {e}")
