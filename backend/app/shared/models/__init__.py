# app/shared/models/__init__.py
"""
Point d'entrée unique pour tous les modèles SQLAlchemy.

TOUJOURS importer les modèles depuis ce fichier :
  from app.shared.models import Team, CheckIn, CeremonySession, ...

→ Garantit que tous les modèles sont enregistrés dans Base.metadata
  avant la création des tables (Alembic, create_all).
"""

from app.shared.models.Team     import Team
from app.shared.models.Pulse    import CheckIn
from app.shared.models.Ceremony import CeremonySession, CeremonyResponse

__all__ = [
    # Team
    "Team",
    # Pulse
    "CheckIn",
    # Ceremonies
    "CeremonySession",
    "CeremonyResponse",
]
