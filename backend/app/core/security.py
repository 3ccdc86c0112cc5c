# backend/app/core/security.py
"""
Vérification des JWT de session.

L'authentification (login, sessions, organisations) est gérée par Clerk.
L'API ne fait que vérifier la signature du token et en extraire le `sub`.
"""
from typing import Dict

from jose import jwt

from app.core.config import settings


def decode_token(token: str) -> Dict:
    """Lève jose.JWTError si le token est invalide, expiré ou d'un autre émetteur."""
    options = {"verify_aud": False}
    if settings.AUTH_ISSUER:
        return jwt.decode(
            token,
            settings.AUTH_JWT_KEY,
            algorithms=[settings.ALGORITHM],
            issuer=settings.AUTH_ISSUER,
            options=options,
        )
    return jwt.decode(
        token,
        settings.AUTH_JWT_KEY,
        algorithms=[settings.ALGORITHM],
        options=options,
    )
