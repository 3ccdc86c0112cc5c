# main.py
"""
Point d'entrée de l'API Team Pulse.
Enregistre tous les modules via leurs routers.

Architecture : modules verticaux quasi-autonomes + engine transversal.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings

from app.modules.teams.router      import router as teams_router
from app.modules.pulse.router      import router as pulse_router
from app.modules.ceremonies.router import router as ceremonies_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(teams_router)
app.include_router(pulse_router)
app.include_router(ceremonies_router)


@app.get("/health")
async def health():
    return {"status": "ok", "version": "1.0.0"}
