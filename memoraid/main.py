"""FastAPI application entry point and configuration."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from memoraid.api.items_router import router as items_router
from memoraid.api.plan_router import router as plan_router
from memoraid.api.stats_router import router as stats_router
from memoraid.config import settings

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.app_name,
    description="Spaced repetition scheduling and exam study planning",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(items_router)
app.include_router(stats_router)
app.include_router(plan_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Return service status."""
    return {"status": "ok"}
