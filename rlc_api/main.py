"""RLC Lab API — FastAPI application entry point."""

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from rlc_api.routes import analysis, physics
from rlc_api.middleware.rate_limit import RateLimitMiddleware
from rlc_engine import __version__ as engine_version

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="RLC Lab API",
    description="Closed-form transient and s-domain analysis of series RC, RL and RLC circuits",
    version=engine_version,
)

# CORS: localhost always, plus FRONTEND_URL when set
_frontend_url = os.getenv("FRONTEND_URL")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[_frontend_url] if _frontend_url else [],
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(
    RateLimitMiddleware,
    requests_per_minute=int(os.getenv("RATE_LIMIT_PER_MINUTE", "60")),
)

# Register route modules
app.include_router(analysis.router, prefix="/api", tags=["Analysis"])
app.include_router(physics.router, prefix="/api", tags=["Component Physics"])

logger.info("RLC Lab API %s ready", engine_version)


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "service": "rlc-lab-api"}
