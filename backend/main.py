"""
ShotLog Backend API

FastAPI application for recording a golf round shot by shot
and submitting the validated record.

Run with:
    uvicorn main:app --reload --host 0.0.0.0 --port 8000

API docs available at:
    http://localhost:8000/docs (Swagger UI)
    http://localhost:8000/redoc (ReDoc)

Environment:
    SHOTLOG_SUBMIT_URL      Where finished rounds are posted (unset = demo mode)
    SHOTLOG_SUBMIT_TIMEOUT  Submission timeout in seconds (default 10)
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router as api_router
from core.domain.round import APP_VERSION
from core.services import RoundSession, SubmissionClient

# =============================================================================
# Logging Configuration
# =============================================================================

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan (startup/shutdown)
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup code before app starts accepting requests,
    and cleanup code when app shuts down.
    """
    # Startup
    logger.info(" ShotLog API starting up...")
    logger.info(" API docs: http://localhost:8000/docs")
    if app.state.submission_client.demo_mode:
        logger.info(" SHOTLOG_SUBMIT_URL not set - submissions run in demo mode")
    else:
        logger.info(f" Submitting rounds to {app.state.submission_client.url}")

    yield  # App runs here

    # Shutdown
    if app.state.session.is_started and not app.state.session.round.is_submitted:
        logger.warning(" Shutting down with an unsubmitted round - it will be lost")
    logger.info(" ShotLog API shutting down...")


# =============================================================================
# FastAPI App
# =============================================================================

app = FastAPI(
    title="ShotLog API",
    description="""
    **Shot-by-shot golf round entry**

    Records a round one stroke at a time and produces a validated,
    submittable record.

    ## Flow

    1. `POST /api/rounds` - start a round (player, course, 9 or 18 holes)
    2. `GET /api/entry` - defaults for the shot under the cursor
    3. `POST /api/shots` - commit a shot (end distance 0 = holed)
    4. `POST /api/entry/back`, `POST /api/entry/skip` - navigate
    5. `POST /api/review` - open review: scorecard, holes missing a holed shot
    6. `POST /api/submission` - submit the complete round
    """,
    version=APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# One entry session per running app
app.state.session = RoundSession()
app.state.submission_client = SubmissionClient.from_env()


# =============================================================================
# CORS Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",      # React dev server
        "http://localhost:5173",      # Vite dev server
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
        "*",                          # Allow all for development
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Routes
# =============================================================================

app.include_router(api_router, prefix="/api")


# =============================================================================
# Root endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - API information.
    """
    return {
        "name": "ShotLog API",
        "version": APP_VERSION,
        "description": "Shot-by-shot golf round entry",
        "docs": "/docs",
        "health": "/api/health",
    }


# =============================================================================
# Run directly (for development)
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
