"""
shopflow - Main FastAPI Application

HTTP host for the login and cart flow. Each session created through
/api/session stands in for one device running the app.
"""
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Environment must be loaded before settings are first read
load_dotenv()

from shopflow import __version__  # noqa: E402
from shopflow.flow import get_session_registry  # noqa: E402
from shopflow.logging import get_logger  # noqa: E402
from shopflow.routers import router as api_router  # noqa: E402

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    logger.info("shopflow starting")
    yield
    # Pending post-checkout timers belong to this loop
    get_session_registry().clear()
    logger.info("shopflow stopped")


app = FastAPI(
    title="shopflow",
    description="Login gate and shopping cart flow",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "shopflow", "sessions": len(get_session_registry())}
