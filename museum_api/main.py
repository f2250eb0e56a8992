"""FastAPI application"""
import logging
import uvicorn
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import API_HOST, API_PORT, LOG_LEVEL
from .database import init_db
from .routes.museums import router as museums_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup if they are missing"""
    try:
        init_db()
        logger.info("Database schema ready")
    except Exception as e:
        logger.warning(f"Schema init failed (non-fatal): {e}")
    yield


app = FastAPI(
    title="Museum Directory API",
    description="Museum and gallery directory with region browsing and nearby search",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS (open for development, restrict in production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(museums_router)


def run():
    """Serve the API with uvicorn on API_HOST:API_PORT"""
    uvicorn.run(app, host=API_HOST, port=API_PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
