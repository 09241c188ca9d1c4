import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from app.api.router import api_router
from app.core.config import get_settings
from app.core.db import init_database, test_database_connection

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

db_initialized = False
db_error: str | None = None


@asynccontextmanager
async def lifespan(_: FastAPI):
    global db_initialized, db_error
    logger.info("[LIFESPAN] Starting application initialization...")

    async def initialize_database():
        global db_initialized, db_error
        try:
            if not await test_database_connection():
                db_error = "Database connection failed"
                logger.error(f"[LIFESPAN] {db_error}")
                return

            await asyncio.wait_for(init_database(), timeout=30.0)
            db_initialized = True
            logger.info("[LIFESPAN] Database initialization complete")
        except asyncio.TimeoutError:
            db_error = "Database initialization timed out after 30s"
            logger.error(f"[LIFESPAN] {db_error}")
        except Exception as e:
            db_error = str(e)
            logger.exception(f"[LIFESPAN] Error initializing database: {e}")

    # Don't block startup - health checks answer while the database connects
    init_task = asyncio.create_task(initialize_database())

    logger.info("[LIFESPAN] Application startup complete - ready to accept requests")

    yield

    if not init_task.done():
        init_task.cancel()
    logger.info("[LIFESPAN] Shutdown complete")


app = FastAPI(
    title=settings.project_name,
    debug=settings.debug,
    lifespan=lifespan,
)

logger.info(f"[CORS] Configured origins: {settings.backend_cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.backend_cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept", "Origin", "X-Requested-With"],
)

app.include_router(api_router, prefix="/api")


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    return {"status": "ok", "environment": settings.environment}


@app.get("/ready", tags=["Health"])
async def readiness_check() -> dict:
    if not db_initialized:
        raise HTTPException(
            status_code=503,
            detail={"status": "not_ready", "database_ready": False, "error": db_error}
        )
    return {"status": "ready", "database_ready": True}
