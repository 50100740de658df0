import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from casting_platform.config import APP_ADDR, APP_PORT, COMMIT_HASH, ENV, LOG_LEVEL
from casting_platform.database import close_db, get_db, init_db
from casting_platform.models.enums import ContentKind
from casting_platform.routers.admin import router as admin_router
from casting_platform.routers.applications import router as applications_router
from casting_platform.routers.castings import router as castings_router
from casting_platform.routers.content import create_content_router
from casting_platform.routers.conversations import router as conversations_router
from casting_platform.services.exceptions import ServiceError

# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown."""
    # Startup
    logger.info("Starting casting platform (env=%s, version=%s)", ENV, COMMIT_HASH)
    await init_db()
    yield
    # Shutdown
    await close_db()


app = FastAPI(
    title="Casting Platform",
    description=(
        "Castings and applications, messaging between directors, talents and "
        "writers, and moderated blogs and news"
    ),
    version=COMMIT_HASH or "dev",
    lifespan=lifespan,
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Framework errors (unknown route, wrong method) use the same error shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


# Include routers
app.include_router(conversations_router, prefix="/api/messages", tags=["messages"])
app.include_router(
    create_content_router(ContentKind.BLOG), prefix="/api/blogs", tags=["blogs"]
)
app.include_router(
    create_content_router(ContentKind.NEWS), prefix="/api/news", tags=["news"]
)
app.include_router(castings_router, prefix="/api/castings", tags=["castings"])
app.include_router(
    applications_router, prefix="/api/applications", tags=["applications"]
)
app.include_router(admin_router, prefix="/api/admin", tags=["admin"])


@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)) -> Dict[str, str]:
    """Health check endpoint with database connectivity."""
    try:
        # Test database connection
        result = await db.execute(text("SELECT 1"))
        db_status = "connected" if result.scalar() == 1 else "error"
    except Exception:
        logger.exception("Health check could not reach the database")
        db_status = "disconnected"

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "database": db_status,
        "environment": ENV or "local",
        "version": COMMIT_HASH or "dev",
    }


# If run directly, start the server
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=APP_ADDR, port=APP_PORT)
