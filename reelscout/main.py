import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from reelscout.api.deps import close_services
from reelscout.api.routes_api import router as api_router
from reelscout.core.errors import ReelScoutError
from reelscout.core.middleware import RequestLoggingMiddleware

load_dotenv()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    """Application lifespan context manager."""
    logger.info("ReelScout starting")
    try:
        yield
    finally:
        # Teardown provider sessions
        await close_services()
        logger.info("ReelScout stopped")


app = FastAPI(
    title="ReelScout",
    description="Movie and TV discovery with watchlists and recommendations",
    version="0.1.0",
    lifespan=app_lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(ReelScoutError)
async def reelscout_error_handler(request: Request, exc: ReelScoutError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(api_router, prefix="/api/v1")
