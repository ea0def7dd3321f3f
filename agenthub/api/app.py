"""FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from agenthub.api.limiter import limiter
from agenthub.config import settings
from agenthub.db.base import init_db
from agenthub.errors import AppError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup."""
    try:
        init_db()
    except ValueError:
        logger.warning("DATABASE_URL not configured, skipping table creation")
    yield


app = FastAPI(
    title="AgentHub API",
    description="Agent portal and applicant tracking backend",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.limiter = limiter


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Render domain errors as {"detail", "error", ...}."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Return 429 with a clear message when rate limit is exceeded."""
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}", "error": "rate_limited"},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization", "X-User-ID"],
)


# Import and include routers
from agenthub.api.routes import applications, inbox, opportunities, profile, questions  # noqa: E402

app.include_router(opportunities.router, prefix="/opportunities", tags=["Opportunities"])
app.include_router(questions.router, tags=["Questions"])
app.include_router(applications.router, prefix="/applications", tags=["Applications"])
app.include_router(inbox.router, tags=["Inbox"])
app.include_router(profile.router, tags=["Profile"])


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
