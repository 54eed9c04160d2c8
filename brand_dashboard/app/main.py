# app/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
# --- Import CORS Middleware ---
from starlette.middleware.cors import CORSMiddleware

from app.api.v1.endpoints import analytics, mentions, projects, sites
from app.core.config import settings, logger
from app.core.errors import DashboardError, ValidationError
from app.db.database import init_db

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Actions on startup
    logger.info("Application startup...")
    if settings.CREATE_TABLES_ON_STARTUP:
        await init_db()
        logger.info("Database initialized.")
    yield
    # Actions on shutdown
    logger.info("Application shutdown...")

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan # Use the lifespan context manager
)

# --- Add CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Data-Source"],
)

# --- Error rendering ---
@app.exception_handler(DashboardError)
async def dashboard_error_handler(request: Request, exc: DashboardError):
    content = {"success": False, "error": exc.message}
    if isinstance(exc, ValidationError) and exc.field:
        content["field"] = exc.field
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=content)

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc) or None
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": f"Invalid {field}: {message}" if field else message, "field": field},
    )

# Include the routers
app.include_router(mentions.router, prefix=settings.API_PREFIX, tags=["mentions"])
app.include_router(analytics.router, prefix=settings.API_PREFIX, tags=["analytics"])
app.include_router(sites.router, prefix=settings.API_PREFIX, tags=["sites"])
app.include_router(projects.router, prefix=settings.API_PREFIX, tags=["projects"])

@app.get("/")
async def read_root():
    return {"message": "Welcome to the Brand Dashboard API"}

@app.get("/health")
async def health_check():
    return {"status": "ok"}
