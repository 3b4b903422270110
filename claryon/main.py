"""
Claryon Consulting Site API
Main application file
"""

from datetime import datetime, timezone
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from claryon.core.config import settings
from claryon.core.database import engine, Base, check_database_connection
from claryon.core.init_db import seed_initial_admin
from claryon.routers import admin, appointment, blog, calendar_event, contact, testimonial

# ============================================================================
# Logging Configuration
# ============================================================================

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format=settings.log_format
)
logger = logging.getLogger(__name__)

# ============================================================================
# FastAPI Application
# ============================================================================

docs_url = "/docs" if not settings.is_production else None
redoc_url = "/redoc" if not settings.is_production else None

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Marketing site backend: bookings, calendar sync, blog, testimonials and contact form",
    license_info={
        "name": "Proprietary",
    },
    docs_url=docs_url,
    redoc_url=redoc_url,
)

# ============================================================================
# CORS Configuration
# ============================================================================

if settings.API_CORS_ORIGINS and settings.API_CORS_ORIGINS.strip() == "*":
    # Allow all origins (credentials must be False)
    origins = ["*"]
    allow_credentials = False
else:
    origins = list(settings.cors_origins)

    if settings.API_CORS_ORIGINS:
        additional_origins = [o.strip() for o in settings.API_CORS_ORIGINS.split(",") if o.strip()]
        origins.extend(additional_origins)

    allow_credentials = True

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# Error Handlers
# ============================================================================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed input is a 400 with the messages grouped per field."""
    field_errors: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        field_errors.setdefault(field, []).append(error.get("msg", "Invalid value"))

    logger.warning(f"Input validation failed on {request.url.path}: {field_errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid input.", "details": field_errors},
    )

# ============================================================================
# Root & Health Endpoints
# ============================================================================

@app.get("/", tags=["Root"])
def root():
    """Root endpoint - API information"""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "documentation": docs_url,
        "endpoints": {
            "health": "/health",
            "appointments": "/api/appointments",
            "calendar_events": "/api/calendar-events",
            "blog": "/api/blog",
            "testimonials": "/api/testimonials",
            "contact": "/api/contact",
            "admin": "/api/admin",
        }
    }


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint for API monitoring"""
    database_ok = check_database_connection()
    return {
        "status": "ok" if database_ok else "degraded",
        "database": "ok" if database_ok else "unreachable",
        "calendar_configured": settings.calendar_configured,
        "version": settings.app_version,
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

# ============================================================================
# Event Handlers
# ============================================================================

@app.on_event("startup")
async def startup_event():
    """Actions to perform on application startup"""
    logger.info("=" * 60)
    logger.info(f"Starting {settings.app_name}")
    logger.info("=" * 60)
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Database backend: {engine.url.get_backend_name() if engine is not None else 'not configured'}")
    logger.info(f"CORS Origins: {settings.API_CORS_ORIGINS or 'Default'}")
    missing = settings.missing_calendar_settings()
    if missing:
        logger.warning(f"Calendar integration not configured, missing: {', '.join(missing)}")
    else:
        logger.info(f"Calendar integration configured for calendar {settings.GOOGLE_CALENDAR_ID}")
    logger.info("=" * 60)

    if engine is None:
        logger.error("DATABASE_URL is not set; every database-backed endpoint will return 500")
        return

    try:
        logger.info("Ensuring database tables exist...")
        Base.metadata.create_all(bind=engine)
        seed_initial_admin()
        logger.info("Database tables ready")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        logger.warning("Application will continue, but database operations may fail")


@app.on_event("shutdown")
async def shutdown_event():
    """Actions to perform on application shutdown"""
    logger.info(f"Shutting down {settings.app_name}")
    if engine is not None:
        engine.dispose()

# ============================================================================
# Router Registration
# ============================================================================

app.include_router(appointment.router)          # Booking form
app.include_router(calendar_event.router)       # Booking -> Google Calendar
app.include_router(blog.router)                 # Public blog
app.include_router(testimonial.router)          # Public testimonials
app.include_router(contact.router)              # Contact form
app.include_router(admin.router)                # Admin login
app.include_router(blog.admin_router)
app.include_router(testimonial.admin_router)
app.include_router(appointment.admin_router)
app.include_router(contact.admin_router)
logger.info("All routers registered successfully")
