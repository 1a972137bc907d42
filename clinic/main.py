"""
Main FastAPI application entry point.
Configures the application, middleware, and includes routers.
"""
from dotenv import load_dotenv

# Load environment variables from .env file first
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from .config import settings
from .database import Base, engine, SessionLocal
# Import all models here for creating tables
from .users import models as user_models  # noqa: F401
from .patients import models as patient_models  # noqa: F401
from .appointments import models as appointment_models  # noqa: F401
from .blockers import models as blocker_models  # noqa: F401
from .followups import models as followup_models  # noqa: F401
from .billing import models as billing_models  # noqa: F401
from .users.router import router as users_router
from .patients.router import router as patients_router
from .appointments.router import router as appointments_router
from .blockers.router import router as blockers_router
from .followups.router import router as followups_router
from .billing.router import router as billing_router
from .exceptions import register_exception_handlers
from .core.middleware import setup_middlewares
from .core.bootstrap import bootstrap_if_needed

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

# Create database tables if they don't exist
Base.metadata.create_all(bind=engine)

# Demo data bootstrap
logger.info("🚀 Starting Clinic Operations API...")
db = SessionLocal()
try:
    bootstrap_if_needed(db)
finally:
    db.close()

# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Scheduling, follow-up and billing API for a multi-branch clinic",
    version="1.0.0"
)

# Register exception handlers
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware
setup_middlewares(app)

# Include routers
app.include_router(users_router, prefix="/api/v1/users", tags=["Users"])
app.include_router(patients_router, prefix="/api/v1/patients", tags=["Patients"])
app.include_router(appointments_router, prefix="/api/v1/appointments", tags=["Appointments"])
app.include_router(blockers_router, prefix="/api/v1/blockers", tags=["Calendar Blockers"])
app.include_router(followups_router, prefix="/api/v1/followups", tags=["Follow-ups"])
app.include_router(billing_router, prefix="/api/v1/billing", tags=["Billing"])

# Root endpoint
@app.get("/")
def root():
    """
    Root endpoint for API health check.

    Returns:
        dict: Welcome message and API version
    """
    return {"message": f"Welcome to {settings.app_name}", "version": app.version}

# Health check endpoint
@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns:
        dict: Health status information
    """
    return {"status": "healthy", "database": "connected"}
