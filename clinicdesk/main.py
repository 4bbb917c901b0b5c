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

from .database import Base, engine, SessionLocal
from .config import settings
from .exceptions import register_exception_handlers
from .core.middleware import setup_middlewares
from .staff.bootstrap import bootstrap_admin_if_needed

# Import all models here for creating tables
from .core import audit_models  # noqa: F401
from .staff import models as staff_models  # noqa: F401
from .patients import models as patient_models  # noqa: F401
from .prescriptions import models as prescription_models  # noqa: F401
from .operations import models as operation_models  # noqa: F401
from .medicines import models as medicine_models  # noqa: F401
from .opticals import models as optical_models  # noqa: F401
from .labs import models as lab_models  # noqa: F401
from .dropdowns import models as dropdown_models  # noqa: F401
from .expenses import models as expense_models  # noqa: F401

from .staff.router import router as staff_router
from .patients.router import router as patients_router
from .prescriptions.router import router as prescriptions_router
from .operations.router import router as operations_router, inpatient_router
from .medicines.router import router as medicines_router
from .opticals.router import router as opticals_router
from .labs.router import router as labs_router
from .dropdowns.router import router as dropdowns_router
from .expenses.router import router as expenses_router
from .analytics.router import router as analytics_router
from .legacy.router import router as legacy_router

API_VERSION = "1.0.0"

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create database tables if they don't exist
Base.metadata.create_all(bind=engine)

# Bootstrap admin creation
logger.info(f"Starting {settings.clinic_name} API...")
db = SessionLocal()
try:
    bootstrap_admin_if_needed(db)
except Exception as e:
    logger.error(f"Bootstrap process failed: {str(e)}")
finally:
    db.close()

# Create FastAPI application
app = FastAPI(
    title=f"{settings.clinic_name} API",
    description="API for clinic records, billing, inventory and analytics",
    version=API_VERSION
)

# Register exception handlers
register_exception_handlers(app)

# Configure CORS middleware
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
app.include_router(staff_router, prefix="/api/v1/staff", tags=["Staff"])
app.include_router(patients_router, prefix="/api/v1/patients", tags=["Patients"])
app.include_router(prescriptions_router, prefix="/api/v1/prescriptions", tags=["Prescriptions"])
app.include_router(operations_router, prefix="/api/v1/operations", tags=["Operations"])
app.include_router(inpatient_router, prefix="/api/v1/inpatients", tags=["In-Patients"])
app.include_router(medicines_router, prefix="/api/v1/medicines", tags=["Medicines"])
app.include_router(opticals_router, prefix="/api/v1/opticals", tags=["Opticals"])
app.include_router(labs_router, prefix="/api/v1/labs", tags=["Labs"])
app.include_router(dropdowns_router, prefix="/api/v1/dropdowns", tags=["Dropdowns"])
app.include_router(expenses_router, prefix="/api/v1/expenses", tags=["Expenses"])
app.include_router(analytics_router, prefix="/api/v1/analytics", tags=["Analytics"])
app.include_router(legacy_router, prefix="/api/v1/legacy", tags=["Legacy Data"])

# Root endpoint
@app.get("/")
def root():
    """
    Root endpoint for API health check.

    Returns:
        dict: Welcome message and API version
    """
    return {"message": f"Welcome to {settings.clinic_name} API", "version": API_VERSION}

# Health check endpoint
@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns:
        dict: Health status information
    """
    return {"status": "healthy"}
