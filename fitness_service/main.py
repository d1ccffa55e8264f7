"""
Main entry point for the Fitness Tracker API.

This script initializes the FastAPI application, sets up logging, the
database, middleware and exception handlers, and includes the API routers.
"""

import logging
import time
from datetime import datetime

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from . import models
from .core.config import settings
from .database import engine
from .errors import register_exception_handlers
from .routes import auth, devices, meals, progress, reminders, workouts
from .schemas import HealthResponse

load_dotenv()

# --- Logging ---
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Create all database tables defined in models.py if they don't exist
if settings.STORAGE_BACKEND == "memory":
    logger.warning("Running in demo mode: data is kept in memory and lost on restart")
else:
    models.Base.metadata.create_all(bind=engine)

# Initialize the FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Personal fitness tracking: workouts, meals, progress, reminders and wearable sync.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """
    Middleware to calculate and add a custom `X-Process-Time` header
    to every response, indicating how long the request took to process.
    """
    start_time = time.time()
    response = await call_next(request)
    response.headers["X-Process-Time"] = str(time.time() - start_time)
    return response


register_exception_handlers(app)

# All routes are served under the /api prefix
for router in (auth.router, workouts.router, meals.router, progress.router, reminders.router, devices.router):
    app.include_router(router, prefix=settings.API_PREFIX)


@app.get(f"{settings.API_PREFIX}/health", response_model=HealthResponse, tags=["Health"])
def health_check():
    """Simple liveness check that also reports the storage mode."""
    return {
        "success": True,
        "message": "Fitness Tracker API is running",
        "mode": "demo" if settings.STORAGE_BACKEND == "memory" else "database",
        "timestamp": datetime.now(),
    }


if __name__ == "__main__":
    uvicorn.run("fitness_service.main:app", host=settings.HOST, port=settings.PORT)
