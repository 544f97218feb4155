"""NextAva Availability FastAPI Application.

Main entry point for the backend API server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from nextava.api import router
from nextava.api.routes import close_services
from nextava.models import ErrorCode

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    yield
    await close_services()


app = FastAPI(
    title="NextAva Availability API",
    description="Clinic imaging availability from the published NextAva sheet",
    version="0.1.0",
    lifespan=lifespan,
)

# The widget is embedded on arbitrary clinic websites
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# Global exception handlers
@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    """Handle Pydantic validation errors."""
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "state": "error",
            "error": {
                "code": ErrorCode.VALIDATION_ERROR.value,
                "message": str(exc),
                "user_message": "Invalid request format. Please check your input.",
            },
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors."""
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "state": "error",
            "error": {
                "code": ErrorCode.API_ERROR.value,
                "message": str(exc),
                "user_message": "Unable to load availability information. Please try again later.",
            },
        },
    )


# Include API routes
app.include_router(router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
