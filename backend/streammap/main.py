"""Main FastAPI application entry point"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import logging

from streammap.api.errors import request_errors, validation_error
from streammap.api.health import router as health_router
from streammap.api.organizations import router as organizations_router
from streammap.api.projects import router as projects_router
from streammap.config import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title="StreamMap API",
    description="Backend API for mapping and searching stream restoration projects",
    version="1.0.0",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)

# Include routers
app.include_router(health_router)
app.include_router(projects_router)
app.include_router(organizations_router)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed requests as a 400 problem listing every error"""
    return validation_error(errors=request_errors(exc.errors()), instance=request.url.path)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "StreamMap API",
        "version": "1.0.0",
        "status": "running",
    }
