"""
Mangrove Watch - FastAPI Application Entry Point

Crowdsourced reporting of harm to mangrove ecosystems. Citizens submit
geotagged incident reports and earn points and badges; NGO, government and
admin reviewers approve, reject and resolve them.
"""

import sys
import traceback
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.core.settings import settings
from app.config.firebase import initialize_firestore
from app.routes import admin, analytics, auth, health, incidents, leaderboard, location, mangrove, users


# Initialize FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Citizen reporting of environmental incidents in mangrove ecosystems",
    debug=settings.DEBUG
)


def jsonable_errors(exc: RequestValidationError):
    # ctx may hold exception objects (e.g. ValueError from validators)
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        errors.append(error)
    return errors


# Global exception handler to catch ALL exceptions
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions and log them with full traceback."""
    sys.stderr.write("=" * 80 + "\n")
    sys.stderr.write("🔥 UNHANDLED EXCEPTION\n")
    sys.stderr.write(f"Path: {request.url.path}\n")
    sys.stderr.write(f"Method: {request.method}\n")
    sys.stderr.write("=" * 80 + "\n")
    sys.stderr.write("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    sys.stderr.write("=" * 80 + "\n")
    sys.stderr.flush()

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": f"Internal server error: {str(exc)}"}
    )


# Pydantic validation error handler
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Catch request validation errors and log them."""
    sys.stderr.write("=" * 80 + "\n")
    sys.stderr.write("🔥 VALIDATION ERROR\n")
    sys.stderr.write(f"Path: {request.url.path}\n")
    sys.stderr.write(f"Method: {request.method}\n")
    sys.stderr.write(f"Errors: {exc.errors()}\n")
    sys.stderr.write("=" * 80 + "\n")
    sys.stderr.flush()

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_errors(exc)}
    )


# CORS: origins come from settings (no wildcard)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Application lifecycle events
@app.on_event("startup")
async def startup_event():
    """
    Initialize services on application startup.
    Currently: Firestore connection
    """
    print(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    try:
        initialize_firestore()
    except Exception as e:
        print(f"Warning: Firestore initialization failed: {e}")
        print("   The app will start but database operations may fail.")


@app.on_event("shutdown")
async def shutdown_event():
    print(f"Shutting down {settings.APP_NAME}")


# Include routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(incidents.router)
app.include_router(leaderboard.router)
app.include_router(analytics.router)
app.include_router(admin.router)
app.include_router(mangrove.router)
app.include_router(location.router)


# Root endpoint
@app.get("/")
async def root():
    """
    Root endpoint - API information.
    """
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "health": "/health",
        "mangrove_check": "/mangrove/detect?latitude={lat}&longitude={lon}"
    }
