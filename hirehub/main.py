"""
HireHub Profile Assets - Main Application

FastAPI backend with:
- PostgreSQL for accounts
- MongoDB for profile aggregates (CVs, photos, projects)
- Local object store for uploaded files, served under /uploads
- JWT authentication

Run: uvicorn hirehub.main:app --reload
"""

import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from hirehub.api.routes import api_router
from hirehub.core.config import get_settings
from hirehub.core.errors import ProfileAssetError, ValidationError
from hirehub.schemas.schemas import ErrorBody, ErrorResponse

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="HireHub Profile Assets",
    description="""
    Keeps a candidate's uploaded assets consistent across stores.

    ## Features
    - **CVs**: upload, list, choose primary, delete
    - **Profile photos**: upload, choose primary (mirrored into the avatar), delete
    - **Projects**: portfolio items with files or an external link
    - **Account sync**: name and email edited on either side reach the other

    ## Stores
    - PostgreSQL: accounts
    - MongoDB: one profile document per account
    - Object store: file bytes, addressed by storage key
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ProfileAssetError)
async def profile_asset_error_handler(request: Request, exc: ProfileAssetError):
    """Render every domain error with the same body shape."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    body = ErrorResponse(error=ErrorBody(**exc.to_dict()))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are plain validation errors."""
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    return await profile_asset_error_handler(request, ValidationError(message))


# Include API routes
app.include_router(api_router, prefix="/api")

# Serve stored objects (LocalObjectStore writes under upload_dir)
os.makedirs(settings.upload_dir, exist_ok=True)
app.mount(settings.uploads_url_prefix, StaticFiles(directory=settings.upload_dir), name="uploads")


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create the unique account_id index on profiles."""
    from hirehub.services.asset_manager import get_asset_manager

    try:
        get_asset_manager().profiles.ensure_indexes()
        logger.info("MongoDB indexes initialized")
    except Exception as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    from hirehub.db.postgres import test_postgres_connection
    from hirehub.db.mongodb import test_mongo_connection

    return {
        "status": "healthy",
        "postgres": "connected" if test_postgres_connection() else "disconnected",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
