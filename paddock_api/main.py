"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from paddock_api.config import settings
from paddock_api.middleware.error_handler import ErrorHandlerMiddleware
from paddock_api.api.v1.routers import paddocks, projects, upload

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Logs the effective configuration on startup.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Area config: source={settings.calculated_area_source}, "
                f"ellipsoid={settings.geodesic_ellipsoid}, "
                f"acres_to_hectares={settings.acres_to_hectares}")
    logger.info(f"Upload limit: {settings.max_upload_bytes} bytes")

    yield

    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Paddock GeoJSON ingestion and project statistics API

    Upload paddock boundaries as GeoJSON, then browse the stored paddocks and
    the statistics of the projects they belong to.

    ## Features

    - **Per-feature validation**: Bad features are reported by index while the
      rest of an upload is stored
    - **Geodesic area**: Polygon area on the WGS84 ellipsoid, holes subtracted
    - **Project statistics**: Paddock counts, areas, owners and bounding boxes
      recomputed after every change
    - **Project colors**: Stable palette colors in project creation order,
      with user overrides preserved
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(ErrorHandlerMiddleware)

app.include_router(upload.router, prefix="/api/v1")
app.include_router(paddocks.router, prefix="/api/v1")
app.include_router(projects.router, prefix="/api/v1")


@app.get("/", tags=["health"])
async def root():
    """
    Root endpoint for health check.

    Returns:
        Status message
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
    }
