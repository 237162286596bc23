"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stockroom.config import settings
from stockroom.database import engine, Base, SessionLocal
from stockroom.exceptions import InvalidStateError, NotFoundError, PartialLoadError, StoreError
from stockroom.routes import categories, search, shelves, warehouses
from stockroom.services.document_store import SqlDocumentStore
from stockroom.services.warehouse_manager import WarehouseManager

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_manager() -> WarehouseManager:
    """Create the session registry over the configured database."""
    Base.metadata.create_all(bind=engine)
    return WarehouseManager(SqlDocumentStore(SessionLocal))


@asynccontextmanager
async def lifespan(app: FastAPI):
    if getattr(app.state, "manager", None) is None:
        app.state.manager = create_manager()
    logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)
    yield
    app.state.manager.close()
    app.state.manager = None


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Warehouse storage layout and tray stock tracking",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(warehouses.router, prefix="/api")
app.include_router(categories.router, prefix="/api")
app.include_router(shelves.router, prefix="/api")
app.include_router(search.router, prefix="/api")


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(InvalidStateError)
async def invalid_state_handler(request: Request, exc: InvalidStateError):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    # Covers StageConflictError: the batch was rolled back locally and can be retried
    logger.error("Store failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": str(exc)})


@app.exception_handler(PartialLoadError)
async def partial_load_handler(request: Request, exc: PartialLoadError):
    logger.warning("Partial load on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": str(exc)})


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
