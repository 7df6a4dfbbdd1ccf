import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Import models so the snapshot table is registered with Base
from . import models  # noqa: F401
from .config import ALLOWED_ORIGINS
from .database import Base, engine
from .domain.bookings.router import router as bookings_router
from .domain.partners.router import router as partners_router
from .domain.payouts.router import router as payouts_router
from .domain.pricing.router import router as pricing_router
from .domain.reports.router import router as reports_router
from .domain.stories.router import router as stories_router
from .domain.users.router import router as users_router
from .store import get_store

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        error_msg = str(e)
        if "already exists" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    store = get_store()
    logger.info(f"Store ready with {len(store.bookings)} bookings")

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Rent Mimi API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Convert 422 validation errors on the X-User-Phone header into 401 so a
    missing identity reads as an authentication failure
    """
    for error in exc.errors():
        if error.get("loc") and "x-user-phone" in str(error.get("loc")).lower():
            logger.warning(f"Authentication failed for {request.url.path}: invalid X-User-Phone header")
            return JSONResponse(
                status_code=401,
                content={"detail": "Not authenticated. Provide the X-User-Phone header."},
            )

    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_errors(exc)})


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # ctx can carry the raised ValueError, which is not JSON serializable
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        errors.append(error)
    return errors


@app.middleware("http")
async def log_requests(request: Request, call_next):
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise


# CORS Configuration
logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(users_router)
app.include_router(partners_router)
app.include_router(bookings_router)
app.include_router(payouts_router)
app.include_router(pricing_router)
app.include_router(stories_router)
app.include_router(reports_router)


@app.get("/")
def root():
    return {"message": "Rent Mimi API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
