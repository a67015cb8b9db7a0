import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from klub.api.routers import v1_router
from klub.core.config import settings
from klub.core.exceptions import KlubError, UpstreamError
from klub.core.logging_config import configure_logging
from klub.db.session import init_db

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"[Startup] {settings.PROJECT_NAME} ({settings.ENVIRONMENT})")
    yield


app = FastAPI(title=settings.PROJECT_NAME, version="0.1.0", lifespan=lifespan)


@app.exception_handler(KlubError)
async def klub_exception_handler(request: Request, exc: KlubError):
    if exc.status_code >= 500:
        logger.error(f"[{exc.status_code}] {request.method} {request.url.path}: {exc.message} {exc.details or ''}")
    else:
        logger.info(f"[{exc.status_code}] {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Request validation failures are reported as 400 with the error envelope
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    body = await request.body()
    logger.error(f"[400 Validation Error] Path: {request.url.path}")
    logger.error(f"[400 Validation Error] Method: {request.method}")
    logger.error(f"[400 Validation Error] Body: {body.decode('utf-8', errors='replace') if body else 'Empty'}")
    logger.error(f"[400 Validation Error] Errors: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body", "details": str(exc.errors())},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"[500 Database Error] {request.method} {request.url.path}")
    error = UpstreamError("Database operation failed", details=str(exc))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API v1 routes
app.include_router(v1_router.routes, prefix="/api")


@app.get("/")
def read_root():
    return {"message": settings.PROJECT_NAME, "version": "0.1.0"}
