import uvicorn as uvicorn
from fastapi import FastAPI, Request, HTTPException, Depends
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from pymongo.errors import PyMongoError
import redis.asyncio as redis
import logging

from src.config.settings import settings
from src.config.database import startDB, closeDB, pingDB
from src.commonUtils.errorUtils import AppError
from src.routes import classRoute, cartRoute
from src.adminUtils.adminRoutes import manageClassesRoute

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# Initialize FastAPI app with lifespan context
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Fails fast when the database cannot be reached
    await startDB()

    if settings.RATE_LIMITING_ENABLED:
        redis_connection = redis.from_url(settings.REDIS_URL, encoding="utf-8")
        await FastAPILimiter.init(redis_connection)

    yield

    if settings.RATE_LIMITING_ENABLED:
        await FastAPILimiter.close()
    await closeDB()


def rate_limit(times: int, seconds: int) -> list:
    """Route dependencies for the limiter, empty while rate limiting is disabled"""
    if not settings.RATE_LIMITING_ENABLED:
        return []
    return [Depends(RateLimiter(times=times, seconds=seconds))]


async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler that formats all errors consistently"""
    error_response = {
        "error": {
            "type": exc.__class__.__name__,
            "message": "An error occurred",
            "detail": str(exc),
            "path": request.url.path,
        }
    }

    status_code = 500

    # Service layer errors: ValidationError, NotFoundError, PersistenceError
    if isinstance(exc, AppError):
        status_code = exc.status_code
        error_response["error"]["message"] = exc.message
        error_response["error"]["detail"] = exc.detail

    # Handle HTTP exceptions (404, 401, etc.)
    elif isinstance(exc, HTTPException):
        status_code = exc.status_code
        error_response["error"]["message"] = exc.detail
        error_response["error"]["detail"] = exc.detail

    # Handle validation errors
    elif isinstance(exc, RequestValidationError):
        status_code = 422
        error_response["error"]["message"] = "Validation error"
        error_response["error"]["detail"] = exc.errors()

    elif isinstance(exc, PyMongoError):
        error_response["error"]["message"] = "Database error"

    if status_code == 500:
        logger.error(f"Unexpected error on {request.url.path}: {str(exc)}", exc_info=True)
        if not isinstance(exc, (AppError, PyMongoError)):
            error_response["error"]["message"] = "Internal server error"
        # Don't expose internal details in production
        if settings.is_production:
            error_response["error"]["detail"] = "Please contact support"

    return JSONResponse(
        status_code=status_code,
        content=error_response
    )


app = FastAPI(
    title="Yoga Master API",
    lifespan=lifespan,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc"
)

# Register the handler for all exceptions
app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(AppError, global_exception_handler)
app.add_exception_handler(HTTPException, global_exception_handler)
app.add_exception_handler(RequestValidationError, global_exception_handler)
app.add_exception_handler(PyMongoError, global_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(classRoute.router, tags=['classes'], dependencies=rate_limit(100, 60))
app.include_router(cartRoute.router, tags=['cart'], dependencies=rate_limit(100, 60))
app.include_router(manageClassesRoute.router, tags=['AdminUtils'], dependencies=rate_limit(100, 60))


@app.get("/")
def root():
    return {"message": "Hello World, this is my yoga master server!"}


@app.get("/api/healthchecker", dependencies=rate_limit(100, 60))
async def healthchecker():
    if not await pingDB():
        return JSONResponse(status_code=503, content={"status": "unavailable", "database": "unreachable"})
    return {"status": "ok", "database": "connected"}


if __name__ == "__main__":
    uvicorn.run("src.main:app", host="0.0.0.0", port=settings.PORT, reload=not settings.is_production,
                log_level="info")
