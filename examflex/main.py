"""
FastAPI Backend for the ExamFlex result service
Exam marks, GPA results and merit lists over a JSON API
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from examflex import __version__
from examflex.routes import marks, results, merit
from examflex.config import settings
from examflex.core import BaseAPIException, logger as app_logger

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events"""
    # Startup
    logger.info("Starting ExamFlex Result API...")
    logger.info(f"Environment: {'development' if settings.DEBUG else 'production'}")
    if not settings.API_CLIENTS:
        logger.warning("No API clients configured; every /api request will be rejected")

    for directory in [settings.LOGS_DIR, settings.EXPORTS_DIR]:
        directory.mkdir(parents=True, exist_ok=True)

    yield

    # Shutdown
    logger.info("Shutting down ExamFlex Result API...")


app = FastAPI(
    title="ExamFlex Result API",
    description="Exam mark calculation, result processing and merit ranking",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handlers
@app.exception_handler(BaseAPIException)
async def api_exception_handler(request: Request, exc: BaseAPIException):
    """Handle custom API exceptions"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "error_code": exc.error_code
        },
        headers=exc.headers
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions"""
    app_logger.error(f"Unexpected error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "An unexpected error occurred",
            "error_code": "INTERNAL_ERROR"
        }
    )


# Include routers
app.include_router(marks.router, prefix="/api/marks", tags=["Mark Entry"])
app.include_router(results.router, prefix="/api/results", tags=["Results"])
app.include_router(merit.router, prefix="/api/merit", tags=["Merit"])


@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "name": "ExamFlex Result API",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring"""
    return {
        "status": "healthy",
        "version": __version__
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "examflex.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
