from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
import uvicorn
from routes import router
from config import HOST, PORT
from logger.backend_logger import backend_logger
from session.session_manager import session_manager
from contextlib import asynccontextmanager


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handles app startup and shutdown"""
    # Startup
    backend_logger.info("Fiducial Registration service starting up...")
    yield
    # Shutdown
    backend_logger.info("Fiducial Registration service shutting down...")
    session_manager.cleanup_all_sessions()


# Initialize FastAPI app with lifespan
app = FastAPI(
    title="Fiducial Registration",
    description="Landmark-based rigid and similarity registration of fiducial lists",
    version="0.1.0",
    lifespan=lifespan
)

# Include API routes
app.include_router(router)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are 400. 422 is reserved for alignment precondition failures."""
    backend_logger.error(f"Malformed request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        {"status": "error", "message": "Malformed request body.", "detail": jsonable_encoder(exc.errors())},
        status_code=400
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    try:
        backend_logger.info("Starting Fiducial Registration service...")
        uvicorn.run(
            "main:app",
            host=HOST,
            port=PORT,
            reload=True,
            log_level="info"
        )
    except KeyboardInterrupt:
        backend_logger.info("Received shutdown signal")
