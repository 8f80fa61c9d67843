"""
FastAPI application initialization and configuration for the assistant files proxy.
"""
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from services.common.log_creator import create_logger
from services.common.decorators import GENERIC_ERROR_BODY
from services.assistant_files.config import Config
from services.assistant_files.files_router import assistant_files_router

logger = create_logger(is_production=Config.IS_PRODUCTION, log_url=Config.LOG_URL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager for startup and shutdown events.
    """
    Config.validate()
    logger.info(f"Starting assistant files proxy for assistant {Config.OPENAI_ASSISTANT_ID}")

    yield

    logger.info("Shutting down assistant files proxy...")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """
    app = FastAPI(
        title="Assistant Files API",
        description="Manage the files behind an OpenAI assistant's file search",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(assistant_files_router, prefix="/api")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "message": "Assistant files proxy is running"}

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """Global exception handler."""
        logger.error(f"Unhandled exception: {exc}")
        return PlainTextResponse(GENERIC_ERROR_BODY, status_code=500)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app,
                host="0.0.0.0",
                port=int(os.getenv("SERVICE_PORT", 8000))
                )
