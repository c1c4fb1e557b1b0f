import logging
import time
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from app.config import Config
from app.db.database import Database
from app.routers import products, health
from app.exceptions import (
    AppException,
    RequestValidationFailed,
    app_exception_handler,
    generic_exception_handler,
    validation_exception_handler,
)

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def create_app(config: Config | None = None) -> FastAPI:
    """Build the API with its own database handle and settings."""
    config = config or Config.from_env()
    database = Database(config.database_url, echo=config.database_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await database.connect()
        await database.create_all()
        logger.info("Database connected and tables synchronized")
        yield
        await database.disconnect()
        logger.info("Database disconnected")

    app = FastAPI(
        title="Products API",
        version="1.0.0",
        description="CRUD API for products: name, price and availability",
        lifespan=lifespan
    )
    app.state.config = config
    app.state.db = database

    # Register exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationFailed, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.frontend_url],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms")
        return response

    # Include routers
    app.include_router(health.router)
    app.include_router(products.router)

    return app


def get_app() -> FastAPI:
    """Entry point for the server: `uvicorn app.main:get_app --factory`."""
    config = Config.from_env()
    configure_logging(config.log_level)
    return create_app(config)


if __name__ == "__main__":
    uvicorn.run("app.main:get_app", factory=True, host="0.0.0.0", port=8000)
