# SpotBnB - Vacation Rental Booking API
# Copyright (C) 2025 Oleg Tokmakov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.


"""Main FastAPI application entry point."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from spotbnb import __version__
from spotbnb.config import configure_logging, get_settings, init_settings
from spotbnb.database import init_database
from spotbnb.routes import api_router
from spotbnb.services.exceptions import BookingError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Initialize settings
    config_path = os.environ.get("SPOTBNB_CONFIG")
    settings = init_settings(config_path)
    configure_logging(settings.app.log_level)

    logger.info("Starting SpotBnB v%s", __version__)

    # Initialize database
    init_database()

    yield

    logger.info("SpotBnB stopped")


def create_app(use_lifespan: bool = True) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="SpotBnB",
        description="Vacation rental booking API",
        version=__version__,
        license_info={
            "name": "AGPL-3.0-or-later",
            "url": "https://www.gnu.org/licenses/agpl-3.0.html",
        },
        lifespan=lifespan if use_lifespan else None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.app.debug else [settings.app.base_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routes
    app.include_router(api_router)

    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError):
        """Translate booking engine refusals into JSON responses."""
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Report malformed request fields by name."""
        errors = {}
        for error in exc.errors():
            field = str(error["loc"][-1]) if error.get("loc") else "body"
            errors.setdefault(field, error["msg"])
        return JSONResponse(
            status_code=400,
            content={"message": "Bad Request", "errors": errors},
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        if settings.app.debug:
            return JSONResponse(
                status_code=500,
                content={"detail": str(exc), "type": type(exc).__name__},
            )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "spotbnb.main:app",
        host=settings.app.host,
        port=settings.app.port,
        reload=settings.app.debug,
    )
