"""
Error handling middleware for the application.

Storage failures surface from the repositories unchanged; these handlers only
log them and render a consistent JSON body. Request validation errors keep
FastAPI's default 422 response.
"""

import logging
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.utils.api_response import error_response

logger = logging.getLogger(__name__)


def add_error_handlers(app: FastAPI) -> None:
    """
    Add error handlers to the FastAPI application.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Handle HTTP exceptions."""
        logger.warning(f"HTTP exception: {exc.detail} (status_code={exc.status_code})")
        return JSONResponse(
            content=error_response(
                message=str(exc.detail),
                code="http_error"
            ),
            status_code=exc.status_code
        )

    @app.exception_handler(StaleDataError)
    async def stale_data_handler(request: Request, exc: StaleDataError) -> JSONResponse:
        """Handle updates and deletes that matched no stored row."""
        logger.warning(f"Stale record: {str(exc)}")
        return JSONResponse(
            content=error_response(
                message="Record was not found or was modified concurrently",
                code="conflict"
            ),
            status_code=status.HTTP_409_CONFLICT
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        """Handle database errors."""
        logger.error(f"Database error: {str(exc)}")
        return JSONResponse(
            content=error_response(
                message="Database error occurred",
                code="database_error"
            ),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle all other exceptions."""
        logger.error(f"Unexpected error: {str(exc)}", exc_info=True)
        return JSONResponse(
            content=error_response(
                message="An unexpected error occurred",
                code="server_error",
                details={"type": type(exc).__name__}
            ),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
