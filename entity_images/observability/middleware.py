"""
FastAPI middleware.

Request logging and site locale middleware.

Dependencies: fastapi, entity_images.core.site_locale
System role: Per-request observability and locale context
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from entity_images.core.site_locale import clear_current_locale, set_current_locale

logger = logging.getLogger(__name__)

LOCALE_QUERY_PARAM = "_locale"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests and responses."""

    async def dispatch(self, request: Request, call_next):
        """
        Log HTTP request and response with timing.

        Args:
            request: FastAPI request
            call_next: Next middleware in chain

        Returns:
            Response: Response object
        """
        start_time = time.time()
        method = request.method
        path = request.url.path

        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{method} {path} - Exception",
                extra={
                    "method": method,
                    "path": path,
                    "process_time_ms": round((time.time() - start_time) * 1000, 2),
                    "error_type": type(e).__name__,
                },
            )
            raise

        logger.info(
            f"{method} {path} - {response.status_code}",
            extra={
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "process_time_ms": round((time.time() - start_time) * 1000, 2),
            },
        )
        return response


class LocaleMiddleware(BaseHTTPMiddleware):
    """Set the ambient site locale from the ``_locale`` query parameter."""

    async def dispatch(self, request: Request, call_next):
        locale = request.query_params.get(LOCALE_QUERY_PARAM)
        set_current_locale(locale or None)
        try:
            return await call_next(request)
        finally:
            clear_current_locale()
