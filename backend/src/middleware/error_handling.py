"""
Error handling middleware.
Turns domain errors raised by procedures into the standard error body.
"""
import json
import logging
import traceback
from typing import Callable, Optional

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from src.middleware.request_logging import redact_body
from src.services.exceptions import ServiceError, StorageError, ValidationError

logger = logging.getLogger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware for centralized error handling and logging."""

    async def _get_request_body(self, request: Request) -> Optional[dict]:
        """
        Safely extract request body for error logging.
        """
        try:
            if hasattr(request.state, "body"):
                body_bytes = request.state.body
            else:
                body_bytes = await request.body()
                request.state.body = body_bytes

            if not body_bytes:
                return None

            return redact_body(json.loads(body_bytes.decode("utf-8")))
        except Exception:
            # Logging must never fail the request
            return None

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except ValidationError as e:
            logger.warning(
                "Validation error",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "errors": e.details,
                },
            )
            return self._error_response(e)

        except StorageError as e:
            body = await self._get_request_body(request)

            logger.error(
                "Storage error",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "error": e.message,
                    "cause": str(e.__cause__) if e.__cause__ else None,
                    "request_body": body,
                },
            )
            return self._error_response(e)

        except ServiceError as e:
            logger.error(
                f"{e.label}: {e.message}",
                extra={"path": request.url.path, "method": request.method},
            )
            return self._error_response(e)

        except PydanticValidationError as e:
            # Malformed rows coming back from the store
            logger.error(
                "Record validation error",
                extra={"path": request.url.path, "errors": e.errors()},
            )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error": "Storage Error",
                    "message": "Stored data did not match the expected shape",
                },
            )

        except Exception as e:
            body = await self._get_request_body(request)

            tb_str = traceback.format_exc()

            from src.config.settings import get_settings

            try:
                is_production = get_settings().is_production
            except Exception:
                is_production = True  # Default to production mode for safety

            logger.error(
                "Unhandled error",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "error": str(e),
                    "error_type": type(e).__name__,
                    "request_body": body,
                    "traceback": tb_str if not is_production else None,
                },
                exc_info=True,
            )

            if is_production:
                message = "An internal error occurred. Please try again later."
            else:
                message = f"{type(e).__name__}: {str(e)}"

            response_content = {
                "error": "Internal Server Error",
                "message": message,
            }
            if not is_production:
                response_content["traceback"] = tb_str

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=response_content,
            )

    @staticmethod
    def _error_response(error: ServiceError) -> JSONResponse:
        content = {"error": error.label, "message": error.message}
        if error.details is not None:
            content["details"] = error.details
        return JSONResponse(status_code=error.status_code, content=content)
