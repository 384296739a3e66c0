"""Error kinds raised by the upload/build/run pipeline.

Every pipeline failure is non-fatal to the server. Controllers catch
``CodeRunnerError`` and answer with its ``status_line()`` so the client
always receives a single string. Anything else falls through to the
catch-all handler registered by ``register_exception_handlers``.

Usage:
    from coderunner.errors import NavigationError

    if not work_dir.is_dir():
        raise NavigationError(path=str(work_dir))
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Body returned for unexpected server errors."""

    error: str
    detail: str | None = None
    context: dict[str, Any] | None = None


class CodeRunnerError(Exception):
    """Base class for pipeline errors."""

    error: str = "internal_error"
    label: str = "Error"
    detail: str = "An unexpected error occurred"

    def __init__(self, detail: str | None = None, **context: Any) -> None:
        self.detail = detail or self.__class__.detail
        self.context = context if context else None
        super().__init__(self.detail)

    def status_line(self) -> str:
        """Render the error as the string sent back to the client."""
        return f'"{self.label}":"{self.detail}"'

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.error, detail=self.detail, context=self.context)


class FileRetrievalError(CodeRunnerError):
    """The upload form carried no archive."""

    error = "file_error"
    label = "File Error"
    detail = "Error in retrieving the file"


class DecompressionError(CodeRunnerError):
    """The archive is malformed or could not be written out."""

    error = "decompression_error"
    label = "Extract Error"
    detail = "Error in extracting uploaded file"


class SecurityViolationError(CodeRunnerError):
    """An entry or root name resolves outside its destination."""

    error = "security_violation"
    label = "Security Error"
    detail = "Illegal file path in uploaded file"


class NavigationError(CodeRunnerError):
    """The submission's work directory is missing or unreachable."""

    error = "navigation_error"
    label = "Navigation Error"
    detail = "Error while navigating to working directory"

    def status_line(self) -> str:
        return self.detail


class CommandError(CodeRunnerError):
    """A compile or run command exited non-zero or could not be spawned."""

    error = "command_error"
    label = "Command Error"
    detail = "Command failed"

    def __init__(self, detail: str | None = None, returncode: int | None = None, **context: Any) -> None:
        super().__init__(detail, **context)
        self.returncode = returncode

    def status_line(self) -> str:
        return self.detail


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions.

    A pipeline error that escapes its controller keeps its own kind in the
    body; anything else is reported with the base error defaults.
    """
    logger.exception("Unhandled exception: %s (path=%s)", exc, request.url.path)
    error = exc if isinstance(exc, CodeRunnerError) else CodeRunnerError()
    return JSONResponse(
        status_code=500,
        content=error.to_response().model_dump(exclude_none=True),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register the catch-all handler with the FastAPI app."""
    app.add_exception_handler(Exception, general_exception_handler)
