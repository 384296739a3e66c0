"""Debug log of submission pipeline traffic, enabled by REQUEST_DEBUG.

Only the pipeline routes are logged. Static client files, /health and
/metrics pass through untouched.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

PIPELINE_STAGES = {
    "/upload": "upload",
    "/build": "build",
    "/run": "run",
    "/submission": "session",
}


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


class SubmissionLogMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, logger_name: str = "coderunner.http", stages: dict[str, str] | None = None):
        super().__init__(app)
        self._logger = logging.getLogger(logger_name)
        self._stages = PIPELINE_STAGES if stages is None else stages

    async def dispatch(self, request: Request, call_next) -> Response:
        stage = self._stages.get(request.url.path)
        if stage is None:
            return await call_next(request)

        started = time.perf_counter()
        if stage == "upload":
            # multipart body: archive plus the command fields
            self._logger.debug("upload received body_bytes=%s", request.headers.get("content-length", "unknown"))
        else:
            self._logger.debug("%s requested via %s", stage, request.method)

        try:
            response = await call_next(request)
        except Exception:
            self._logger.warning("%s failed after %.1f ms", stage, _elapsed_ms(started), exc_info=True)
            raise
        self._logger.debug("%s answered status=%s in %.1f ms", stage, response.status_code, _elapsed_ms(started))
        return response
