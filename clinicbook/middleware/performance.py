"""
Request timing middleware

Logs one line per HTTP request with method, endpoint, status and duration,
and flags slow or failing requests.
"""

import time
import uuid
import logging
from fastapi import Request

logger = logging.getLogger(__name__)

SLOW_REQUEST_MS = 2000


class PerformanceMiddleware:
    """ASGI middleware that times each HTTP request"""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)

        if self._should_skip_monitoring(request.url.path):
            await self.app(scope, receive, send)
            return

        start_time = time.time()
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as e:
            logger.error(f"Request processing error: {e}")
            raise
        finally:
            response_time_ms = (time.time() - start_time) * 1000
            self._log_request(request, status_code, response_time_ms)

    def _should_skip_monitoring(self, path: str) -> bool:
        """Determine if we should skip monitoring for this path"""
        skip_paths = [
            "/docs",
            "/redoc",
            "/openapi.json",
            "/favicon.ico",
            "/health",
        ]
        return any(path.startswith(skip_path) for skip_path in skip_paths)

    def _log_request(self, request: Request, status_code: int, response_time_ms: float):
        endpoint = self._clean_endpoint_path(request.url.path)
        if response_time_ms > SLOW_REQUEST_MS:
            logger.warning(
                f"Slow request: {request.method} {endpoint} "
                f"took {response_time_ms:.0f}ms (status: {status_code})"
            )
        elif status_code >= 400:
            logger.warning(
                f"Request error: {request.method} {endpoint} "
                f"returned {status_code} in {response_time_ms:.0f}ms"
            )
        else:
            logger.info(f"{request.method} {endpoint} {status_code} {response_time_ms:.0f}ms")

    def _clean_endpoint_path(self, path: str) -> str:
        """Replace ids in the path with placeholders so log lines group by route"""
        cleaned_parts = []
        for part in path.split("/"):
            if self._looks_like_uuid(part):
                cleaned_parts.append("{uuid}")
            elif part.isdigit():
                cleaned_parts.append("{id}")
            else:
                cleaned_parts.append(part)
        return "/".join(cleaned_parts)

    def _looks_like_uuid(self, value: str) -> bool:
        if len(value) not in (32, 36):
            return False
        try:
            uuid.UUID(value)
            return True
        except ValueError:
            return False
