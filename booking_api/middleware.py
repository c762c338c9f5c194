import logging
import time

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware:
    """Logs method, path, response status and duration for every request."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        started = time.monotonic()
        response = self.get_response(request)
        elapsed_ms = (time.monotonic() - started) * 1000

        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            "%s %s -> %s (%.1f ms)",
            request.method, request.get_full_path(), response.status_code, elapsed_ms
        )
        return response
