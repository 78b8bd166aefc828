import time
import uuid
import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

log = logging.getLogger("policy.http")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    One REQ and one RES (or ERR) line per request, tied together by a request
    id taken from x-request-id or minted here, and echoed on the response.
    """

    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = rid
        start = time.perf_counter()

        log.info(
            "REQ rid=%s method=%s path=%s query=%s client=%s",
            rid,
            request.method,
            request.url.path,
            request.url.query,
            request.client.host if request.client else None,
        )
        try:
            response = await call_next(request)
        except Exception:
            log.exception("ERR rid=%s dur_ms=%d path=%s", rid, _elapsed_ms(start), request.url.path)
            raise

        log.info("RES rid=%s status=%s dur_ms=%d path=%s", rid, response.status_code, _elapsed_ms(start), request.url.path)
        response.headers["x-request-id"] = rid
        return response


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
