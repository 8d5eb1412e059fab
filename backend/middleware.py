"""
Edge checks applied before any router runs:
rate limiting and same-origin enforcement on /api/ paths, security headers on every response,
including the generic 500 returned for unhandled errors
"""
import logging
from urllib.parse import urlparse

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from services.errors import StoreError
from services.rate_limiter import RateLimiter, client_key

logger = logging.getLogger(__name__)

API_PREFIX = "/api/"
STATE_CHANGING_METHODS = {"POST", "PUT", "DELETE", "PATCH"}

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

RATE_LIMITED_MESSAGE = "تم تجاوز الحد المسموح من الطلبات. يرجى المحاولة لاحقاً."
ORIGIN_REJECTED_MESSAGE = "طلب غير مصرح به"


def origin_matches_host(origin: str, host: str) -> bool:
    return urlparse(origin).netloc.lower() == host.lower()


class EdgeMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limiter: RateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next):
        if request.url.path.startswith(API_PREFIX):
            rejected = self._check_api_request(request)
            if rejected is not None:
                return self._secure(rejected)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(f"Unhandled error on {request.method} {request.url.path}: {e}")
            response = JSONResponse(
                status_code=500,
                content={"success": False, "error": StoreError.default_message}
            )
        return self._secure(response)

    def _check_api_request(self, request: Request):
        key = client_key(
            request.headers.get("x-forwarded-for"),
            request.client.host if request.client else None
        )
        decision = self.limiter.hit(key)
        if not decision.allowed:
            logger.warning(f"Rate limit exceeded for {key}")
            return JSONResponse(
                status_code=429,
                content={"success": False, "error": RATE_LIMITED_MESSAGE},
                headers={"Retry-After": str(decision.retry_after)}
            )

        if request.method in STATE_CHANGING_METHODS:
            origin = request.headers.get("origin")
            host = request.headers.get("host")
            if origin and host and not origin_matches_host(origin, host):
                logger.warning(f"Rejected {request.method} {request.url.path} from origin {origin}")
                return JSONResponse(
                    status_code=403,
                    content={"success": False, "error": ORIGIN_REJECTED_MESSAGE}
                )
        return None

    @staticmethod
    def _secure(response):
        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        return response
