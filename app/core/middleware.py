"""HTTP middleware: security response headers."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

SECURITY_HEADERS = {
    "Content-Security-Policy": "default-src 'self'",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains; preload",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "same-origin",
    "X-Content-Type-Options": "nosniff",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add SECURITY_HEADERS to every response, including AppError and validation error envelopes.

    Paths in csp_exempt_paths (the interactive docs, which load Swagger UI assets
    from a CDN) get every header except Content-Security-Policy.
    """

    def __init__(self, app: ASGIApp, csp_exempt_paths: tuple[str, ...] = ()) -> None:
        super().__init__(app)
        self.csp_exempt_paths = tuple(p for p in csp_exempt_paths if p)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        exempt = request.url.path.startswith(self.csp_exempt_paths) if self.csp_exempt_paths else False
        for name, value in SECURITY_HEADERS.items():
            if exempt and name == "Content-Security-Policy":
                continue
            response.headers.setdefault(name, value)
        return response
