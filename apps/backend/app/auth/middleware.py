"""Login gating for page routes."""

from __future__ import annotations

from urllib.parse import urlencode

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

from .dependencies import build_session
from .models import SessionContext

PROTECTED_PREFIXES = ("/dashboard", "/tools")
AUTH_PAGES = ("/login", "/signup")
LOGIN_PATH = "/login"
HOME_PATH = "/dashboard"


def _under(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


def evaluate_route_access(path: str, session: SessionContext) -> str | None:
    """Return where to redirect a request for ``path``, or ``None`` to let it through.

    Anonymous callers of protected pages are sent to the login page with the
    original path preserved; signed-in callers of the auth pages go home.
    Prefixes match whole path segments, so ``/toolsx`` is not protected.
    """

    if not session.is_authenticated and any(_under(path, prefix) for prefix in PROTECTED_PREFIXES):
        return f"{LOGIN_PATH}?{urlencode({'redirect': path})}"
    if session.is_authenticated and path in AUTH_PAGES:
        return HOME_PATH
    return None


def is_page_navigation(request: Request) -> bool:
    """True for browser ``GET``/``HEAD`` requests asking for an HTML page."""

    if request.method not in ("GET", "HEAD"):
        return False
    return "text/html" in request.headers.get("accept", "")


class RouteAccessMiddleware(BaseHTTPMiddleware):
    """Applies :func:`evaluate_route_access` to page navigations.

    API calls, including the JSON ``GET /tools`` and ``GET /dashboard``, are
    guarded by the auth dependencies, which answer 401 instead of redirecting.
    """

    async def dispatch(self, request: Request, call_next):
        if is_page_navigation(request):
            target = evaluate_route_access(request.url.path, build_session(request))
            if target is not None:
                return RedirectResponse(target, status_code=307)
        return await call_next(request)


__all__ = [
    "AUTH_PAGES",
    "PROTECTED_PREFIXES",
    "RouteAccessMiddleware",
    "evaluate_route_access",
    "is_page_navigation",
]
