from fastapi import Request
from fastapi.responses import RedirectResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from zerah.app import App
from zerah.core.modules.access.gate import is_excluded
from zerah.core.modules.session.models import SESSION_COOKIE_NAME
from zerah.logging import bind_request_context


class AccessGateMiddleware(BaseHTTPMiddleware):
    """Applies the access gate to every page request.

    The session cookie is read from the request and any cookie change is
    written to the response; nothing is kept between requests.
    """

    def __init__(self, app: ASGIApp, app_instance: App) -> None:
        super().__init__(app)
        self._app = app_instance

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        bind_request_context(request.method, path)
        if is_excluded(path):
            return await call_next(request)

        decision = self._app.check_access(path, request.cookies.get(SESSION_COOKIE_NAME))
        if decision.is_redirect and decision.location is not None:
            response: Response = RedirectResponse(url=decision.location, status_code=307)
        else:
            response = await call_next(request)

        if decision.clear_cookie:
            response.delete_cookie(SESSION_COOKIE_NAME, path="/")
        return response
