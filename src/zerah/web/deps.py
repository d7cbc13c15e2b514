from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie

from zerah.app import App
from zerah.core.modules.session.models import SESSION_COOKIE_NAME

cookie_scheme = APIKeyCookie(name=SESSION_COOKIE_NAME, auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_session_cookie(token_cookie: Annotated[str | None, Depends(cookie_scheme)] = None) -> str | None:
    """Raw session cookie value; validation is left to the App facade."""
    return token_cookie or None


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
SessionCookieDep = Annotated[str | None, Depends(get_session_cookie)]
