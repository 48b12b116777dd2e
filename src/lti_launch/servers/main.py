"""Starlette application setup for the LTI launch endpoint."""

import logging

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.sessions import SessionMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import BaseRoute, Mount, Route

from lti_launch.utils.environment import LaunchSettings
from lti_launch.verification.service import LaunchVerifier

from .correlation import CorrelationIdMiddleware
from .lti import lti_routes

logger = logging.getLogger("lti-launch.server.main")

SESSION_COOKIE = "lti_session"


async def health_check(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


def create_app(settings: LaunchSettings | None = None) -> Starlette:
    """Build the ASGI application.

    The verifier and its secret are created once here and shared by every
    request.  When ``settings.app_path`` is not ``/`` all routes are mounted
    under that prefix; signatures are still checked against the full,
    unstripped request path.
    """
    settings = settings or LaunchSettings.from_env()
    verifier = LaunchVerifier(settings.shared_secret, consumer_key=settings.consumer_key)

    routes: list[BaseRoute] = [
        Route("/healthz", health_check, methods=["GET"]),
        *lti_routes(verifier),
    ]
    if settings.app_path != "/":
        routes = [Mount(settings.app_path, routes=routes)]
        logger.info("Mounting application under %s", settings.app_path)

    middleware = [
        Middleware(CorrelationIdMiddleware),
        Middleware(
            SessionMiddleware,
            secret_key=settings.session_secret,
            session_cookie=SESSION_COOKIE,
            max_age=settings.session_max_age,
            same_site=settings.session_same_site,
            https_only=settings.session_https_only,
        ),
    ]

    app = Starlette(routes=routes, middleware=middleware)
    app.state.settings = settings
    if settings.consumer_key is None:
        logger.info("LTI_CONSUMER_KEY not set – any oauth_consumer_key is accepted")
    return app
