"""LTI launch and session endpoints.

Handlers are intentionally thin:

1. Collect the HTTP-layer inputs the core needs.
2. Delegate verification to ``LaunchVerifier``.
3. Store or read the session and return a plain-text response.

SECURITY NOTE
-------------
• Every launch failure produces the same ``401`` body; only the logs carry the
  failure kind.
• The shared secret, the supplied signature and the base string are never
  logged or echoed.
"""

from __future__ import annotations

import logging
from typing import Final
from urllib.parse import quote, quote_from_bytes

from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.routing import Route

from lti_launch.verification.errors import LaunchError
from lti_launch.verification.models import LaunchRequest, LaunchSession
from lti_launch.verification.service import LaunchVerifier
from lti_launch.verification.session import establish_session, increment_visits

_LOG = logging.getLogger("lti-launch.servers.lti")

UNAUTHORIZED_BODY: Final[str] = "Unauthorized"

# Printable ASCII that may appear unescaped in a request target; "%" keeps
# existing escapes intact.
_PATH_SAFE: Final[str] = "/:@!$&'()*+,;=-._~%"
_QUERY_SAFE: Final[str] = _PATH_SAFE + "?"


def original_path_and_query(request: Request) -> str:
    """Return the request target as the client sent it.

    ``raw_path`` is set by the server and is not rewritten when the
    application is mounted under a prefix, so it still holds the path the
    platform signed.
    """
    raw_path: bytes | None = request.scope.get("raw_path")
    if raw_path:
        path = quote_from_bytes(raw_path.split(b"?", 1)[0], safe=_PATH_SAFE)
    else:
        path = quote(request.url.path, safe=_PATH_SAFE)
    query: bytes = request.scope.get("query_string") or b""
    if query:
        return f"{path}?{quote_from_bytes(query, safe=_QUERY_SAFE)}"
    return path


def _unauthorized(request: Request) -> Response:
    request.session.clear()
    return PlainTextResponse(UNAUTHORIZED_BODY, status_code=401)


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #
def lti_routes(verifier: LaunchVerifier) -> list[Route]:
    """Return the launch and session routes bound to *verifier*."""

    # ----- POST /lti ------------------------------------------------------- #
    async def _launch(request: Request) -> Response:
        correlation_id = getattr(request.state, "correlation_id", None)
        launch = LaunchRequest(
            method=request.method,
            host=request.headers.get("host"),
            forwarded_proto=request.headers.get("x-forwarded-proto"),
            path_and_query=original_path_and_query(request),
            body=await request.body(),
        )

        try:
            verified = verifier.verify(launch, correlation_id=correlation_id)
            session = establish_session(verified.params)
        except LaunchError as exc:
            _LOG.warning(
                "LTI launch refused kind=%s correlation_id=%s",
                exc.kind,
                correlation_id or "-",
            )
            return _unauthorized(request)

        request.session.clear()
        request.session.update(session.to_payload())
        _LOG.info(
            "LTI launch accepted user_id=%s roles=%s correlation_id=%s",
            verified.attributes.user_id or "-",
            ",".join(verified.attributes.roles) or "-",
            correlation_id or "-",
        )
        return PlainTextResponse(f"Welcome, {session.display_name}")

    # ----- GET / ----------------------------------------------------------- #
    async def _index(request: Request) -> Response:
        session = LaunchSession.from_payload(request.session)
        if session is None:
            return PlainTextResponse("Hello, World!")

        session = increment_visits(session)
        request.session.update(session.to_payload())
        return PlainTextResponse(
            f"Hello, {session.display_name}! Visits: {session.visit_count}"
        )

    return [
        Route("/", _index, methods=["GET"]),
        Route("/lti", _launch, methods=["POST"]),
    ]
