"""Process configuration read from environment variables.

Settings are read once at startup into an immutable :class:`LaunchSettings`
that is shared by reference with every request handler.

Environment variables
---------------------
LTI_SHARED_SECRET
    Consumer secret shared with the learning platform (required).
LTI_CONSUMER_KEY
    Expected ``oauth_consumer_key``; any key is accepted when unset.
APP_PATH
    Path prefix the application is mounted under (default ``/``).
LTI_SESSION_SECRET
    Key signing the session cookie.  A transient value is generated when
    unset, which invalidates sessions on restart.
LTI_SESSION_MAX_AGE
    Session cookie lifetime in seconds (default 3600).
LTI_SESSION_HTTPS_ONLY
    Mark the session cookie ``Secure`` (default false).
LTI_SESSION_SAME_SITE
    ``lax`` (default), ``strict`` or ``none``.
LTI_HOST / LTI_PORT
    Listen address (default ``0.0.0.0:3000``).
LTI_LOG_LEVEL
    Log level name (default ``INFO``).
"""

from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass, field
from typing import Final, Mapping, Tuple

from lti_launch.verification.models import SharedSecret

logger = logging.getLogger("lti-launch.utils.environment")

_TRUTHY: Final[Tuple[str, ...]] = ("true", "1", "yes", "y", "on")
_SAME_SITE: Final[Tuple[str, ...]] = ("lax", "strict", "none")


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in _TRUTHY


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _normalize_app_path(raw: str | None) -> str:
    """Return ``/`` or a prefix with a leading and no trailing slash."""
    path = (raw or "/").strip()
    if not path or path == "/":
        return "/"
    return "/" + path.strip("/")


@dataclass(frozen=True)
class LaunchSettings:
    """Immutable process configuration."""

    shared_secret: SharedSecret
    session_secret: str = field(repr=False)
    consumer_key: str | None = None
    app_path: str = "/"
    session_max_age: int = 3600
    session_https_only: bool = False
    session_same_site: str = "lax"
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> LaunchSettings:
        """Build settings from *env* (defaults to ``os.environ``).

        Raises
        ------
        ValueError
            If ``LTI_SHARED_SECRET`` is missing or a value cannot be parsed.
        """
        env = os.environ if env is None else env

        secret = env.get("LTI_SHARED_SECRET")
        if not secret:
            raise ValueError("LTI_SHARED_SECRET must be set")

        session_secret = env.get("LTI_SESSION_SECRET")
        if not session_secret:
            # Ephemeral key – sessions do not survive a process restart
            session_secret = uuid.uuid4().hex
            logger.warning(
                "Environment variable LTI_SESSION_SECRET not set – generated transient secret. "
                "Sessions will be invalidated after process restart."
            )

        same_site = (env.get("LTI_SESSION_SAME_SITE") or "lax").strip().lower()
        if same_site not in _SAME_SITE:
            raise ValueError(f"LTI_SESSION_SAME_SITE must be one of {', '.join(_SAME_SITE)}")

        max_age = _int(env, "LTI_SESSION_MAX_AGE", 3600)
        if max_age <= 0:
            raise ValueError("LTI_SESSION_MAX_AGE must be positive")

        return cls(
            shared_secret=SharedSecret(secret),
            session_secret=session_secret,
            consumer_key=env.get("LTI_CONSUMER_KEY") or None,
            app_path=_normalize_app_path(env.get("APP_PATH")),
            session_max_age=max_age,
            session_https_only=_truthy(env.get("LTI_SESSION_HTTPS_ONLY")),
            session_same_site=same_site,
            host=env.get("LTI_HOST") or "0.0.0.0",
            port=_int(env, "LTI_PORT", 3000),
            log_level=(env.get("LTI_LOG_LEVEL") or "INFO").strip().upper(),
        )
