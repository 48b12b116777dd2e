"""Structured logging helpers for launch verification.

This module purposefully restricts **which** contextual attributes are attached
to log records in order to avoid accidentally leaking secrets.  All helpers
ONLY inject the following *non-sensitive* fields:

- ``consumer_key``   – The ``oauth_consumer_key`` (first 6 chars kept)
- ``nonce``          – The ``oauth_nonce`` (first 6 chars kept)
- ``correlation_id`` – Request correlation id set by the HTTP layer

Usage
-----
>>> from lti_launch.verification.log_utils import get_launch_logger
>>> log = get_launch_logger(consumer_key="lms.example.org", correlation_id="c0ffee")
>>> log.info("Launch verified")
INFO lti-launch.verification consumer_key=lms.ex correlation_id=c0ffee ...

The adapter is a thin wrapper around :class:`logging.LoggerAdapter`.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, MutableMapping

_TRUNCATED_KEYS = ("consumer_key", "nonce")


class _LaunchLoggerAdapter(logging.LoggerAdapter):
    """Inject whitelisted launch context into log records."""

    extra_keys = ("consumer_key", "nonce", "correlation_id")

    def __init__(self, logger: logging.Logger, extra: Mapping[str, Any] | None = None):
        extra_clean: MutableMapping[str, Any] = {}
        for k in self.extra_keys:
            if not extra or extra.get(k) is None:
                continue
            if k in _TRUNCATED_KEYS:
                extra_clean[k] = str(extra[k])[:6]
            else:
                extra_clean[k] = extra[k]
        super().__init__(logger, extra_clean)

    def process(self, msg: str, kwargs: MutableMapping[str, Any]):
        if "extra" not in kwargs or kwargs["extra"] is None:
            kwargs["extra"] = {}
        # merge but do not overwrite call-site provided extras
        for k, v in self.extra.items():
            kwargs["extra"].setdefault(k, v)
        return msg, kwargs


def get_launch_logger(
    *,
    base_logger_name: str = "lti-launch.verification",
    consumer_key: str | None = None,
    nonce: str | None = None,
    correlation_id: str | None = None,
) -> logging.LoggerAdapter:
    """Return a LoggerAdapter pre-filled with launch context."""
    logger = logging.getLogger(base_logger_name)
    return _LaunchLoggerAdapter(
        logger,
        {
            "consumer_key": consumer_key,
            "nonce": nonce,
            "correlation_id": correlation_id,
        },
    )
