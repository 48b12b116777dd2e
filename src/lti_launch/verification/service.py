"""LaunchVerifier – the request-to-verdict pipeline.

HTTP handlers in ``lti_launch.servers.lti`` hand over a
:class:`~lti_launch.verification.models.LaunchRequest` and get back either a
:class:`~lti_launch.verification.models.VerifiedLaunch` or a
:class:`~lti_launch.verification.errors.LaunchError`.

Pipeline::

    body + query  ->  normalize  ->  protocol checks  ->  canonical request
                  ->  decode signature  ->  HMAC verify  ->  typed attributes

Every stage is synchronous and touches no shared mutable state; one verifier
instance serves any number of concurrent requests.  Nonce and timestamp
freshness are not checked.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Final

from lti_launch.verification.base_string import build_canonical_request, split_path_and_query
from lti_launch.verification.errors import (
    LaunchError,
    UnknownConsumerError,
    UnsupportedProtocolError,
)
from lti_launch.verification.log_utils import get_launch_logger
from lti_launch.verification.models import (
    LaunchRequest,
    SharedSecret,
    VerifiedLaunch,
)
from lti_launch.verification.params import normalize_parameters, parse_form_pairs
from lti_launch.verification.session import extract_launch_attributes
from lti_launch.verification.signature import decode_signature, verify_signature

_LOG = logging.getLogger("lti-launch.verification.service")

SIGNATURE_METHOD: Final[str] = "HMAC-SHA1"
OAUTH_VERSION: Final[str] = "1.0"


class LaunchVerifier:
    """Verify OAuth 1.0 HMAC-SHA1 signed LTI launches against one secret."""

    def __init__(self, secret: SharedSecret, *, consumer_key: str | None = None) -> None:
        self._secret = secret
        self._consumer_key = consumer_key or None

    # ------------------------------------------------------------------ #
    # Public API called by HTTP handlers                                 #
    # ------------------------------------------------------------------ #
    def verify(
        self, request: LaunchRequest, *, correlation_id: str | None = None
    ) -> VerifiedLaunch:
        """Verify *request* and return the typed launch on success.

        Raises
        ------
        LaunchError
            One of its subclasses, naming the first stage that failed.
        """
        try:
            return self._verify(request, correlation_id)
        except LaunchError as exc:
            _LOG.debug(
                "Launch rejected kind=%s correlation_id=%s",
                exc.kind,
                correlation_id or "-",
            )
            raise

    # ---------------- internal helpers --------------------------------- #
    def _verify(self, request: LaunchRequest, correlation_id: str | None) -> VerifiedLaunch:
        _, query = split_path_and_query(request.path_and_query)
        pairs = parse_form_pairs(request.body)
        pairs.extend(parse_form_pairs(query.encode("utf-8")))

        normalized = normalize_parameters(pairs)
        params = normalized.as_mapping()
        log = get_launch_logger(
            consumer_key=params.get("oauth_consumer_key"),
            nonce=params.get("oauth_nonce"),
            correlation_id=correlation_id,
        )
        self._check_protocol(params)

        canonical = build_canonical_request(
            request.method,
            request.forwarded_proto,
            request.host,
            request.path_and_query,
            normalized.encoded,
        )
        signature = decode_signature(normalized.signature)
        verify_signature(canonical.base_string, signature, self._secret)
        log.debug("Signature verified for %s %s", canonical.method, canonical.url)

        attributes = extract_launch_attributes(params)
        log.info("Launch verified (%d parameters)", len(normalized.pairs))
        return VerifiedLaunch(
            canonical=canonical,
            params=MappingProxyType(params),
            attributes=attributes,
        )

    def _check_protocol(self, params: dict[str, str]) -> None:
        method = params.get("oauth_signature_method")
        if method is not None and method.upper() != SIGNATURE_METHOD:
            raise UnsupportedProtocolError(f"Unsupported signature method {method!r}.")

        version = params.get("oauth_version")
        if version is not None and version != OAUTH_VERSION:
            raise UnsupportedProtocolError(f"Unsupported OAuth version {version!r}.")

        if self._consumer_key is not None and params.get("oauth_consumer_key") != self._consumer_key:
            raise UnknownConsumerError()
