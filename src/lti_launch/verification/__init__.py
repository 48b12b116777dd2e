"""LTI launch verification core.

This namespace hosts the **HTTP-agnostic** building blocks that turn an
inbound, OAuth 1.0 signed launch into a verdict and an initial session.

Sub-modules
-----------
encoding
    RFC 5849 percent-encoding.
params
    Form decoding and parameter normalization.
base_string
    Base string URI and signature base string construction.
signature
    HMAC-SHA1 signing key, digest and constant-time verification.
session
    Typed launch attribute extraction and session helpers.
service
    ``LaunchVerifier`` tying the stages together.
models
    Immutable dataclasses for requests, canonical form and sessions.
errors
    Exception types, one per failure kind.
log_utils
    Structured logging helpers (thin wrapper around :pymod:`logging`).

All public objects are re-exported here for convenience.
"""

from __future__ import annotations

from .encoding import percent_encode  # noqa: F401
from .params import normalize_parameters, parse_form_pairs  # noqa: F401
from .base_string import base_string_uri, build_base_string, build_canonical_request  # noqa: F401
from .signature import compute_signature, decode_signature, verify_signature  # noqa: F401
from .session import establish_session, extract_launch_attributes, increment_visits  # noqa: F401
from .service import LaunchVerifier  # noqa: F401
from .models import (  # noqa: F401
    CanonicalRequest,
    LaunchAttributes,
    LaunchRequest,
    LaunchSession,
    NormalizedParameters,
    SharedSecret,
    VerifiedLaunch,
)
from .errors import (  # noqa: F401
    LaunchError,
    MalformedBodyError,
    MalformedSignatureError,
    MissingHostHeaderError,
    MissingRequiredAttributeError,
    MissingSignatureError,
    SignatureMismatchError,
    UnknownConsumerError,
    UnsupportedProtocolError,
)
from .log_utils import get_launch_logger  # noqa: F401

__all__ = [
    # encoding / params
    "percent_encode",
    "parse_form_pairs",
    "normalize_parameters",
    # base string
    "base_string_uri",
    "build_base_string",
    "build_canonical_request",
    # signature
    "compute_signature",
    "decode_signature",
    "verify_signature",
    # session
    "establish_session",
    "extract_launch_attributes",
    "increment_visits",
    # service
    "LaunchVerifier",
    # models
    "CanonicalRequest",
    "LaunchAttributes",
    "LaunchRequest",
    "LaunchSession",
    "NormalizedParameters",
    "SharedSecret",
    "VerifiedLaunch",
    # errors
    "LaunchError",
    "MalformedBodyError",
    "MalformedSignatureError",
    "MissingHostHeaderError",
    "MissingRequiredAttributeError",
    "MissingSignatureError",
    "SignatureMismatchError",
    "UnknownConsumerError",
    "UnsupportedProtocolError",
    # logging helpers
    "get_launch_logger",
]
