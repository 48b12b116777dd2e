"""Form decoding and RFC 5849 §3.4.1.3.2 parameter normalization."""

from __future__ import annotations

import logging
from typing import Final, Iterable
from urllib.parse import parse_qsl

from lti_launch.verification.encoding import percent_encode
from lti_launch.verification.errors import (
    MalformedBodyError,
    MalformedSignatureError,
    MissingSignatureError,
)
from lti_launch.verification.models import NormalizedParameters

_LOG = logging.getLogger("lti-launch.verification.params")

SIGNATURE_PARAM: Final[str] = "oauth_signature"


def parse_form_pairs(data: bytes) -> list[tuple[str, str]]:
    """Decode ``application/x-www-form-urlencoded`` bytes into ordered pairs.

    Blank values are kept (``a=&b=1`` yields ``("a", "")``).  Both the raw
    bytes and any percent-escaped sequences must be valid UTF-8.

    Raises
    ------
    MalformedBodyError
        If the data cannot be decoded as UTF-8.
    """
    if not data:
        return []
    try:
        text = data.decode("utf-8")
        return parse_qsl(text, keep_blank_values=True, encoding="utf-8", errors="strict")
    except UnicodeDecodeError:
        raise MalformedBodyError() from None


def normalize_parameters(pairs: Iterable[tuple[str, str]]) -> NormalizedParameters:
    """Sort *pairs*, pull out ``oauth_signature`` and build the encoded string.

    Pairs are ordered by encoded name, then encoded value, comparing octets.
    For names and values made only of unreserved characters this is plain
    ordinal ordering of the raw text.

    Raises
    ------
    MissingSignatureError
        If no ``oauth_signature`` pair is present.
    MalformedSignatureError
        If ``oauth_signature`` is present more than once.
    """
    signatures: list[str] = []
    encoded_pairs: list[tuple[str, str, str, str]] = []
    for key, value in pairs:
        if key == SIGNATURE_PARAM:
            signatures.append(value)
            continue
        encoded_pairs.append((percent_encode(key), percent_encode(value), key, value))

    if not signatures:
        raise MissingSignatureError()
    if len(signatures) > 1:
        _LOG.debug("Rejecting request with %d oauth_signature values", len(signatures))
        raise MalformedSignatureError("oauth_signature supplied more than once.")

    encoded_pairs.sort(key=lambda item: (item[0], item[1]))
    return NormalizedParameters(
        signature=signatures[0],
        encoded="&".join(f"{ek}={ev}" for ek, ev, _, _ in encoded_pairs),
        pairs=tuple((k, v) for _, _, k, v in encoded_pairs),
    )
