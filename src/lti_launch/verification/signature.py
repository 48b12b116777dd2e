"""HMAC-SHA1 signature verification (RFC 5849 §3.4.2).

The signing key is ``enc(consumer_secret) + "&"``: LTI launches carry no token,
so the token-secret half of the key is empty.

This module performs **no logging**; the secret, the supplied signature and
the computed digest must never reach a log record.
"""

from __future__ import annotations

import base64
import binascii
import hmac
from hashlib import sha1

from lti_launch.verification.encoding import percent_encode
from lti_launch.verification.errors import MalformedSignatureError, SignatureMismatchError
from lti_launch.verification.models import SharedSecret


def decode_signature(value: str) -> bytes:
    """Base64-decode the ``oauth_signature`` value.

    Raises
    ------
    MalformedSignatureError
        If *value* is not strict base64.
    """
    try:
        return base64.b64decode(value.encode("ascii"), validate=True)
    except (UnicodeEncodeError, binascii.Error):
        raise MalformedSignatureError() from None


def signing_key(secret: SharedSecret) -> bytes:
    return (percent_encode(secret.value) + "&").encode("utf-8")


def compute_signature(base_string: str, secret: SharedSecret) -> bytes:
    """Return the raw HMAC-SHA1 digest of *base_string*."""
    return hmac.new(signing_key(secret), base_string.encode("utf-8"), sha1).digest()


def verify_signature(base_string: str, signature: bytes, secret: SharedSecret) -> None:
    """Check *signature* against the digest of *base_string*.

    The comparison runs in constant time.

    Raises
    ------
    SignatureMismatchError
        If the digests differ.
    """
    expected = compute_signature(base_string, secret)
    if not hmac.compare_digest(expected, signature):
        raise SignatureMismatchError()
