"""Unit tests for the LaunchVerifier pipeline.

Launch bodies are signed by oauthlib (see ``conftest.sign_launch``) so the
verifier is checked against an independent signer.
"""

from __future__ import annotations

import base64
import hmac
import logging
from hashlib import sha1
from urllib.parse import parse_qsl, urlencode

import pytest

from lti_launch.verification.errors import (
    MalformedBodyError,
    MalformedSignatureError,
    MissingHostHeaderError,
    MissingRequiredAttributeError,
    MissingSignatureError,
    SignatureMismatchError,
    UnknownConsumerError,
    UnsupportedProtocolError,
)
from lti_launch.verification.models import LaunchRequest, SharedSecret
from lti_launch.verification.service import LaunchVerifier

LAUNCH = {
    "lti_message_type": "basic-lti-launch-request",
    "lti_version": "LTI-1p0",
    "resource_link_id": "88391-e1919-bb3456",
    "user_id": "0ae836b9-7fc9-4060-006f-27b2066ac545",
    "roles": "Instructor",
    "lis_person_name_full": "Zoë Ørsted",
    "context_id": "8213060-006f-27b2066ac545",
    "context_title": "Design of Personal Environments",
}


@pytest.fixture
def verifier() -> LaunchVerifier:
    return LaunchVerifier(SharedSecret("shh"))


def _request(
    body: str | bytes,
    *,
    path: str = "/lti",
    host: str | None = "tool.example.org",
    proto: str | None = None,
) -> LaunchRequest:
    return LaunchRequest(
        method="POST",
        host=host,
        forwarded_proto=proto,
        path_and_query=path,
        body=body.encode("utf-8") if isinstance(body, str) else body,
    )


def _replace_param(body: str, key: str, value: str | None) -> str:
    pairs = [(k, v) for k, v in _pairs(body) if k != key]
    if value is not None:
        pairs.append((key, value))
    return urlencode(pairs)


def _pairs(body: str) -> list[tuple[str, str]]:
    return parse_qsl(body, keep_blank_values=True)


# --------------------------------------------------------------------------- #
# Happy path                                                                  #
# --------------------------------------------------------------------------- #
def test_verifies_oauthlib_signed_launch(verifier: LaunchVerifier, sign_launch) -> None:
    body = sign_launch("http://tool.example.org/lti", LAUNCH)
    verified = verifier.verify(_request(body))
    assert verified.attributes.display_name == "Zoë Ørsted"
    assert verified.attributes.roles == ("Instructor",)
    assert verified.canonical.url == "http://tool.example.org/lti"
    assert "oauth_signature" not in verified.params
    assert verified.params["oauth_consumer_key"] == "key"


def test_known_vector_launch(verifier: LaunchVerifier) -> None:
    params = {
        "oauth_consumer_key": "key",
        "oauth_nonce": "abc",
        "oauth_timestamp": "100",
        "lis_person_name_full": "Ada Lovelace",
    }
    base = (
        "POST&https%3A%2F%2Fexample.org%2Flti&"
        "lis_person_name_full%3DAda%2520Lovelace%26oauth_consumer_key%3Dkey"
        "%26oauth_nonce%3Dabc%26oauth_timestamp%3D100"
    )
    signature = base64.b64encode(hmac.new(b"shh&", base.encode(), sha1).digest()).decode()
    body = urlencode({**params, "oauth_signature": signature})

    verified = verifier.verify(_request(body, host="example.org", proto="https"))
    assert verified.canonical.base_string == base
    assert verified.attributes.display_name == "Ada Lovelace"

    wrong = base64.b64encode(hmac.new(b"shh&", (base + "x").encode(), sha1).digest()).decode()
    with pytest.raises(SignatureMismatchError):
        verifier.verify(_request(_replace_param(body, "oauth_signature", wrong), host="example.org", proto="https"))


def test_parameter_order_does_not_matter(verifier: LaunchVerifier, sign_launch) -> None:
    body = sign_launch("http://tool.example.org/lti", LAUNCH)
    reordered = urlencode(list(reversed(_pairs(body))))
    first = verifier.verify(_request(body))
    second = verifier.verify(_request(reordered))
    assert first.canonical == second.canonical


def test_query_parameters_are_signed(verifier: LaunchVerifier, sign_launch) -> None:
    body = sign_launch("http://tool.example.org/lti?course=42", LAUNCH)
    verified = verifier.verify(_request(body, path="/lti?course=42"))
    assert verified.params["course"] == "42"
    assert verified.canonical.url == "http://tool.example.org/lti"

    with pytest.raises(SignatureMismatchError):
        verifier.verify(_request(body, path="/lti?course=43"))


def test_forwarded_proto_must_match_signed_scheme(verifier: LaunchVerifier, sign_launch) -> None:
    body = sign_launch("https://tool.example.org/lti", LAUNCH)
    verifier.verify(_request(body, proto="https"))
    with pytest.raises(SignatureMismatchError):
        verifier.verify(_request(body))


def test_original_path_must_match(verifier: LaunchVerifier, sign_launch) -> None:
    body = sign_launch("http://tool.example.org/tools/lti", LAUNCH)
    verifier.verify(_request(body, path="/tools/lti"))
    with pytest.raises(SignatureMismatchError):
        verifier.verify(_request(body, path="/lti"))


def test_configured_consumer_key(sign_launch) -> None:
    verifier = LaunchVerifier(SharedSecret("shh"), consumer_key="lms")
    verifier.verify(_request(sign_launch("http://tool.example.org/lti", LAUNCH, key="lms")))
    with pytest.raises(UnknownConsumerError):
        verifier.verify(_request(sign_launch("http://tool.example.org/lti", LAUNCH, key="other")))


# --------------------------------------------------------------------------- #
# Failure kinds                                                               #
# --------------------------------------------------------------------------- #
def test_wrong_secret(sign_launch) -> None:
    body = sign_launch("http://tool.example.org/lti", LAUNCH, secret="other")
    with pytest.raises(SignatureMismatchError):
        LaunchVerifier(SharedSecret("shh")).verify(_request(body))


def test_tampered_attribute(verifier: LaunchVerifier, sign_launch) -> None:
    body = sign_launch("http://tool.example.org/lti", LAUNCH)
    with pytest.raises(SignatureMismatchError):
        verifier.verify(_request(_replace_param(body, "lis_person_name_full", "Mallory")))


def test_missing_signature(verifier: LaunchVerifier, sign_launch) -> None:
    body = sign_launch("http://tool.example.org/lti", LAUNCH)
    with pytest.raises(MissingSignatureError):
        verifier.verify(_request(_replace_param(body, "oauth_signature", None)))


def test_malformed_signature(verifier: LaunchVerifier, sign_launch) -> None:
    body = sign_launch("http://tool.example.org/lti", LAUNCH)
    with pytest.raises(MalformedSignatureError):
        verifier.verify(_request(_replace_param(body, "oauth_signature", "%%%not-base64")))


def test_malformed_body(verifier: LaunchVerifier) -> None:
    with pytest.raises(MalformedBodyError):
        verifier.verify(_request(b"lis_person_name_full=\xff&oauth_signature=AA%3D%3D"))


def test_missing_host(verifier: LaunchVerifier, sign_launch) -> None:
    body = sign_launch("http://tool.example.org/lti", LAUNCH)
    with pytest.raises(MissingHostHeaderError):
        verifier.verify(_request(body, host=None))


def test_missing_display_name_after_valid_signature(verifier: LaunchVerifier, sign_launch) -> None:
    launch = {k: v for k, v in LAUNCH.items() if k != "lis_person_name_full"}
    body = sign_launch("http://tool.example.org/lti", launch)
    with pytest.raises(MissingRequiredAttributeError):
        verifier.verify(_request(body))


@pytest.mark.parametrize(
    ("key", "value"),
    [("oauth_signature_method", "PLAINTEXT"), ("oauth_version", "2.0")],
)
def test_unsupported_protocol(verifier: LaunchVerifier, sign_launch, key: str, value: str) -> None:
    body = sign_launch("http://tool.example.org/lti", LAUNCH)
    with pytest.raises(UnsupportedProtocolError):
        verifier.verify(_request(_replace_param(body, key, value)))


def test_rejections_never_log_secrets(verifier: LaunchVerifier, sign_launch, caplog) -> None:
    body = sign_launch("http://tool.example.org/lti", LAUNCH, secret="other")
    signature = dict(_pairs(body))["oauth_signature"]
    caplog.set_level(logging.DEBUG, logger="lti-launch")
    with pytest.raises(SignatureMismatchError):
        verifier.verify(_request(body), correlation_id="corr-1")
    text = caplog.text
    assert "signature_mismatch" in text
    assert signature not in text
    assert "shh" not in text
    assert "POST&" not in text
