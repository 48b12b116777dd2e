"""Shared fixtures: an oauthlib-backed reference signer for launch requests."""

from __future__ import annotations

from typing import Callable, Mapping

import pytest
from oauthlib.oauth1 import SIGNATURE_HMAC_SHA1, SIGNATURE_TYPE_BODY, Client

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

SignLaunch = Callable[..., str]


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def sign_launch() -> SignLaunch:
    """Return ``sign(uri, params, *, key, secret, method) -> form body``.

    oauthlib is independent of the code under test and adds
    ``oauth_nonce``, ``oauth_timestamp``, ``oauth_version``,
    ``oauth_signature_method`` and ``oauth_signature`` to the body.
    """

    def _sign(
        uri: str,
        params: Mapping[str, str],
        *,
        key: str = "key",
        secret: str = "shh",
        method: str = "POST",
    ) -> str:
        client = Client(
            key,
            client_secret=secret,
            signature_method=SIGNATURE_HMAC_SHA1,
            signature_type=SIGNATURE_TYPE_BODY,
        )
        _, _, body = client.sign(
            uri,
            http_method=method,
            body=list(params.items()),
            headers={"Content-Type": FORM_CONTENT_TYPE},
        )
        return body

    return _sign
