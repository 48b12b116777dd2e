"""Signature base string construction (RFC 5849 §3.4.1).

The base string URI is rebuilt from what the *platform* saw, not from the
socket we accepted on:

* scheme  – first value of ``X-Forwarded-Proto`` when a TLS-terminating
  proxy sits in front of us, ``http`` otherwise
* authority – the ``Host`` header, verbatim
* path – the original request path, before any mount prefix is stripped

Query parameters are merged into the signed parameter set by the caller and
therefore left out of the URI, as §3.4.1.2 and §3.4.1.3.1 require.
"""

from __future__ import annotations

from typing import Final

from lti_launch.verification.errors import MissingHostHeaderError
from lti_launch.verification.models import CanonicalRequest

_DEFAULT_SCHEME: Final[str] = "http"


def _scheme(forwarded_proto: str | None) -> str:
    if not forwarded_proto:
        return _DEFAULT_SCHEME
    # Chained proxies append their own value: "https, http".
    first = forwarded_proto.split(",", 1)[0].strip().lower()
    return first or _DEFAULT_SCHEME


def split_path_and_query(path_and_query: str) -> tuple[str, str]:
    """Split ``/path?query`` into ``("/path", "query")``; fragments are dropped."""
    without_fragment = path_and_query.split("#", 1)[0]
    path, _, query = without_fragment.partition("?")
    return path or "/", query


def base_string_uri(forwarded_proto: str | None, host: str | None, path_and_query: str) -> str:
    """Return ``scheme://host/path`` for the signature base string.

    Raises
    ------
    MissingHostHeaderError
        If *host* is ``None`` or blank.
    """
    if host is None or not host.strip():
        raise MissingHostHeaderError()
    path, _ = split_path_and_query(path_and_query)
    return f"{_scheme(forwarded_proto)}://{host.strip()}{path}"


def build_canonical_request(
    method: str,
    forwarded_proto: str | None,
    host: str | None,
    path_and_query: str,
    encoded_params: str,
) -> CanonicalRequest:
    return CanonicalRequest(
        method=method.upper(),
        url=base_string_uri(forwarded_proto, host, path_and_query),
        normalized_params=encoded_params,
    )


def build_base_string(
    method: str,
    forwarded_proto: str | None,
    host: str | None,
    path_and_query: str,
    encoded_params: str,
) -> str:
    """Return ``METHOD&enc(url)&enc(params)``.

    *encoded_params* is the already-encoded ``k=v&k=v`` string from
    :func:`~lti_launch.verification.params.normalize_parameters`; it is
    encoded a second time here as one opaque token.
    """
    return build_canonical_request(
        method, forwarded_proto, host, path_and_query, encoded_params
    ).base_string
