"""Exception types raised by the launch verification core.

Only lightweight, **data-carrying** exceptions live here so that the HTTP layer
can collapse them into a single unauthorized response while logs keep the
distinct failure ``kind``.

None of these exceptions ever carry the shared secret, the supplied signature
or the signature base string.
"""

from __future__ import annotations

from typing import ClassVar


class LaunchError(Exception):
    """Base class for every expected, request-scoped launch failure."""

    kind: ClassVar[str] = "launch_error"
    default_message: ClassVar[str] = "Launch rejected."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    def to_payload(self) -> dict[str, str]:
        """Return a JSON-serialisable payload **without secrets**."""
        return {"error": self.kind, "message": str(self)}


class MalformedBodyError(LaunchError):
    """The form body (or query string) is not valid UTF-8 form data."""

    kind = "malformed_body"
    default_message = "Request body is not valid form-encoded UTF-8."


class MissingSignatureError(LaunchError):
    """No ``oauth_signature`` parameter was supplied."""

    kind = "missing_signature"
    default_message = "oauth_signature parameter is missing."


class MalformedSignatureError(LaunchError):
    """``oauth_signature`` is not valid base64 or was supplied twice."""

    kind = "malformed_signature"
    default_message = "oauth_signature cannot be decoded."


class MissingHostHeaderError(LaunchError):
    kind = "missing_host_header"
    default_message = "Host header is missing."


class SignatureMismatchError(LaunchError):
    kind = "signature_mismatch"
    default_message = "Signature does not match."


class UnsupportedProtocolError(LaunchError):
    """Signature method or OAuth version is not the one we verify."""

    kind = "unsupported_protocol"
    default_message = "Unsupported OAuth signature method or version."


class UnknownConsumerError(LaunchError):
    kind = "unknown_consumer"
    default_message = "Unknown oauth_consumer_key."


class MissingRequiredAttributeError(LaunchError):
    """The launch verified but lacks a field the session needs."""

    kind = "missing_required_attribute"

    def __init__(self, attribute: str, message: str | None = None) -> None:
        super().__init__(message or f"Required launch attribute {attribute!r} is missing.")
        self.attribute: str = attribute

    def to_payload(self) -> dict[str, str]:
        payload = super().to_payload()
        payload["attribute"] = self.attribute
        return payload
