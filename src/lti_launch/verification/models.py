"""Typed, immutable records used by the launch verification core."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from lti_launch.verification.encoding import percent_encode


@dataclass(frozen=True, slots=True)
class SharedSecret:
    """Consumer secret shared with the learning platform.

    Built once at process start and passed by reference to every
    verification; the value never appears in ``repr`` output.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("shared secret must not be empty")

    def __repr__(self) -> str:
        return "SharedSecret(value='****')"


@dataclass(frozen=True, slots=True)
class LaunchRequest:
    """The slice of an inbound HTTP request the core needs.

    ``path_and_query`` must be the path exactly as the platform addressed it,
    before any reverse-proxy or mount prefix stripping.
    """

    method: str
    host: str | None
    path_and_query: str
    body: bytes
    forwarded_proto: str | None = None


@dataclass(frozen=True, slots=True)
class NormalizedParameters:
    """Output of the parameter normalizer."""

    signature: str
    encoded: str
    pairs: tuple[tuple[str, str], ...]

    def as_mapping(self) -> dict[str, str]:
        """Return the sorted pairs as a dict (last duplicate wins)."""
        return dict(self.pairs)


@dataclass(frozen=True, slots=True)
class CanonicalRequest:
    """Method, base string URI and normalized parameter string."""

    method: str
    url: str
    normalized_params: str

    @property
    def base_string(self) -> str:
        return "&".join(
            (
                self.method.upper(),
                percent_encode(self.url),
                percent_encode(self.normalized_params),
            )
        )


@dataclass(frozen=True, slots=True)
class LaunchAttributes:
    """Launch fields the tool reads; everything else is opaque pass-through."""

    display_name: str
    user_id: str | None = None
    roles: tuple[str, ...] = ()
    context_id: str | None = None
    context_title: str | None = None
    resource_link_id: str | None = None
    tool_consumer_instance_guid: str | None = None
    return_url: str | None = None


@dataclass(frozen=True, slots=True)
class LaunchSession:
    """Session state handed to the cookie layer after a successful launch."""

    display_name: str
    visit_count: int = 0

    def to_payload(self) -> dict[str, Any]:
        return {"display_name": self.display_name, "visit_count": self.visit_count}

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> LaunchSession | None:
        """Rebuild a session from cookie data, ``None`` if absent or malformed."""
        if not payload:
            return None
        name = payload.get("display_name")
        count = payload.get("visit_count", 0)
        if not isinstance(name, str) or not name:
            return None
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            return None
        return cls(display_name=name, visit_count=count)


@dataclass(frozen=True, slots=True)
class VerifiedLaunch:
    """Result of a successful verification."""

    canonical: CanonicalRequest
    params: Mapping[str, str]
    attributes: LaunchAttributes
