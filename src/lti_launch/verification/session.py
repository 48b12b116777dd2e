"""Launch attribute extraction and session state helpers.

Everything here is pure: the session value is returned to the caller, which
owns transport (signed cookies) and persistence.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Final, Mapping

from lti_launch.verification.errors import MissingRequiredAttributeError
from lti_launch.verification.models import LaunchAttributes, LaunchSession

DISPLAY_NAME_PARAM: Final[str] = "lis_person_name_full"


def _optional(params: Mapping[str, str], key: str) -> str | None:
    value = params.get(key)
    return value if value else None


def _roles(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(role.strip() for role in raw.split(",") if role.strip())


def extract_launch_attributes(params: Mapping[str, str]) -> LaunchAttributes:
    """Pull the typed launch attributes out of a verified parameter mapping.

    Raises
    ------
    MissingRequiredAttributeError
        If the display name is absent or blank.
    """
    display_name = (params.get(DISPLAY_NAME_PARAM) or "").strip()
    if not display_name:
        raise MissingRequiredAttributeError(DISPLAY_NAME_PARAM)

    return LaunchAttributes(
        display_name=display_name,
        user_id=_optional(params, "user_id"),
        roles=_roles(params.get("roles")),
        context_id=_optional(params, "context_id"),
        context_title=_optional(params, "context_title"),
        resource_link_id=_optional(params, "resource_link_id"),
        tool_consumer_instance_guid=_optional(params, "tool_consumer_instance_guid"),
        return_url=_optional(params, "launch_presentation_return_url"),
    )


def establish_session(params: Mapping[str, str]) -> LaunchSession:
    """Return a fresh session (visit counter at zero) for a verified launch."""
    attributes = extract_launch_attributes(params)
    return LaunchSession(display_name=attributes.display_name, visit_count=0)


def increment_visits(session: LaunchSession) -> LaunchSession:
    return replace(session, visit_count=session.visit_count + 1)
