"""WorkOS REST client composed from per-resource mixins.

The client implements every capability interface in ``workos_cli.interfaces``
over a single ``httpx.Client``.
"""

from __future__ import annotations

from typing import Optional

import httpx

from ..config import CLISettings
from ..profiles import Profile
from .base import WorkOSClientBase, error_from_response
from .fga import AuthorizationMixin
from .oauth import OAuthCredentialsMixin
from .organizations import OrganizationsMixin


class WorkOSClient(
    OrganizationsMixin,
    AuthorizationMixin,
    OAuthCredentialsMixin,
    WorkOSClientBase,
):
    """Client for the WorkOS REST API.

    Example:
        with WorkOSClient(api_key="sk_test_...") as client:
            org = client.get_organization("org_01H...")
    """

    pass


def client_for_profile(
    profile: Profile,
    settings: Optional[CLISettings] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> WorkOSClient:
    """Build a client bound to a profile's credential and endpoint.

    An empty profile endpoint falls back to ``settings.default_endpoint``.
    """
    settings = settings or CLISettings()
    return WorkOSClient(
        api_key=profile.api_key,
        endpoint=profile.endpoint or settings.default_endpoint,
        timeout=settings.request_timeout,
        transport=transport,
    )


__all__ = [
    "WorkOSClient",
    "WorkOSClientBase",
    "client_for_profile",
    "error_from_response",
]
