"""OAuth credential methods - list and create."""

from __future__ import annotations

from ..interfaces import OAuthCredentialClient
from ..models import ListResponse, OAuthCredential
from .base import WorkOSClientBase


class OAuthCredentialsMixin(OAuthCredentialClient):
    """Mixin implementing OAuthCredentialClient over the REST API."""

    def list_oauth_credentials(self: WorkOSClientBase) -> ListResponse[OAuthCredential]:
        body = self._request("GET", "/oauth_credentials", "listing oauth credentials")
        return ListResponse[OAuthCredential].model_validate(body or {})

    def create_oauth_credential(self: WorkOSClientBase, credential_type: str) -> OAuthCredential:
        body = self._request(
            "POST",
            "/oauth_credentials",
            "creating oauth authentication method",
            json={"type": credential_type},
        )
        return OAuthCredential.model_validate(body)


__all__ = ["OAuthCredentialsMixin"]
