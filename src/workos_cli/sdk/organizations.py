"""Organization methods - create, update, get, list, delete."""

from __future__ import annotations

from typing import Optional

from ..interfaces import OrganizationClient
from ..models import ListResponse, Organization
from .base import WorkOSClientBase, path_segment


class OrganizationsMixin(OrganizationClient):
    """Mixin implementing OrganizationClient over the REST API."""

    def create_organization(
        self: WorkOSClientBase,
        name: str,
        domain_data: list[dict[str, str]],
    ) -> Organization:
        """Create an organization.

        Args:
            name: Display name.
            domain_data: ``[{"domain": "foo-corp.com", "state": "pending"}]``.
        """
        body = self._request(
            "POST",
            "/organizations",
            "creating organization",
            json={"name": name, "domain_data": domain_data},
        )
        return Organization.model_validate(body)

    def update_organization(
        self: WorkOSClientBase,
        organization_id: str,
        name: str,
        domain_data: Optional[list[dict[str, str]]] = None,
    ) -> Organization:
        payload: dict = {"name": name}
        if domain_data:
            payload["domain_data"] = domain_data
        body = self._request(
            "PUT",
            f"/organizations/{path_segment(organization_id)}",
            "updating organization",
            json=payload,
        )
        return Organization.model_validate(body)

    def get_organization(self: WorkOSClientBase, organization_id: str) -> Organization:
        body = self._request("GET", f"/organizations/{path_segment(organization_id)}", "getting organization")
        return Organization.model_validate(body)

    def list_organizations(
        self: WorkOSClientBase,
        domains: Optional[list[str]] = None,
        limit: int = 10,
        before: str = "",
        after: str = "",
        order: str = "",
    ) -> ListResponse[Organization]:
        body = self._request(
            "GET",
            "/organizations",
            "listing organizations",
            params={
                "domains": domains or [],
                "limit": limit,
                "before": before,
                "after": after,
                "order": order,
            },
        )
        return ListResponse[Organization].model_validate(body or {})

    def delete_organization(self: WorkOSClientBase, organization_id: str) -> None:
        self._request("DELETE", f"/organizations/{path_segment(organization_id)}", "deleting organization")


__all__ = ["OrganizationsMixin"]
