"""Fine-grained authorization methods.

Covers resource types, resources, warrants (relation assignments), checks,
queries and schema conversion under ``/fga/v1``.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from ..interfaces import AuthorizationClient
from ..models import (
    CheckResponse,
    ConvertSchemaResponse,
    ListResponse,
    QueryResult,
    Resource,
    ResourceType,
    WarrantResponse,
)
from ..tuples import AssignmentRequest, CheckRequest, WarrantOp
from .base import WorkOSClientBase, path_segment

FGA_PREFIX = "/fga/v1"
WARRANT_TOKEN_HEADER = "Warrant-Token"


def _warrant_token_headers(warrant_token: str) -> Optional[dict[str, str]]:
    return {WARRANT_TOKEN_HEADER: warrant_token} if warrant_token else None


class AuthorizationMixin(AuthorizationClient):
    """Mixin implementing AuthorizationClient over the REST API."""

    # ---- Resource types ----------------------------------------------------

    def list_resource_types(
        self: WorkOSClientBase,
        limit: int = 10,
        before: str = "",
        after: str = "",
        order: str = "",
    ) -> ListResponse[ResourceType]:
        body = self._request(
            "GET",
            f"{FGA_PREFIX}/resource-types",
            "listing resource types",
            params={"limit": limit, "before": before, "after": after, "order": order},
        )
        return ListResponse[ResourceType].model_validate(body or {})

    def batch_update_resource_types(
        self: WorkOSClientBase,
        resource_types: list[dict[str, Any]],
    ) -> list[ResourceType]:
        """Replace the full set of resource types.

        Types present in ``resource_types`` are created or updated, all others
        are deleted. The API applies the batch atomically.
        """
        body = self._request(
            "PUT",
            f"{FGA_PREFIX}/resource-types",
            "updating resource types",
            json=resource_types,
        )
        return [ResourceType.model_validate(rt) for rt in body or []]

    # ---- Warrants & checks ---------------------------------------------------

    def write_warrant(self: WorkOSClientBase, request: AssignmentRequest) -> WarrantResponse:
        operation = "creating warrant" if request.op == WarrantOp.CREATE else "removing relation"
        body = self._request("POST", f"{FGA_PREFIX}/warrants", operation, json=request.to_payload())
        return WarrantResponse.model_validate(body or {})

    def check(self: WorkOSClientBase, request: CheckRequest) -> CheckResponse:
        body = self._request(
            "POST",
            f"{FGA_PREFIX}/check",
            "evaluating check",
            json=request.to_payload(),
            headers=_warrant_token_headers(request.warrant_token),
        )
        return CheckResponse.model_validate(body)

    def query(
        self: WorkOSClientBase,
        query: str,
        context: Optional[dict[str, Any]] = None,
        limit: int = 10,
        before: str = "",
        after: str = "",
        order: str = "",
        warrant_token: str = "",
    ) -> ListResponse[QueryResult]:
        body = self._request(
            "GET",
            f"{FGA_PREFIX}/query",
            "performing query",
            params={
                "q": query,
                "context": json.dumps(context) if context else "",
                "limit": limit,
                "before": before,
                "after": after,
                "order": order,
            },
            headers=_warrant_token_headers(warrant_token),
        )
        return ListResponse[QueryResult].model_validate(body or {})

    # ---- Resources -------------------------------------------------------------

    def create_resource(
        self: WorkOSClientBase,
        resource_type: str,
        resource_id: str,
        meta: Optional[dict[str, Any]] = None,
    ) -> Resource:
        payload: dict[str, Any] = {"resource_type": resource_type, "resource_id": resource_id}
        if meta:
            payload["meta"] = meta
        body = self._request("POST", f"{FGA_PREFIX}/resources", "creating resource", json=payload)
        return Resource.model_validate(body)

    def list_resources(
        self: WorkOSClientBase,
        resource_type: str = "",
        search: str = "",
        limit: int = 10,
        before: str = "",
        after: str = "",
        order: str = "",
    ) -> ListResponse[Resource]:
        body = self._request(
            "GET",
            f"{FGA_PREFIX}/resources",
            "listing resources",
            params={
                "resource_type": resource_type,
                "search": search,
                "limit": limit,
                "before": before,
                "after": after,
                "order": order,
            },
        )
        return ListResponse[Resource].model_validate(body or {})

    def update_resource(
        self: WorkOSClientBase,
        resource_type: str,
        resource_id: str,
        meta: dict[str, Any],
    ) -> Resource:
        body = self._request(
            "PUT",
            f"{FGA_PREFIX}/resources/{path_segment(resource_type)}/{path_segment(resource_id)}",
            "updating resource",
            json={"meta": meta},
        )
        return Resource.model_validate(body)

    def delete_resource(self: WorkOSClientBase, resource_type: str, resource_id: str) -> None:
        self._request(
            "DELETE",
            f"{FGA_PREFIX}/resources/{path_segment(resource_type)}/{path_segment(resource_id)}",
            "deleting resource",
        )

    # ---- Schema ------------------------------------------------------------------

    def convert_schema_to_resource_types(self: WorkOSClientBase, schema: str) -> ConvertSchemaResponse:
        body = self._request(
            "POST",
            f"{FGA_PREFIX}/schemas/convert",
            "converting schema",
            json={"schema": schema},
        )
        return ConvertSchemaResponse.model_validate(body or {})

    def convert_resource_types_to_schema(self: WorkOSClientBase, payload: dict[str, Any]) -> ConvertSchemaResponse:
        """Convert ``{"version": ..., "resource_types": [...]}`` into schema text."""
        body = self._request(
            "POST",
            f"{FGA_PREFIX}/schemas/convert",
            "converting schema",
            json=payload,
        )
        return ConvertSchemaResponse.model_validate(body or {})


__all__ = ["AuthorizationMixin", "FGA_PREFIX", "WARRANT_TOKEN_HEADER"]
