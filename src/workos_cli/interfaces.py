"""Capability interfaces for the remote API, one per resource family.

Commands depend on these rather than on the HTTP client, so tests can hand
them a double.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .models import (
    CheckResponse,
    ConvertSchemaResponse,
    ListResponse,
    OAuthCredential,
    Organization,
    QueryResult,
    Resource,
    ResourceType,
    WarrantResponse,
)
from .tuples import AssignmentRequest, CheckRequest


class OrganizationClient(ABC):
    """Organizations and their domains."""

    @abstractmethod
    def create_organization(self, name: str, domain_data: List[Dict[str, str]]) -> Organization:
        raise NotImplementedError

    @abstractmethod
    def update_organization(
        self, organization_id: str, name: str, domain_data: Optional[List[Dict[str, str]]] = None
    ) -> Organization:
        raise NotImplementedError

    @abstractmethod
    def get_organization(self, organization_id: str) -> Organization:
        raise NotImplementedError

    @abstractmethod
    def list_organizations(
        self,
        domains: Optional[List[str]] = None,
        limit: int = 10,
        before: str = "",
        after: str = "",
        order: str = "",
    ) -> ListResponse[Organization]:
        raise NotImplementedError

    @abstractmethod
    def delete_organization(self, organization_id: str) -> None:
        raise NotImplementedError


class AuthorizationClient(ABC):
    """Fine-grained authorization: resource types, resources, warrants, checks."""

    @abstractmethod
    def list_resource_types(
        self, limit: int = 10, before: str = "", after: str = "", order: str = ""
    ) -> ListResponse[ResourceType]:
        raise NotImplementedError

    @abstractmethod
    def batch_update_resource_types(self, resource_types: List[Dict[str, Any]]) -> List[ResourceType]:
        raise NotImplementedError

    @abstractmethod
    def write_warrant(self, request: AssignmentRequest) -> WarrantResponse:
        raise NotImplementedError

    @abstractmethod
    def check(self, request: CheckRequest) -> CheckResponse:
        raise NotImplementedError

    @abstractmethod
    def query(
        self,
        query: str,
        context: Optional[Dict[str, Any]] = None,
        limit: int = 10,
        before: str = "",
        after: str = "",
        order: str = "",
        warrant_token: str = "",
    ) -> ListResponse[QueryResult]:
        raise NotImplementedError

    @abstractmethod
    def create_resource(
        self, resource_type: str, resource_id: str, meta: Optional[Dict[str, Any]] = None
    ) -> Resource:
        raise NotImplementedError

    @abstractmethod
    def list_resources(
        self,
        resource_type: str = "",
        search: str = "",
        limit: int = 10,
        before: str = "",
        after: str = "",
        order: str = "",
    ) -> ListResponse[Resource]:
        raise NotImplementedError

    @abstractmethod
    def update_resource(self, resource_type: str, resource_id: str, meta: Dict[str, Any]) -> Resource:
        raise NotImplementedError

    @abstractmethod
    def delete_resource(self, resource_type: str, resource_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def convert_schema_to_resource_types(self, schema: str) -> ConvertSchemaResponse:
        raise NotImplementedError

    @abstractmethod
    def convert_resource_types_to_schema(self, payload: Dict[str, Any]) -> ConvertSchemaResponse:
        raise NotImplementedError


class OAuthCredentialClient(ABC):
    """OAuth authentication methods."""

    @abstractmethod
    def list_oauth_credentials(self) -> ListResponse[OAuthCredential]:
        raise NotImplementedError

    @abstractmethod
    def create_oauth_credential(self, credential_type: str) -> OAuthCredential:
        raise NotImplementedError


__all__ = ["OrganizationClient", "AuthorizationClient", "OAuthCredentialClient"]
