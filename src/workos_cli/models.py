"""Response models for the WorkOS REST API.

These are Pydantic models; unknown fields are ignored so newer API
responses keep parsing.
"""

from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from .tuples import CHECK_RESULT_AUTHORIZED, DecisionTreeNode

T = TypeVar("T")


class APIModel(BaseModel):
    model_config = {"extra": "ignore", "populate_by_name": True}


class ListMetadata(APIModel):
    before: Optional[str] = None
    after: Optional[str] = None


class ListResponse(APIModel, Generic[T]):
    """A page of results plus cursors."""

    data: list[T] = Field(default_factory=list)
    list_metadata: ListMetadata = Field(default_factory=ListMetadata)


class OrganizationDomain(APIModel):
    id: str = ""
    domain: str
    state: str = ""


class Organization(APIModel):
    id: str
    name: str
    domains: list[OrganizationDomain] = Field(default_factory=list)
    allow_profiles_outside_organization: bool = False
    created_at: str = ""
    updated_at: str = ""

    def domain_names(self) -> list[str]:
        return [d.domain for d in self.domains]


class ResourceType(APIModel):
    type: str
    relations: dict[str, Any] = Field(default_factory=dict)


class Resource(APIModel):
    resource_type: str
    resource_id: str
    meta: Optional[dict[str, Any]] = None


class WarrantResponse(APIModel):
    warrant_token: str = ""


class DebugInfo(APIModel):
    processing_time: int = 0
    decision_tree: Optional[DecisionTreeNode] = None


class CheckResponse(APIModel):
    result: str
    is_implicit: bool = False
    warrant_token: str = ""
    debug_info: Optional[DebugInfo] = None

    @property
    def authorized(self) -> bool:
        return self.result == CHECK_RESULT_AUTHORIZED


class QueryResult(APIModel):
    resource_type: str
    resource_id: str
    relation: str
    warrant: Optional[dict[str, Any]] = None
    is_implicit: bool = False
    meta: Optional[dict[str, Any]] = None


class SchemaWarning(APIModel):
    code: str = ""
    message: str


class ConvertSchemaResponse(APIModel):
    version: str = ""
    warnings: Optional[list[SchemaWarning]] = None
    schema_text: Optional[str] = Field(default=None, alias="schema")
    resource_types: Optional[list[ResourceType]] = None


class OAuthCredential(APIModel):
    id: str
    type: str
    state: str = ""
    is_userland_enabled: bool = False


OAUTH_CREDENTIAL_TYPES = (
    "AppleOAuth",
    "GitHubOAuth",
    "GoogleOAuth",
    "MicrosoftOAuth",
)


__all__ = [
    "ListMetadata",
    "ListResponse",
    "OrganizationDomain",
    "Organization",
    "ResourceType",
    "Resource",
    "WarrantResponse",
    "DebugInfo",
    "CheckResponse",
    "QueryResult",
    "SchemaWarning",
    "ConvertSchemaResponse",
    "OAuthCredential",
    "OAUTH_CREDENTIAL_TYPES",
]
