"""Tests for WorkOSClient against httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from workos_cli.config import CLISettings
from workos_cli.exceptions import RemoteRequestError, RemoteTimeoutError
from workos_cli.interfaces import AuthorizationClient, OAuthCredentialClient, OrganizationClient
from workos_cli.profiles import Profile
from workos_cli.sdk import WorkOSClient, client_for_profile
from workos_cli.tuples import build_assignment, build_check_request

Handler = Callable[[httpx.Request], httpx.Response]


class Recorder:
    """Captures requests and replies with a canned response."""

    def __init__(self, status: int = 200, body: Any = None, content: bytes | None = None) -> None:
        self.status = status
        self.body = body
        self.content = content
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status, content=self.content)
        if self.body is None:
            return httpx.Response(self.status)
        return httpx.Response(self.status, json=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


def make_client(handler: Handler, endpoint: str = "https://api.workos.test") -> WorkOSClient:
    return WorkOSClient(api_key="sk_test_123", endpoint=endpoint, transport=httpx.MockTransport(handler))


ORG = {
    "object": "organization",
    "id": "org_01",
    "name": "Foo Corp",
    "domains": [{"id": "dom_1", "domain": "foo-corp.com", "state": "pending"}],
}


class TestClientBase:
    """Tests for connection handling and error mapping."""

    def test_implements_interfaces(self) -> None:
        client = make_client(Recorder())
        assert isinstance(client, OrganizationClient)
        assert isinstance(client, AuthorizationClient)
        assert isinstance(client, OAuthCredentialClient)

    def test_auth_header_and_base_url(self) -> None:
        recorder = Recorder(body=ORG)
        make_client(recorder, endpoint="http://localhost:8000/").get_organization("org_01")
        assert str(recorder.last.url) == "http://localhost:8000/organizations/org_01"
        assert recorder.last.headers["Authorization"] == "Bearer sk_test_123"
        assert recorder.last.headers["User-Agent"] == "workos-cli"

    def test_error_with_sub_messages(self) -> None:
        """Test API validation errors are carried onto RemoteRequestError."""
        recorder = Recorder(
            status=400,
            body={"message": "invalid schema", "errors": [{"message": "line 1: bad"}, "line 2: worse"]},
        )
        with pytest.raises(RemoteRequestError) as exc_info:
            make_client(recorder).convert_schema_to_resource_types("type user")
        err = exc_info.value
        assert err.status_code == 400
        assert err.errors == ["line 1: bad", "line 2: worse"]
        assert str(err) == "error converting schema: 400 invalid schema\n\tline 1: bad\n\tline 2: worse"

    def test_error_without_json_body(self) -> None:
        recorder = Recorder(status=502, content=b"Bad Gateway")
        with pytest.raises(RemoteRequestError, match="502 Bad Gateway"):
            make_client(recorder).get_organization("org_01")

    def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(RemoteTimeoutError) as exc_info:
            make_client(handler).list_organizations()
        assert exc_info.value.operation == "listing organizations"

    def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(RemoteRequestError, match="connection refused"):
            make_client(handler).get_organization("org_01")

    def test_invalid_json_response(self) -> None:
        recorder = Recorder(content=b"<html>")
        with pytest.raises(RemoteRequestError, match="invalid JSON response"):
            make_client(recorder).get_organization("org_01")

    def test_client_for_profile(self) -> None:
        """Test empty profile endpoint falls back to the settings default."""
        settings = CLISettings(default_endpoint="http://localhost:9000", request_timeout=5)
        client = client_for_profile(Profile(name="dev", api_key="sk_dev"), settings)
        assert client.endpoint == "http://localhost:9000"
        assert client.timeout == 5

        client = client_for_profile(Profile(name="dev", api_key="sk_dev", endpoint="http://other:1"), settings)
        assert client.endpoint == "http://other:1"


class TestOrganizations:
    """Tests for organization endpoints."""

    def test_create(self) -> None:
        recorder = Recorder(status=201, body=ORG)
        org = make_client(recorder).create_organization("Foo Corp", [{"domain": "foo-corp.com", "state": "pending"}])
        assert recorder.last.method == "POST"
        assert recorder.last.url.path == "/organizations"
        assert recorder.last_json() == {
            "name": "Foo Corp",
            "domain_data": [{"domain": "foo-corp.com", "state": "pending"}],
        }
        assert org.id == "org_01"
        assert org.domain_names() == ["foo-corp.com"]

    def test_update_without_domains(self) -> None:
        recorder = Recorder(body=ORG)
        make_client(recorder).update_organization("org_01", "Foo Inc")
        assert recorder.last.method == "PUT"
        assert recorder.last_json() == {"name": "Foo Inc"}

    def test_list_params(self) -> None:
        """Test empty filters are dropped and domains repeat."""
        recorder = Recorder(body={"data": [ORG], "list_metadata": {"before": None, "after": "org_01"}})
        orgs = make_client(recorder).list_organizations(domains=["a.com", "b.com"], limit=5, order="desc")
        params = recorder.last.url.params
        assert params.get_list("domains") == ["a.com", "b.com"]
        assert params["limit"] == "5"
        assert params["order"] == "desc"
        assert "before" not in params
        assert orgs.list_metadata.after == "org_01"
        assert orgs.data[0].name == "Foo Corp"

    def test_delete(self) -> None:
        recorder = Recorder(status=202)
        assert make_client(recorder).delete_organization("org_01") is None
        assert recorder.last.method == "DELETE"

    def test_organization_id_encoded(self) -> None:
        recorder = Recorder(body=ORG)
        make_client(recorder).get_organization("org/../admin")
        assert recorder.last.url.raw_path == b"/organizations/org%2F..%2Fadmin"


class TestAuthorization:
    """Tests for FGA endpoints."""

    def test_write_warrant(self) -> None:
        recorder = Recorder(body={"warrant_token": "wt_1"})
        request = build_assignment("create", "user:john", "owner", "document:xyz", policy="region == 'eu'")
        response = make_client(recorder).write_warrant(request)
        assert recorder.last.url.path == "/fga/v1/warrants"
        assert recorder.last_json()["policy"] == "region == 'eu'"
        assert response.warrant_token == "wt_1"

    def test_remove_operation_name(self) -> None:
        recorder = Recorder(status=404, body={"message": "warrant not found"})
        request = build_assignment("delete", "user:john", "owner", "document:xyz")
        with pytest.raises(RemoteRequestError, match="error removing relation: 404 warrant not found"):
            make_client(recorder).write_warrant(request)

    def test_check_sends_warrant_token(self) -> None:
        recorder = Recorder(
            body={
                "result": "authorized",
                "is_implicit": False,
                "debug_info": {
                    "processing_time": 3_000_000,
                    "decision_tree": {
                        "check": {
                            "resource_type": "document",
                            "resource_id": "xyz",
                            "relation": "owner",
                            "subject": {"resource_type": "user", "resource_id": "john"},
                        },
                        "decision": "matched",
                        "processing_time": 3_000_000,
                        "children": [],
                    },
                },
            }
        )
        request = build_check_request("user:john", "owner", "document:xyz", warrant_token="wt_1", debug=True)
        response = make_client(recorder).check(request)
        assert recorder.last.headers["Warrant-Token"] == "wt_1"
        assert recorder.last_json()["debug"] is True
        assert response.authorized is True
        assert response.debug_info.decision_tree.decision == "matched"

    def test_check_without_token_has_no_header(self) -> None:
        recorder = Recorder(body={"result": "not_authorized"})
        response = make_client(recorder).check(build_check_request("user:john", "owner", "document:xyz"))
        assert "Warrant-Token" not in recorder.last.headers
        assert response.authorized is False

    def test_query_context_encoded(self) -> None:
        recorder = Recorder(
            body={"data": [{"resource_type": "document", "resource_id": "xyz", "relation": "owner"}]}
        )
        results = make_client(recorder).query("select document where user:john is owner", context={"org": "acme"})
        params = recorder.last.url.params
        assert params["q"] == "select document where user:john is owner"
        assert json.loads(params["context"]) == {"org": "acme"}
        assert results.data[0].resource_id == "xyz"

    def test_resources(self) -> None:
        recorder = Recorder(body={"resource_type": "user", "resource_id": "john", "meta": {"email": "j@x.com"}})
        client = make_client(recorder)

        created = client.create_resource("user", "john", {"email": "j@x.com"})
        assert recorder.last_json() == {"resource_type": "user", "resource_id": "john", "meta": {"email": "j@x.com"}}
        assert created.meta == {"email": "j@x.com"}

        client.update_resource("user", "john", {"email": "j@x.com"})
        assert recorder.last.method == "PUT"
        assert recorder.last.url.path == "/fga/v1/resources/user/john"

    def test_resource_ids_are_single_path_segments(self) -> None:
        """Test ids containing / or ? stay inside their own path segment."""
        recorder = Recorder(status=200)
        make_client(recorder).delete_resource("file", "docs/a?b")
        assert recorder.last.url.raw_path == b"/fga/v1/resources/file/docs%2Fa%3Fb"
        assert "b" not in recorder.last.url.params

    def test_batch_update_resource_types(self) -> None:
        recorder = Recorder(body=[{"type": "user", "relations": {}}, {"type": "document", "relations": {"owner": {}}}])
        updated = make_client(recorder).batch_update_resource_types([{"type": "user", "relations": {}}])
        assert recorder.last.method == "PUT"
        assert recorder.last.url.path == "/fga/v1/resource-types"
        assert [rt.type for rt in updated] == ["user", "document"]

    def test_convert_schema_response(self) -> None:
        recorder = Recorder(body={"version": "0.3", "schema": "type user", "warnings": [{"message": "unused"}]})
        response = make_client(recorder).convert_resource_types_to_schema({"version": "0.3", "resource_types": []})
        assert response.schema_text == "type user"
        assert response.warnings[0].message == "unused"
        assert response.resource_types is None


class TestOAuthCredentials:
    """Tests for OAuth credential endpoints."""

    def test_list_and_create(self) -> None:
        credential = {"id": "oauth_1", "type": "GoogleOAuth", "state": "valid", "is_userland_enabled": True}
        recorder = Recorder(body={"data": [credential]})
        client = make_client(recorder)
        assert client.list_oauth_credentials().data[0].type == "GoogleOAuth"

        recorder.body = credential
        created = client.create_oauth_credential("GoogleOAuth")
        assert recorder.last_json() == {"type": "GoogleOAuth"}
        assert created.is_userland_enabled is True
