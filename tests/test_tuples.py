"""Tests for the relation-tuple codec."""

from __future__ import annotations

import pytest

from workos_cli.exceptions import InvalidArgumentError, InvalidContextError, MalformedTupleError
from workos_cli.tuples import (
    AssignmentRequest,
    DecisionTreeNode,
    RelationTuple,
    WarrantOp,
    build_assignment,
    build_check_request,
    describe_decision_node,
    format_tuple,
    parse_json_object,
    parse_subject,
    parse_token,
    parse_tuple,
    render_decision_tree,
)


class TestParseToken:
    """Tests for type:id token parsing."""

    def test_splits_on_first_separator(self) -> None:
        """Test simple and colon-bearing ids."""
        assert parse_token("document:xyz") == ("document", "xyz")
        assert parse_token("url:https://example.com") == ("url", "https://example.com")

    def test_missing_separator(self) -> None:
        """Test a token without ':' is malformed."""
        with pytest.raises(MalformedTupleError, match="invalid resource: documentxyz"):
            parse_token("documentxyz")

    def test_empty_parts(self) -> None:
        """Test empty type or id is malformed."""
        for token in (":xyz", "document:", ":"):
            with pytest.raises(MalformedTupleError):
                parse_token(token)

    def test_kind_in_message(self) -> None:
        """Test the error names what was being parsed."""
        with pytest.raises(MalformedTupleError, match="invalid subject: john"):
            parse_token("john", kind="subject")


class TestParseSubject:
    """Tests for subject tokens with optional #relation."""

    def test_without_relation(self) -> None:
        """Test plain subject yields an empty relation."""
        assert parse_subject("user:john") == ("user", "john", "")

    def test_with_relation(self) -> None:
        """Test userset subject recovers the relation."""
        assert parse_subject("group:eng#member") == ("group", "eng", "member")

    def test_empty_relation_rejected(self) -> None:
        """Test 'group:eng#' is distinguishable from 'group:eng'."""
        with pytest.raises(MalformedTupleError, match="relation after '#'"):
            parse_subject("group:eng#")

    def test_empty_id_before_relation(self) -> None:
        """Test '#member' alone is not an id."""
        with pytest.raises(MalformedTupleError):
            parse_subject("group:#member")


class TestBuildCheckRequest:
    """Tests for check request construction."""

    def test_builds_tuple(self) -> None:
        """Test tokens map onto RelationTuple fields."""
        request = build_check_request("user:john", "owner", "document:xyz", warrant_token="tok", debug=True)
        assert request.check == RelationTuple(
            subject_type="user",
            subject_id="john",
            relation="owner",
            resource_type="document",
            resource_id="xyz",
        )
        assert request.warrant_token == "tok"
        assert request.debug is True

    def test_payload(self) -> None:
        """Test the API payload carries subject relation, context and debug."""
        request = build_check_request(
            "group:eng#member", "viewer", "folder:root", context_json='{"organization":"acme"}', debug=True
        )
        assert request.to_payload() == {
            "checks": [
                {
                    "resource_type": "folder",
                    "resource_id": "root",
                    "relation": "viewer",
                    "subject": {"resource_type": "group", "resource_id": "eng", "relation": "member"},
                    "context": {"organization": "acme"},
                }
            ],
            "debug": True,
        }

    def test_invalid_context_json(self) -> None:
        """Test malformed context raises InvalidContextError."""
        with pytest.raises(InvalidContextError, match="invalid context"):
            build_check_request("user:john", "owner", "document:xyz", context_json="{not json")

    def test_context_must_be_object(self) -> None:
        """Test a JSON array is not accepted as context."""
        with pytest.raises(InvalidContextError, match="expected a JSON object"):
            build_check_request("user:john", "owner", "document:xyz", context_json="[1, 2]")

    def test_malformed_resource(self) -> None:
        """Test the resource token is validated too."""
        with pytest.raises(MalformedTupleError, match="invalid resource"):
            build_check_request("user:john", "owner", "documentxyz")


class TestBuildAssignment:
    """Tests for relation grant/revoke construction."""

    def test_create_with_policy(self) -> None:
        """Test the policy is passed through untouched."""
        request = build_assignment("create", "user:john", "owner", "document:xyz", policy="region == 'eu'")
        assert isinstance(request, AssignmentRequest)
        assert request.op == WarrantOp.CREATE
        assert request.to_payload() == {
            "op": "create",
            "resource_type": "document",
            "resource_id": "xyz",
            "relation": "owner",
            "subject": {"resource_type": "user", "resource_id": "john"},
            "policy": "region == 'eu'",
        }

    def test_delete_omits_empty_policy(self) -> None:
        """Test a delete without policy has no policy key."""
        request = build_assignment(WarrantOp.DELETE, "user:john", "owner", "document:xyz")
        assert "policy" not in request.to_payload()
        assert request.to_payload()["op"] == "delete"

    def test_invalid_op(self) -> None:
        """Test only create and delete are accepted."""
        with pytest.raises(InvalidArgumentError, match="invalid operation: update"):
            build_assignment("update", "user:john", "owner", "document:xyz")


class TestFormatTuple:
    """Tests for canonical tuple rendering."""

    def test_assign_example(self) -> None:
        """Test 'assign user:john owner document:xyz' renders back literally."""
        request = build_assignment("create", "user:john", "owner", "document:xyz")
        assert request.assignment.subject_type == "user"
        assert request.assignment.subject_id == "john"
        assert request.assignment.subject_relation == ""
        assert format_tuple(request.assignment) == "user:john owner document:xyz"

    def test_subject_relation(self) -> None:
        """Test #relation is appended to the subject."""
        request = build_check_request("group:eng#member", "viewer", "folder:root")
        assert format_tuple(request.check) == "group:eng#member viewer folder:root"

    def test_context_quoted(self) -> None:
        """Test context is appended as single-quoted compact JSON."""
        request = build_check_request("user:john", "owner", "document:xyz", context_json='{"organization": "acme"}')
        assert format_tuple(request.check) == "user:john owner document:xyz '{\"organization\":\"acme\"}'"

    def test_context_keys_sorted(self) -> None:
        """Test context rendering does not depend on input key order."""
        a = build_check_request("user:john", "owner", "document:xyz", context_json='{"b": 1, "a": 2}')
        b = build_check_request("user:john", "owner", "document:xyz", context_json='{"a": 2, "b": 1}')
        assert format_tuple(a.check) == format_tuple(b.check)


class TestParseTuple:
    """Tests for parsing formatted tuples."""

    def test_inverse_of_format(self) -> None:
        """Test parse_tuple(format_tuple(t)) == t for tuples with context."""
        request = build_check_request(
            "group:eng#member", "viewer", "folder:root", context_json='{"organization": "acme", "tier": 2}'
        )
        assert parse_tuple(format_tuple(request.check)) == request.check

    def test_context_with_single_quote(self) -> None:
        """Test a quote inside a context value survives the round trip."""
        request = build_check_request("user:john", "viewer", "doc:x", context_json='{"note": "it\'s"}')
        text = format_tuple(request.check)
        assert parse_tuple(text) == request.check
        assert parse_tuple(text).context == {"note": "it's"}

    def test_non_ascii_context(self) -> None:
        """Test non-ASCII context is rendered as UTF-8, not escapes."""
        request = build_check_request("user:john", "viewer", "doc:x", context_json='{"city": "Montréal"}')
        text = format_tuple(request.check)
        assert text == "user:john viewer doc:x '{\"city\":\"Montréal\"}'"
        assert parse_tuple(text) == request.check

    def test_wrong_arity(self) -> None:
        """Test too few parts is malformed."""
        with pytest.raises(MalformedTupleError, match="invalid tuple"):
            parse_tuple("user:john owner")

    def test_unbalanced_quotes(self) -> None:
        """Test unterminated quoting is malformed."""
        with pytest.raises(MalformedTupleError):
            parse_tuple("user:john owner document:xyz '{\"a\":1}")


class TestParseJsonObject:
    """Tests for JSON object arguments."""

    def test_returns_dict(self) -> None:
        assert parse_json_object('{"email": "john@example.com"}') == {"email": "john@example.com"}

    def test_error_class_and_label(self) -> None:
        """Test the caller chooses the error type and label."""
        with pytest.raises(InvalidContextError, match="invalid policy context: nope"):
            parse_json_object("nope", InvalidContextError, label="policy context")


def _node(resource: str, subject: str, decision: str, ns: int, policy: str = "", children=None) -> DecisionTreeNode:
    resource_type, resource_id = resource.split(":")
    subject_type, rest = subject.split(":")
    subject_id, _, subject_relation = rest.partition("#")
    return DecisionTreeNode.model_validate(
        {
            "check": {
                "resource_type": resource_type,
                "resource_id": resource_id,
                "relation": "owner",
                "subject": {"resource_type": subject_type, "resource_id": subject_id, "relation": subject_relation},
            },
            "policy": policy,
            "decision": decision,
            "processing_time": ns,
            "children": children or [],
        }
    )


class TestDecisionTree:
    """Tests for decision tree rendering."""

    def test_describe_node(self) -> None:
        """Test node text with subject relation and policy."""
        node = _node("document:xyz", "group:eng#member", "eval_policy", 0, policy="region == 'eu'")
        assert describe_decision_node(node) == "document:xyz#owner@group:eng#member - region == 'eu'"

    def test_render_tree(self) -> None:
        """Test markers, millisecond timings and connectors."""
        tree = _node(
            "document:xyz",
            "user:john",
            "matched",
            2_500_000,
            children=[
                _node("document:xyz", "group:eng#member", "not_matched", 1_000_000).model_dump(),
                _node("document:xyz", "user:john", "eval_policy", 999_999, policy="region == 'eu'").model_dump(),
            ],
        )
        assert render_decision_tree(tree) == "\n".join(
            [
                "✔ document:xyz#owner@user:john (2ms)",
                "├── ✖ document:xyz#owner@group:eng#member (1ms)",
                "└── ? document:xyz#owner@user:john - region == 'eu' (0ms)",
            ]
        )

    def test_nested_children_indent(self) -> None:
        """Test grandchildren are indented under their parent."""
        leaf = _node("folder:root", "user:john", "matched", 0).model_dump()
        middle = _node("document:xyz", "user:john", "matched", 0, children=[leaf]).model_dump()
        root = _node("document:xyz", "user:john", "matched", 0, children=[middle])
        lines = render_decision_tree(root).splitlines()
        assert lines[1].startswith("└── ")
        assert lines[2].startswith("    └── ✔ folder:root#owner@user:john")

    def test_unknown_decision_has_no_marker(self) -> None:
        """Test nodes with an unrecognised decision render without marker."""
        node = _node("document:xyz", "user:john", "", 3_000_000)
        assert render_decision_tree(node) == "document:xyz#owner@user:john (3ms)"
