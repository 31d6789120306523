"""Relation-tuple codec.

Translates the compact token syntax used on the command line into
authorization requests and renders them back for display:

    user:john owner document:xyz
    group:eng#member viewer folder:root '{"organization":"acme"}'

Subjects and resources are ``type:id`` tokens. A subject id may carry a
``#relation`` suffix to address everyone holding that relation on the
subject (e.g. ``group:eng#member``).
"""

from __future__ import annotations

import json
import shlex
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from .exceptions import (
    InvalidArgumentError,
    InvalidContextError,
    MalformedTupleError,
    WorkOSCLIError,
)

TYPE_SEPARATOR = ":"
RELATION_SEPARATOR = "#"

CHECK_RESULT_AUTHORIZED = "authorized"
CHECK_RESULT_NOT_AUTHORIZED = "not_authorized"


class WarrantOp(str, Enum):
    """Whether a relation assignment grants or revokes the relation."""

    CREATE = "create"
    DELETE = "delete"


class Decision(str, Enum):
    """Outcome recorded on each decision tree node."""

    MATCHED = "matched"
    NOT_MATCHED = "not_matched"
    EVAL_POLICY = "eval_policy"


class RelationTuple(BaseModel):
    """A subject's relation to a resource, optionally gated by a policy."""

    subject_type: str
    subject_id: str
    subject_relation: str = ""
    relation: str
    resource_type: str
    resource_id: str
    policy: str = ""
    context: Optional[dict[str, Any]] = None

    def subject_payload(self) -> dict[str, Any]:
        subject: dict[str, Any] = {
            "resource_type": self.subject_type,
            "resource_id": self.subject_id,
        }
        if self.subject_relation:
            subject["relation"] = self.subject_relation
        return subject


class CheckRequest(BaseModel):
    """A single authorization check and its evaluation options."""

    check: RelationTuple
    warrant_token: str = ""
    debug: bool = False

    def to_payload(self) -> dict[str, Any]:
        warrant_check: dict[str, Any] = {
            "resource_type": self.check.resource_type,
            "resource_id": self.check.resource_id,
            "relation": self.check.relation,
            "subject": self.check.subject_payload(),
        }
        if self.check.context:
            warrant_check["context"] = self.check.context
        payload: dict[str, Any] = {"checks": [warrant_check]}
        if self.debug:
            payload["debug"] = True
        return payload


class AssignmentRequest(BaseModel):
    """Grant (create) or revoke (delete) a relation."""

    op: WarrantOp
    assignment: RelationTuple

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "op": self.op.value,
            "resource_type": self.assignment.resource_type,
            "resource_id": self.assignment.resource_id,
            "relation": self.assignment.relation,
            "subject": self.assignment.subject_payload(),
        }
        if self.assignment.policy:
            payload["policy"] = self.assignment.policy
        return payload


class DecisionSubject(BaseModel):
    resource_type: str = ""
    resource_id: str = ""
    relation: str = ""


class DecisionCheck(BaseModel):
    resource_type: str = ""
    resource_id: str = ""
    relation: str = ""
    subject: DecisionSubject = Field(default_factory=DecisionSubject)


class DecisionTreeNode(BaseModel):
    """One sub-check in the debug trace of an authorization check."""

    check: DecisionCheck = Field(default_factory=DecisionCheck)
    policy: str = ""
    decision: str = ""
    processing_time: int = 0
    children: list["DecisionTreeNode"] = Field(default_factory=list)

    model_config = {"extra": "ignore"}


DecisionTreeNode.model_rebuild()


# ---- Parsing ----------------------------------------------------------------


def parse_token(token: str, kind: str = "resource") -> tuple[str, str]:
    """Split a ``type:id`` token on the first ``:``.

    Raises:
        MalformedTupleError: if the separator is missing or either part is empty.
    """
    object_type, sep, object_id = token.partition(TYPE_SEPARATOR)
    if not sep:
        raise MalformedTupleError(f"invalid {kind}: {token}", token=token)
    if not object_type or not object_id:
        raise MalformedTupleError(f"invalid {kind}: {token} (type and id must be non-empty)", token=token)
    return object_type, object_id


def parse_subject(token: str) -> tuple[str, str, str]:
    """Split a subject token into type, id and optional relation.

    ``group:eng#member`` yields ``("group", "eng", "member")`` and
    ``user:john`` yields ``("user", "john", "")``. A ``#`` followed by
    nothing is rejected rather than read as "no relation".
    """
    subject_type, id_and_relation = parse_token(token, kind="subject")
    subject_id, sep, subject_relation = id_and_relation.partition(RELATION_SEPARATOR)
    if not subject_id:
        raise MalformedTupleError(f"invalid subject: {token} (id must be non-empty)", token=token)
    if sep and not subject_relation:
        raise MalformedTupleError(f"invalid subject: {token} (relation after '#' must be non-empty)", token=token)
    return subject_type, subject_id, subject_relation


def parse_json_object(
    raw: str,
    error_cls: type[WorkOSCLIError] = InvalidArgumentError,
    label: str = "argument",
) -> dict[str, Any]:
    """Decode a JSON object passed as a command argument."""
    try:
        value = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise error_cls(f"invalid {label}: {raw}", reason=str(e)) from e
    if not isinstance(value, dict):
        raise error_cls(f"invalid {label}: {raw} (expected a JSON object)")
    return value


def build_check_request(
    subject: str,
    relation: str,
    resource: str,
    context_json: str | None = None,
    warrant_token: str = "",
    debug: bool = False,
) -> CheckRequest:
    """Compose a check from CLI tokens. Performs no I/O."""
    subject_type, subject_id, subject_relation = parse_subject(subject)
    resource_type, resource_id = parse_token(resource)

    context = None
    if context_json is not None:
        context = parse_json_object(context_json, InvalidContextError, label="context")

    return CheckRequest(
        check=RelationTuple(
            subject_type=subject_type,
            subject_id=subject_id,
            subject_relation=subject_relation,
            relation=relation,
            resource_type=resource_type,
            resource_id=resource_id,
            context=context,
        ),
        warrant_token=warrant_token,
        debug=debug,
    )


def build_assignment(
    op: WarrantOp | str,
    subject: str,
    relation: str,
    resource: str,
    policy: str = "",
) -> AssignmentRequest:
    """Compose a relation grant or revocation from CLI tokens.

    The policy expression is passed through untouched; the API validates it.
    """
    try:
        op = WarrantOp(op)
    except ValueError:
        raise InvalidArgumentError(f"invalid operation: {op} (expected create or delete)") from None

    subject_type, subject_id, subject_relation = parse_subject(subject)
    resource_type, resource_id = parse_token(resource)

    return AssignmentRequest(
        op=op,
        assignment=RelationTuple(
            subject_type=subject_type,
            subject_id=subject_id,
            subject_relation=subject_relation,
            relation=relation,
            resource_type=resource_type,
            resource_id=resource_id,
            policy=policy,
        ),
    )


def parse_tuple(text: str) -> RelationTuple:
    """Parse the output of format_tuple() back into a RelationTuple."""
    try:
        parts = shlex.split(text)
    except ValueError as e:
        raise MalformedTupleError(f"invalid tuple: {text}", reason=str(e)) from e
    if len(parts) not in (3, 4):
        raise MalformedTupleError(f"invalid tuple: {text} (expected '<subject> <relation> <resource> [context]')")

    request = build_check_request(parts[0], parts[1], parts[2], parts[3] if len(parts) == 4 else None)
    return request.check


# ---- Formatting -------------------------------------------------------------


def format_tuple(t: RelationTuple) -> str:
    """Render a tuple as ``subject relation resource ['context']``."""
    subject = f"{t.subject_type}{TYPE_SEPARATOR}{t.subject_id}"
    if t.subject_relation:
        subject = f"{subject}{RELATION_SEPARATOR}{t.subject_relation}"
    s = f"{subject} {t.relation} {t.resource_type}{TYPE_SEPARATOR}{t.resource_id}"
    if t.context:
        context = json.dumps(t.context, separators=(',', ':'), sort_keys=True, ensure_ascii=False)
        s = f"{s} {shlex.quote(context)}"
    return s


DECISION_MARKERS = {
    Decision.MATCHED.value: "✔",
    Decision.NOT_MATCHED.value: "✖",
    Decision.EVAL_POLICY.value: "?",
}


def describe_decision_node(node: DecisionTreeNode) -> str:
    """Text of a single node, without marker or timing."""
    check = node.check
    text = (
        f"{check.resource_type}:{check.resource_id}#{check.relation}"
        f"@{check.subject.resource_type}:{check.subject.resource_id}"
    )
    if check.subject.relation:
        text = f"{text}#{check.subject.relation}"
    if node.policy:
        text = f"{text} - {node.policy}"
    return text


def node_millis(node: DecisionTreeNode) -> int:
    return node.processing_time // 1_000_000


def render_decision_tree(node: DecisionTreeNode, markers: dict[str, str] | None = None) -> str:
    """Render a decision tree as indented text with tree connectors."""
    markers = markers or DECISION_MARKERS
    lines: list[str] = []

    def label(n: DecisionTreeNode) -> str:
        text = describe_decision_node(n)
        marker = markers.get(n.decision)
        if marker:
            text = f"{marker} {text}"
        return f"{text} ({node_millis(n)}ms)"

    def walk(n: DecisionTreeNode, prefix: str) -> None:
        for i, child in enumerate(n.children):
            last = i == len(n.children) - 1
            lines.append(f"{prefix}{'└── ' if last else '├── '}{label(child)}")
            walk(child, prefix + ("    " if last else "│   "))

    lines.append(label(node))
    walk(node, "")
    return "\n".join(lines)


__all__ = [
    "WarrantOp",
    "Decision",
    "RelationTuple",
    "CheckRequest",
    "AssignmentRequest",
    "DecisionTreeNode",
    "CHECK_RESULT_AUTHORIZED",
    "CHECK_RESULT_NOT_AUTHORIZED",
    "parse_token",
    "parse_subject",
    "parse_json_object",
    "build_check_request",
    "build_assignment",
    "parse_tuple",
    "format_tuple",
    "describe_decision_node",
    "render_decision_tree",
]
