"""``workos fga`` - fine-grained authorization commands.

Relation arguments use the tuple syntax from ``workos_cli.tuples``:

    workos fga assign user:john owner document:xyz --policy "region == 'eu'"
    workos fga check group:eng#member viewer folder:root '{"organization":"acme"}'
"""

import json
from pathlib import Path
from typing import Any, Optional

import typer

from .. import printer
from ..exceptions import (
    AssertionMismatchError,
    InvalidArgumentError,
    InvalidContextError,
    InvalidMetaError,
    RemoteRequestError,
    SchemaWarningsError,
    cli_error_handler,
)
from ..models import ConvertSchemaResponse
from ..tuples import (
    CHECK_RESULT_AUTHORIZED,
    CHECK_RESULT_NOT_AUTHORIZED,
    WarrantOp,
    build_assignment,
    build_check_request,
    format_tuple,
    parse_json_object,
    parse_token,
)
from .context import get_app_context, normalize_order

fga_app = typer.Typer(
    help="Manage FGA resources (resource types, relation assignments, and resources) "
    "and perform check and query operations to validate your FGA model.",
    no_args_is_help=True,
)
resourcetype_app = typer.Typer(
    help="List and apply resource types, which define the types of resources in your application "
    "and the relations between them.",
    no_args_is_help=True,
)
resource_app = typer.Typer(help="Create, update, list and delete resources.", no_args_is_help=True)
schema_app = typer.Typer(
    help="Convert and apply schemas: the resource types and relations that define your application.",
    no_args_is_help=True,
)
fga_app.add_typer(resourcetype_app, name="resourcetype")
fga_app.add_typer(resource_app, name="resource")
fga_app.add_typer(schema_app, name="schema")

CONVERT_TO_JSON = "json"
CONVERT_TO_SCHEMA = "schema"
OUTPUT_PRETTY = "pretty"
OUTPUT_RAW = "raw"

_TRUE_VALUES = ("1", "t", "true")
_FALSE_VALUES = ("0", "f", "false")

LIMIT_HELP = "limit the number of results returned"
BEFORE_HELP = "cursor indicating results that occur before a specific result"
AFTER_HELP = "cursor indicating results that occur after a specific result"
ORDER_HELP = "order in which a list of results should be returned (asc or desc)"


def _read_input_file(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise InvalidArgumentError(f"error reading input file: {e}", path=path) from e


def _parse_assertion(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise InvalidArgumentError(f"invalid assertion: {value}")


def _meta_text(meta: Optional[dict[str, Any]]) -> str:
    return json.dumps(meta, indent=4) if meta else ""


def _print_warnings(response: ConvertSchemaResponse) -> None:
    printer.print_msg("Warnings:")
    for warning in response.warnings or []:
        printer.print_msg(warning.message)
    printer.print_msg("")


# ---- Resource types ---------------------------------------------------------


@resourcetype_app.command("list")
@cli_error_handler
def list_resource_types(
    ctx: typer.Context,
    limit: int = typer.Option(10, "--limit", min=1, help=LIMIT_HELP),
    before: str = typer.Option("", "--before", help=BEFORE_HELP),
    after: str = typer.Option("", "--after", help=AFTER_HELP),
    order: str = typer.Option("", "--order", help=ORDER_HELP),
) -> None:
    """List resource types, optionally paginating the results."""
    resource_types = get_app_context(ctx).client().list_resource_types(
        limit=limit, before=before, after=after, order=normalize_order(order)
    )
    table = printer.new_table("Resource Type", "Relations")
    printer.print_rows(table, ((rt.type, ", ".join(sorted(rt.relations))) for rt in resource_types.data))
    printer.print_pagination(resource_types.list_metadata.before, resource_types.list_metadata.after)


@resourcetype_app.command("apply")
@cli_error_handler
def apply_resource_types(
    ctx: typer.Context,
    file: Optional[str] = typer.Option(None, "--file", "-f", help="file containing resource type definitions"),
) -> None:
    """Apply a set of resource types from a file (or stdin).

    Creates any resource types present in the input and deletes any that are not.
    """
    raw = _read_input_file(file) if file else typer.get_text_stream("stdin").read()
    try:
        resource_types = json.loads(raw)
    except ValueError as e:
        raise InvalidArgumentError(f"invalid resource types: {e}") from e
    if not isinstance(resource_types, list):
        raise InvalidArgumentError("invalid resource types: expected a JSON array")

    get_app_context(ctx).client().batch_update_resource_types(resource_types)
    printer.print_msg("Resource types updated")


# ---- Relation assignments ---------------------------------------------------


@fga_app.command("assign")
@cli_error_handler
def assign_relation(
    ctx: typer.Context,
    subject: str = typer.Argument(..., help="Subject, e.g. user:john or group:eng#member"),
    relation: str = typer.Argument(..., help="Relation, e.g. owner"),
    resource: str = typer.Argument(..., help="Resource, e.g. document:xyz"),
    policy: str = typer.Option(
        "", "--policy", "-p", help="boolean expression to be evaluated for a warrant at the time of a check"
    ),
) -> None:
    """Assign a relation between a subject and a resource, optionally gated by a policy."""
    request = build_assignment(WarrantOp.CREATE, subject, relation, resource, policy=policy)
    response = get_app_context(ctx).client().write_warrant(request)

    message = f"Assigned {format_tuple(request.assignment)}"
    if policy:
        message = f"{message} [{policy}]"
    printer.print_msg(message)
    printer.print_msg(f"Warrant-Token: {response.warrant_token}")


@fga_app.command("remove")
@cli_error_handler
def remove_relation(
    ctx: typer.Context,
    subject: str = typer.Argument(..., help="Subject, e.g. user:john"),
    relation: str = typer.Argument(..., help="Relation, e.g. owner"),
    resource: str = typer.Argument(..., help="Resource, e.g. document:xyz"),
) -> None:
    """Remove a relation assigned between a subject and a resource."""
    request = build_assignment(WarrantOp.DELETE, subject, relation, resource)
    response = get_app_context(ctx).client().write_warrant(request)

    printer.print_msg(f"Removed {format_tuple(request.assignment)}")
    printer.print_msg(f"Warrant-Token: {response.warrant_token}")


# ---- Check & query ----------------------------------------------------------


@fga_app.command("check")
@cli_error_handler
def check_relation(
    ctx: typer.Context,
    subject: str = typer.Argument(..., help="Subject, e.g. user:john"),
    relation: str = typer.Argument(..., help="Relation, e.g. owner"),
    resource: str = typer.Argument(..., help="Resource, e.g. document:xyz"),
    context: Optional[str] = typer.Argument(None, help="JSON object of policy context"),
    warrant_token: str = typer.Option("", "--warrant-token", "-w", help="warrant token to use for check"),
    assert_: Optional[str] = typer.Option(None, "--assert", help="assert that the check is true or false"),
    debug: bool = typer.Option(False, "--debug", "-d", help="run check in debug mode"),
) -> None:
    """Check if a subject has a relation on a resource.

    With --assert, exits non-zero when the result differs from the expectation.
    """
    expected = _parse_assertion(assert_) if assert_ is not None else None
    request = build_check_request(
        subject, relation, resource, context_json=context, warrant_token=warrant_token, debug=debug
    )
    response = get_app_context(ctx).client().check(request)
    check_text = format_tuple(request.check)

    mismatch = False
    if expected is not None:
        mismatch = expected != response.authorized
        printer.print_msg(printer.status_line(not mismatch, f"assert {str(expected).lower()}", check_text))
    elif response.authorized:
        printer.print_msg(printer.status_line(True, CHECK_RESULT_AUTHORIZED, check_text))
    else:
        printer.print_msg(printer.status_line(False, CHECK_RESULT_NOT_AUTHORIZED, check_text))

    if debug and response.debug_info is not None:
        printer.print_msg(f"Response Time: {response.debug_info.processing_time // 1_000_000}ms")
        if response.debug_info.decision_tree is not None:
            printer.print_msg(printer.build_decision_tree(response.debug_info.decision_tree))

    if mismatch:
        raise AssertionMismatchError(
            f"expected {str(expected).lower()}, got {response.result}",
            check=check_text,
        )


@fga_app.command("query")
@cli_error_handler
def query(
    ctx: typer.Context,
    query_text: str = typer.Argument(..., metavar="QUERY", help="e.g. 'select document where user:john is owner'"),
    context: Optional[str] = typer.Argument(None, help="JSON object of policy context"),
    warrant_token: str = typer.Option("", "--warrant-token", "-w", help="warrant token to use for query"),
    limit: int = typer.Option(10, "--limit", min=1, help=LIMIT_HELP),
    before: str = typer.Option("", "--before", help=BEFORE_HELP),
    after: str = typer.Option("", "--after", help=AFTER_HELP),
    order: str = typer.Option("", "--order", help=ORDER_HELP),
) -> None:
    """Run a query to see which resources a subject can access, or which subjects can access a resource."""
    policy_context = None
    if context is not None:
        policy_context = parse_json_object(context, InvalidContextError, label="context")

    results = get_app_context(ctx).client().query(
        query_text,
        context=policy_context,
        limit=limit,
        before=before,
        after=after,
        order=normalize_order(order),
        warrant_token=warrant_token,
    )
    table = printer.new_table("Resource Type", "Resource ID", "Relation", "Implicit", "Meta")
    printer.print_rows(
        table,
        (
            (r.resource_type, r.resource_id, r.relation, str(r.is_implicit).lower(), _meta_text(r.meta))
            for r in results.data
        ),
    )
    printer.print_pagination(results.list_metadata.before, results.list_metadata.after)


# ---- Resources --------------------------------------------------------------


@resource_app.command("create")
@cli_error_handler
def create_resource(
    ctx: typer.Context,
    resource: str = typer.Argument(..., help="Resource, e.g. user:john"),
    meta: Optional[str] = typer.Argument(None, help="JSON object of metadata to attach"),
) -> None:
    """Create a resource, optionally attaching metadata."""
    resource_type, resource_id = parse_token(resource)
    meta_obj = parse_json_object(meta, InvalidMetaError, label="resource meta") if meta is not None else None

    created = get_app_context(ctx).client().create_resource(resource_type, resource_id, meta_obj)
    message = f"Created resource {created.resource_type}:{created.resource_id}"
    if created.meta:
        message = f"{message} ({json.dumps(created.meta, separators=(',', ':'), sort_keys=True)})"
    printer.print_msg(message)


@resource_app.command("list")
@cli_error_handler
def list_resources(
    ctx: typer.Context,
    resource_type: str = typer.Option("", "--type", help="resource type to filter results by"),
    search: str = typer.Option("", "--search", help="search term to filter a list of results by"),
    limit: int = typer.Option(10, "--limit", min=1, help=LIMIT_HELP),
    before: str = typer.Option("", "--before", help=BEFORE_HELP),
    after: str = typer.Option("", "--after", help=AFTER_HELP),
    order: str = typer.Option("", "--order", help=ORDER_HELP),
) -> None:
    """List resources, optionally filtered by type or search term."""
    resources = get_app_context(ctx).client().list_resources(
        resource_type=resource_type,
        search=search,
        limit=limit,
        before=before,
        after=after,
        order=normalize_order(order),
    )
    table = printer.new_table("Resource Type", "Resource ID", "Meta")
    printer.print_rows(table, ((r.resource_type, r.resource_id, _meta_text(r.meta)) for r in resources.data))
    printer.print_pagination(resources.list_metadata.before, resources.list_metadata.after)


@resource_app.command("update")
@cli_error_handler
def update_resource(
    ctx: typer.Context,
    resource: str = typer.Argument(..., help="Resource, e.g. user:john"),
    meta: str = typer.Argument(..., help="JSON object of metadata to attach"),
) -> None:
    """Replace a resource's metadata."""
    resource_type, resource_id = parse_token(resource)
    meta_obj = parse_json_object(meta, InvalidMetaError, label="meta")

    updated = get_app_context(ctx).client().update_resource(resource_type, resource_id, meta_obj)
    printer.print_msg(f"Updated resource {updated.resource_type}:{updated.resource_id}")


@resource_app.command("delete")
@cli_error_handler
def delete_resource(
    ctx: typer.Context,
    resource: str = typer.Argument(..., help="Resource, e.g. user:john"),
) -> None:
    """Delete a resource and any relations assigned on it."""
    resource_type, resource_id = parse_token(resource)
    get_app_context(ctx).client().delete_resource(resource_type, resource_id)
    printer.print_msg(f"Deleted resource {resource}")


# ---- Schema -----------------------------------------------------------------


@schema_app.command("convert")
@cli_error_handler
def convert_schema(
    ctx: typer.Context,
    input_file: str = typer.Argument(..., help="Schema text, or resource types JSON with --to schema"),
    to: str = typer.Option(CONVERT_TO_JSON, "--to", help="output to (schema or json)"),
    output: str = typer.Option(
        OUTPUT_PRETTY,
        "--output",
        "-o",
        help="output pretty or raw. use raw for machine-readable output or writing to a file",
    ),
) -> None:
    """Convert a schema to its JSON resource type representation, or JSON back to schema."""
    if to not in (CONVERT_TO_JSON, CONVERT_TO_SCHEMA):
        raise InvalidArgumentError(f"invalid conversion: {to}")
    if output not in (OUTPUT_PRETTY, OUTPUT_RAW):
        raise InvalidArgumentError(f"invalid output: {output}")

    raw = _read_input_file(input_file)
    client = get_app_context(ctx).client()
    if to == CONVERT_TO_JSON:
        response = client.convert_schema_to_resource_types(raw)
    else:
        payload = parse_json_object(raw, InvalidArgumentError, label="resource types")
        response = client.convert_resource_types_to_schema(payload)

    if output == OUTPUT_RAW:
        if response.schema_text is not None:
            printer.print_msg(response.schema_text)
        else:
            printer.print_json(response.resource_types or [])
        return

    printer.print_msg("Version:")
    printer.print_msg(f"{response.version}\n")
    if response.warnings:
        _print_warnings(response)
    if response.schema_text is not None:
        printer.print_msg("Schema:")
        printer.print_msg(response.schema_text)
    if response.resource_types is not None:
        printer.print_msg("Resource Types:")
        printer.print_json(response.resource_types)


@schema_app.command("apply")
@cli_error_handler
def apply_schema(
    ctx: typer.Context,
    input_file: str = typer.Argument(..., help="Schema text file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="print extra details about the request"),
    strict: bool = typer.Option(False, "--strict", help="fail if there are warnings"),
) -> None:
    """Apply a schema, creating or updating resource types."""
    raw = _read_input_file(input_file)
    client = get_app_context(ctx).client()
    response = client.convert_schema_to_resource_types(raw)

    if response.warnings:
        _print_warnings(response)
        if strict:
            raise SchemaWarningsError("error applying schema: warnings found (omit --strict to ignore)")

    printer.print_msg("applying schema...")
    resource_types = response.resource_types or []
    if verbose:
        printer.print_json(resource_types)

    try:
        client.batch_update_resource_types([rt.model_dump(mode="json") for rt in resource_types])
    except RemoteRequestError as e:
        raise e.with_operation("applying schema")
    printer.print_msg("Schema applied")


__all__ = ["fga_app", "resourcetype_app", "resource_app", "schema_app"]
