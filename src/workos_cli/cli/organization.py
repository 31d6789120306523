"""``workos organization`` - create, update, get, list and delete organizations."""

from typing import List, Optional

import typer

from .. import printer
from ..exceptions import InvalidArgumentError, cli_error_handler
from ..prompts import ParameterSource
from .context import get_app_context, normalize_order

DOMAIN_STATE_PENDING = "pending"
DOMAIN_STATE_VERIFIED = "verified"
DOMAIN_STATES = (DOMAIN_STATE_PENDING, DOMAIN_STATE_VERIFIED)

SELECTOR_PAGE_SIZE = 100

organization_app = typer.Typer(
    help="Create, update, and delete organizations and manage organization domain policies.",
    no_args_is_help=True,
)


def _domain_data(domain: Optional[str], state: Optional[str]) -> list[dict[str, str]]:
    if not domain:
        if state:
            raise InvalidArgumentError("a domain is required when a domain state is given")
        return []
    state = (state or DOMAIN_STATE_PENDING).lower()
    if state not in DOMAIN_STATES:
        raise InvalidArgumentError(f"invalid domain state: {state} (expected pending or verified)")
    return [{"domain": domain, "state": state}]


def _prompt_organization(params: ParameterSource) -> tuple[str, list[dict[str, str]]]:
    """Ask for a name, then domains until one is left blank or the user stops."""
    name = params.text("Organization Name")
    domains: list[dict[str, str]] = []
    while True:
        domain = params.text("Organization Domain (optional)").strip()
        if not domain:
            break
        domains.append({"domain": domain, "state": DOMAIN_STATE_VERIFIED})
        if not params.confirm("Would you like to add another Domain (optional)"):
            break
    return name, domains


def _select_organization(ctx: typer.Context) -> str:
    app_ctx = get_app_context(ctx)
    orgs = app_ctx.client().list_organizations(limit=SELECTOR_PAGE_SIZE)
    if not orgs.data:
        raise InvalidArgumentError("no organizations found")
    options = [(f"{org.name} ({org.id})", org.id) for org in orgs.data]
    return app_ctx.params.select("Select an organization.", options)


@organization_app.command("create")
@cli_error_handler
def create_organization(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Organization name"),
    domain: Optional[str] = typer.Argument(None, help="Organization domain (e.g. foo-corp.com)"),
    state: Optional[str] = typer.Argument(None, help="Domain state: pending (default) or verified"),
) -> None:
    """Create a new organization with a name and optional domain.

    Without arguments, prompts for the name and any number of domains.
    """
    app_ctx = get_app_context(ctx)
    if name is None:
        name, domain_data = _prompt_organization(app_ctx.params)
    else:
        domain_data = _domain_data(domain, state)

    org = app_ctx.client().create_organization(name, domain_data)
    printer.print_msg(f"Created organization {org.name} ({org.id})")


@organization_app.command("update")
@cli_error_handler
def update_organization(
    ctx: typer.Context,
    organization_id: str = typer.Argument(..., metavar="ID", help="Organization ID"),
    name: str = typer.Argument(..., help="New organization name"),
    domain: Optional[str] = typer.Argument(None, help="Organization domain"),
    state: Optional[str] = typer.Argument(None, help="Domain state: pending (default) or verified"),
) -> None:
    """Update an organization's name and, optionally, its domain."""
    domain_data = _domain_data(domain, state)
    org = get_app_context(ctx).client().update_organization(organization_id, name, domain_data or None)
    printer.print_msg(f"Updated organization {org.id}")


@organization_app.command("get")
@cli_error_handler
def get_organization(
    ctx: typer.Context,
    organization_id: Optional[str] = typer.Argument(None, metavar="[ID]", help="Organization ID"),
) -> None:
    """Print an organization as JSON."""
    if organization_id is None:
        organization_id = _select_organization(ctx)
    org = get_app_context(ctx).client().get_organization(organization_id)
    printer.print_json(org)


@organization_app.command("list")
@cli_error_handler
def list_organizations(
    ctx: typer.Context,
    domain: Optional[List[str]] = typer.Option(None, "--domain", help="Filter by domain (repeatable)"),
    limit: int = typer.Option(10, "--limit", min=1, help="limit the number of results returned"),
    before: str = typer.Option("", "--before", help="cursor indicating results that occur before a specific result"),
    after: str = typer.Option("", "--after", help="cursor indicating results that occur after a specific result"),
    order: str = typer.Option("", "--order", help="order in which a list of results should be returned (asc or desc)"),
) -> None:
    """List organizations, optionally filtered by domain."""
    orgs = get_app_context(ctx).client().list_organizations(
        domains=domain or [],
        limit=limit,
        before=before,
        after=after,
        order=normalize_order(order),
    )
    table = printer.new_table("ID", "Name", "Domains")
    printer.print_rows(table, ((org.id, org.name, ", ".join(org.domain_names())) for org in orgs.data))
    printer.print_pagination(orgs.list_metadata.before, orgs.list_metadata.after)


@organization_app.command("delete")
@cli_error_handler
def delete_organization(
    ctx: typer.Context,
    organization_id: Optional[str] = typer.Argument(None, metavar="[ID]", help="Organization ID"),
) -> None:
    """Delete an organization. Prompts for a selection when no ID is given."""
    if organization_id is None:
        organization_id = _select_organization(ctx)
    get_app_context(ctx).client().delete_organization(organization_id)
    printer.print_msg(f"Deleted organization {organization_id}")


__all__ = ["organization_app"]
