"""``workos env`` - add, remove, switch and list configured environments."""

from typing import Optional

import typer

from .. import printer
from ..exceptions import ConfigurationMissingError, InvalidArgumentError, ProfileNotFoundError, cli_error_handler
from ..profiles import (
    ENVIRONMENT_TYPE_PRODUCTION,
    ENVIRONMENT_TYPES,
    INIT_HINT,
    Profile,
    validate_environment_name,
    validate_environment_type,
)
from .context import get_app_context

env_app = typer.Typer(
    help="Add and remove WorkOS environments configured for use with the CLI.",
    no_args_is_help=True,
)


@env_app.command("add")
@cli_error_handler
def add_env(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Environment name (e.g. local, staging)"),
    api_key: Optional[str] = typer.Argument(None, help="API key for the environment"),
    endpoint_arg: Optional[str] = typer.Argument(None, metavar="[ENDPOINT]", help="API endpoint override"),
    endpoint: str = typer.Option("", "--endpoint", help="Override the API endpoint"),
    env_type: Optional[str] = typer.Option(None, "--type", "-t", help="Environment type (Production or Sandbox)"),
) -> None:
    """Configure an existing WorkOS environment for use with the CLI."""
    app_ctx = get_app_context(ctx)
    params = app_ctx.params

    if name is not None:
        if not api_key:
            raise InvalidArgumentError("a valid API key is required")
        if endpoint_arg:
            endpoint = endpoint_arg
        env_type = validate_environment_type(env_type or ENVIRONMENT_TYPE_PRODUCTION)
    else:
        name = params.text(
            "Enter a name for the new environment (e.g. local, staging, etc).",
            validate=validate_environment_name,
        )
        if env_type is None:
            env_type = params.select("Select the type of environment.", [(t, t) for t in ENVIRONMENT_TYPES])
        else:
            validate_environment_type(env_type)
        api_key = params.text("Enter a valid API key for the environment.", secret=True)

    app_ctx.store.add(Profile(name=name, type=env_type, api_key=api_key, endpoint=endpoint.strip()))
    printer.print_msg(f"Environment {name} added")


@env_app.command("remove")
@cli_error_handler
def remove_env(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Environment to remove"),
) -> None:
    """Remove a previously configured environment from the WorkOS CLI."""
    app_ctx = get_app_context(ctx)
    if name is None:
        name = app_ctx.params.text(
            "Enter the name of the environment you would like to remove (e.g. sandbox)",
            validate=validate_environment_name,
        )
    app_ctx.store.remove(name)
    printer.print_msg(f"Environment {name} removed")


@env_app.command("switch")
@cli_error_handler
def switch_env(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Environment to make active"),
) -> None:
    """Switch to using a different environment for subsequent WorkOS CLI commands."""
    app_ctx = get_app_context(ctx)
    store = app_ctx.store
    if not store.environments:
        raise ConfigurationMissingError(f"no environments configured. {INIT_HINT}")

    if name is None:
        options = [(profile.label(), key) for key, profile in sorted(store.environments.items())]
        name = app_ctx.params.select("Select an environment.", options)
    elif name not in store.environments:
        raise ProfileNotFoundError(f"the specified environment does not exist: {name}")

    store.set_active(name)
    printer.print_msg(f"Switched to environment {name}")


@env_app.command("list")
@cli_error_handler
def list_env(ctx: typer.Context) -> None:
    """List configured environments; the active one is marked."""
    store = get_app_context(ctx).store
    table = printer.new_table("Active", "Name", "Type", "Endpoint")
    rows = [
        (
            printer.CHECKMARK if key == store.active_environment else "",
            key,
            profile.type,
            profile.endpoint,
        )
        for key, profile in sorted(store.environments.items())
    ]
    printer.print_rows(table, rows)


__all__ = ["env_app"]
