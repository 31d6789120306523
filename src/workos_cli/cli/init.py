"""``workos init`` - configure the first environment and make it active."""

from typing import Optional

import typer

from .. import printer
from ..exceptions import InvalidArgumentError, cli_error_handler
from ..profiles import (
    ENVIRONMENT_TYPE_PRODUCTION,
    ENVIRONMENT_TYPES,
    Profile,
    validate_environment_name,
    validate_environment_type,
)
from .context import get_app_context


@cli_error_handler
def init_command(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Unique name for this API key (e.g. john-local-dev)"),
    api_key: Optional[str] = typer.Argument(None, help="Secret API key"),
    endpoint: Optional[str] = typer.Argument(None, help="API endpoint override"),
    env_type: Optional[str] = typer.Option(None, "--type", "-t", help="Environment type (Production or Sandbox)"),
) -> None:
    """Initialize the CLI for use, including configuring an environment and API key.

    Prompts for anything not passed as an argument.
    """
    app_ctx = get_app_context(ctx)
    params = app_ctx.params
    if env_type is not None:
        validate_environment_type(env_type)

    if name is None:
        api_key = params.text("Enter an API key.", secret=True)
        name = params.text(
            "Give this API key a unique name (e.g. john-local-dev).",
            validate=validate_environment_name,
        )
        if env_type is None:
            env_type = params.select(
                "What environment is this API key for?",
                [(t, t) for t in ENVIRONMENT_TYPES],
            )
        endpoint = params.text("Enter an API endpoint (optional, defaults to https://api.workos.com).")
    elif not api_key:
        raise InvalidArgumentError("a valid API key is required")

    profile = Profile(
        name=validate_environment_name(name),
        type=env_type or ENVIRONMENT_TYPE_PRODUCTION,
        api_key=api_key or "",
        endpoint=(endpoint or "").strip(),
    )
    # single rewrite: add and activate together
    store = app_ctx.store
    store.environments[profile.name] = profile
    store.active_environment = profile.name
    store.write()

    printer.print_msg(f"Active environment set to {profile.name}")
    printer.print_msg("WorkOS CLI initialized")


__all__ = ["init_command"]
