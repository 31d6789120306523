"""WorkOS CLI - manage organizations, fine-grained authorization and OAuth credentials.

Usage:
    workos init                      Configure an API key and make it active
    workos env                       Manage configured environments
    workos organization              Manage organizations
    workos fga                       Resource types, relations, checks, queries, schemas
    workos oauthcredentials          Manage OAuth authentication methods
"""

import logging

import typer
from pydantic import ValidationError

from .. import printer
from ..config import load_settings_from_env
from ..exceptions import ConfigurationError, ExitCode
from ..logging import setup_logging
from ..profiles import load_profile_store
from ..prompts import InteractiveParameterSource
from .context import AppContext, get_app_context
from .env import env_app
from .fga import fga_app
from .init import init_command
from .oauthcredential import oauthcredential_app
from .organization import organization_app

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="workos",
    help="WorkOS CLI: manage organizations, fine-grained authorization and OAuth credentials.",
    add_completion=False,
    no_args_is_help=True,
)

app.command(name="init")(init_command)
app.add_typer(env_app, name="env")
app.add_typer(organization_app, name="organization")
app.add_typer(fga_app, name="fga")
app.add_typer(oauthcredential_app, name="oauthcredentials")


@app.callback()
def callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Log debug details (requests, config) to stderr"),
) -> None:
    """Load settings and the profile store once for the whole invocation.

    An AppContext already placed on the context (tests, embedding) is used as is.
    """
    if isinstance(ctx.obj, AppContext):
        return

    try:
        settings = load_settings_from_env()
    except (ValidationError, ValueError) as e:
        printer.print_err_and_exit(f"invalid settings: {e}", code=ExitCode.CONFIG)
    setup_logging(settings, verbose=verbose)

    try:
        store = load_profile_store()
    except ConfigurationError as e:
        logger.debug("config load failed: [%s] %s", e.code, e.message)
        printer.print_err_and_exit(e.message, code=ExitCode.CONFIG)

    ctx.obj = AppContext(settings=settings, store=store, params=InteractiveParameterSource())
    ctx.call_on_close(ctx.obj.close)


def main() -> None:
    """Entry point for the CLI."""
    app()


__all__ = ["app", "main", "AppContext", "get_app_context"]
