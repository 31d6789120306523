"""``workos oauthcredentials`` - list and create OAuth authentication methods."""

from typing import Iterable, Optional

import typer

from .. import printer
from ..exceptions import InvalidArgumentError, cli_error_handler
from ..models import OAUTH_CREDENTIAL_TYPES, OAuthCredential
from .context import get_app_context

USERLAND_SYMBOLS = {True: "✅", False: "❌"}

oauthcredential_app = typer.Typer(
    help="Manage OAuth Authentication Methods (list, create).",
    no_args_is_help=True,
)


def print_oauth_methods(methods: Iterable[OAuthCredential]) -> None:
    table = printer.new_table("ID", "Type", "State", "Userland Enabled")
    printer.print_rows(
        table,
        ((m.id, m.type, m.state, USERLAND_SYMBOLS[m.is_userland_enabled]) for m in methods),
    )


@oauthcredential_app.command("list")
@cli_error_handler
def list_oauth_credentials(ctx: typer.Context) -> None:
    """List OAuth credentials."""
    credentials = get_app_context(ctx).client().list_oauth_credentials()
    print_oauth_methods(credentials.data)


@oauthcredential_app.command("create")
@cli_error_handler
def create_oauth_credential(
    ctx: typer.Context,
    credential_type: Optional[str] = typer.Argument(
        None, metavar="[TYPE]", help=f"One of: {', '.join(OAUTH_CREDENTIAL_TYPES)}"
    ),
) -> None:
    """Create an OAuth authentication method. Prompts for the type when omitted."""
    app_ctx = get_app_context(ctx)
    if credential_type is None:
        credential_type = app_ctx.params.select(
            "Which OAuth method would you like to create?",
            [(t, t) for t in OAUTH_CREDENTIAL_TYPES],
        )
    elif credential_type not in OAUTH_CREDENTIAL_TYPES:
        raise InvalidArgumentError(
            f"invalid oauth method type: {credential_type} (expected one of {', '.join(OAUTH_CREDENTIAL_TYPES)})"
        )

    credential = app_ctx.client().create_oauth_credential(credential_type)
    print_oauth_methods([credential])


__all__ = ["oauthcredential_app", "print_oauth_methods"]
