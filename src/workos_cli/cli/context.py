"""Per-invocation state handed to every command through ``typer.Context.obj``."""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import typer

from ..config import CLISettings
from ..profiles import Profile, ProfileStore
from ..prompts import ParameterSource
from ..sdk import client_for_profile

ClientFactory = Callable[[Profile, CLISettings], Any]


@dataclass
class AppContext:
    """Settings, the loaded profile store and how to reach the API.

    ``client()`` resolves the active profile on first use, so commands that
    only touch the local store (``init``, ``env``) never require one.
    """

    settings: CLISettings
    store: ProfileStore
    params: ParameterSource
    client_factory: ClientFactory = client_for_profile
    _client: Optional[Any] = field(default=None, repr=False)

    def active_profile(self) -> Profile:
        return self.store.get_active_or_exit()

    def client(self) -> Any:
        if self._client is None:
            self._client = self.client_factory(self.active_profile(), self.settings)
        return self._client

    def close(self) -> None:
        close = getattr(self._client, "close", None)
        if close is not None:
            close()


def get_app_context(ctx: typer.Context) -> AppContext:
    obj = ctx.find_object(AppContext)
    if obj is None:
        raise RuntimeError("AppContext is not initialized; invoke commands through the root app")
    return obj


def normalize_order(order: str) -> str:
    """Map a user-supplied sort order onto the API values; empty keeps the default."""
    if not order:
        return ""
    return "asc" if order.lower() == "asc" else "desc"


__all__ = ["AppContext", "ClientFactory", "get_app_context", "normalize_order"]
