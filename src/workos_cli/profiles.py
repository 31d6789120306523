"""Connection profiles ("environments") stored in ``~/.workos.json``.

The file holds every configured environment keyed by name plus a pointer to
the active one:

    {
        "active_environment": "production",
        "environments": {
            "production": {"name": "production", "type": "Production", "api_key": "sk_...", "endpoint": ""}
        }
    }

Environment variables override the file before it is validated, which lets
CI run without a credential file:

    WORKOS_ACTIVE_ENVIRONMENT=headless
    WORKOS_ENVIRONMENTS_HEADLESS_API_KEY=sk_...
    WORKOS_ENVIRONMENTS_HEADLESS_ENDPOINT=https://api.workos.com

Every mutation rewrites the whole document. There is no locking; concurrent
invocations race and the last writer wins.
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, PrivateAttr, ValidationError, model_validator

from .config import ENV_VAR_PREFIX
from .exceptions import (
    ConfigurationError,
    ConfigurationMissingError,
    InvalidArgumentError,
    ProfileNotFoundError,
)

logger = logging.getLogger(__name__)

FILE_PREFIX = ".workos"
FILE_EXTENSION = "json"
FILE_NAME = f"{FILE_PREFIX}.{FILE_EXTENSION}"

HEADLESS_ENVIRONMENT = "headless"
HEADLESS_FIELDS = ("endpoint", "type", "name", "api_key")

ENVIRONMENT_NAME_PATTERN = re.compile(r"[a-z0-9_-]+")
ENVIRONMENT_TYPE_PRODUCTION = "Production"
ENVIRONMENT_TYPE_SANDBOX = "Sandbox"
ENVIRONMENT_TYPES = (ENVIRONMENT_TYPE_PRODUCTION, ENVIRONMENT_TYPE_SANDBOX)

INIT_HINT = "Run 'workos init'"


class Profile(BaseModel):
    """A named credential + endpoint bundle."""

    name: str = ""
    type: str = Field(default="", description="Environment label, e.g. Production or Sandbox")
    api_key: str = ""
    endpoint: str = Field(default="", description="API base URL; empty means the platform default")

    model_config = {"extra": "ignore"}

    def label(self) -> str:
        """Display label used by selectors, e.g. ``dev [Sandbox] [http://localhost:8000]``."""
        text = self.name
        if self.type == ENVIRONMENT_TYPE_SANDBOX:
            text = f"{text} [{ENVIRONMENT_TYPE_SANDBOX}]"
        if self.endpoint:
            text = f"{text} [{self.endpoint}]"
        return text


def validate_environment_name(name: str) -> str:
    """Raise InvalidArgumentError unless name matches ``[a-z0-9_-]+``."""
    if not ENVIRONMENT_NAME_PATTERN.fullmatch(name or ""):
        raise InvalidArgumentError(
            "name must only contain lowercase alphanumeric characters and hyphens (-) or underscores (_)"
        )
    return name


def validate_environment_type(env_type: str) -> str:
    if env_type not in ENVIRONMENT_TYPES:
        raise InvalidArgumentError(
            f"invalid environment type: {env_type} (expected one of {', '.join(ENVIRONMENT_TYPES)})"
        )
    return env_type


class ProfileStore(BaseModel):
    """All configured environments plus the active pointer."""

    active_environment: str = ""
    environments: dict[str, Profile] = Field(default_factory=dict)

    model_config = {"extra": "ignore"}

    _path: Optional[Path] = PrivateAttr(default=None)

    @model_validator(mode="after")
    def _fill_names(self) -> "ProfileStore":
        for key, profile in self.environments.items():
            if not profile.name:
                profile.name = key
        return self

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def bind(self, path: Path) -> "ProfileStore":
        self._path = path
        return self

    def get_active(self) -> Profile:
        """Return the active profile.

        Raises:
            ConfigurationMissingError: nothing active, nothing configured, or
                the active name does not resolve.
        """
        if not self.active_environment:
            raise ConfigurationMissingError(f"no active environment configured. {INIT_HINT}")
        if not self.environments:
            raise ConfigurationMissingError(f"no environments configured. {INIT_HINT}")
        profile = self.environments.get(self.active_environment)
        if profile is None:
            raise ConfigurationMissingError(f"configured active environment is invalid. {INIT_HINT}")
        return profile

    def get_active_or_exit(self) -> Profile:
        """Return the active profile or terminate the process with instructions."""
        try:
            return self.get_active()
        except ConfigurationMissingError as e:
            from . import printer
            from .exceptions import get_exit_code

            logger.debug("active environment unavailable: %s", e.message)
            printer.print_err_and_exit(e.message, code=get_exit_code(e))
            raise  # unreachable; print_err_and_exit raises SystemExit

    def add(self, profile: Profile) -> None:
        """Add or replace an environment by name and persist."""
        validate_environment_name(profile.name)
        self.environments[profile.name] = profile
        self.write()

    def remove(self, name: str) -> None:
        """Delete an environment and persist.

        Removing the active environment leaves the pointer dangling; the
        next command reports it as invalid.
        """
        if name not in self.environments:
            raise ProfileNotFoundError(f"the specified environment does not exist: {name}")
        del self.environments[name]
        self.write()

    def set_active(self, name: str) -> None:
        """Point at another environment and persist."""
        self.active_environment = name
        self.write()

    def write(self) -> None:
        """Serialize the whole store as indented JSON, overwriting the file."""
        path = self._path or config_path()
        contents = json.dumps(self.model_dump(mode="json"), indent=4)
        try:
            path.write_text(contents + "\n", encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"unable to write {path}: {e}", path=str(path)) from e
        logger.debug("wrote %d environment(s) to %s", len(self.environments), path)


def config_path(home: Optional[Path] = None) -> Path:
    """Location of the configuration file in the user's home directory."""
    if home is None:
        try:
            home = Path.home()
        except (RuntimeError, KeyError) as e:
            raise ConfigurationError(f"unable to resolve home directory: {e}") from e
    return Path(home) / FILE_NAME


def _env_var(*keys: str) -> str:
    return "_".join((ENV_VAR_PREFIX, *keys)).upper()


def _as_object(value: Any, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"expected a JSON object at {key}", key=key)
    return dict(value)


def apply_env_overrides(raw: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    """Overlay environment variables onto nested config keys.

    ``active_environment`` maps to ``WORKOS_ACTIVE_ENVIRONMENT``. Fields of
    ``environments.headless`` map to ``WORKOS_ENVIRONMENTS_HEADLESS_<FIELD>``
    and apply only while the active environment is ``headless``.

    Raises:
        ConfigurationError: a section the overrides merge into is not an object.
    """
    merged = dict(raw)
    active = environ.get(_env_var("active_environment"))
    if active is not None:
        merged["active_environment"] = active

    if merged.get("active_environment") == HEADLESS_ENVIRONMENT:
        overrides = {
            field: environ[_env_var("environments", HEADLESS_ENVIRONMENT, field)]
            for field in HEADLESS_FIELDS
            if _env_var("environments", HEADLESS_ENVIRONMENT, field) in environ
        }
        if overrides:
            environments = _as_object(merged.get("environments"), "environments")
            headless = _as_object(environments.get(HEADLESS_ENVIRONMENT), f"environments.{HEADLESS_ENVIRONMENT}")
            headless.update(overrides)
            environments[HEADLESS_ENVIRONMENT] = headless
            merged["environments"] = environments
            logger.debug("applied headless overrides: %s", sorted(overrides))

    return merged


def _create_empty_config_file(path: Path) -> None:
    if not path.exists():
        try:
            path.write_text("{}", encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"unable to create {path}: {e}", path=str(path)) from e
        logger.debug("created empty config file %s", path)


def load_profile_store(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ProfileStore:
    """Read the config file (creating it when absent) and apply env overrides.

    Raises:
        ConfigurationError: the home directory cannot be resolved, or the file
            is not a valid JSON object of the expected shape.
    """
    path = path or config_path()
    environ = os.environ if environ is None else environ
    _create_empty_config_file(path)

    try:
        raw = json.loads(path.read_text(encoding="utf-8") or "{}")
    except OSError as e:
        raise ConfigurationError(f"unable to read {path}: {e}", path=str(path)) from e
    except ValueError as e:
        raise ConfigurationError(f"invalid JSON in {path}: {e}", path=str(path)) from e
    if not isinstance(raw, dict):
        raise ConfigurationError(f"invalid config in {path}: expected a JSON object", path=str(path))

    try:
        merged = apply_env_overrides(raw, environ)
    except ConfigurationError as e:
        raise ConfigurationError(f"invalid config in {path}: {e.message}", path=str(path)) from e

    try:
        store = ProfileStore.model_validate(merged)
    except ValidationError as e:
        raise ConfigurationError(f"invalid config in {path}: {e}", path=str(path)) from e
    return store.bind(path)


__all__ = [
    "Profile",
    "ProfileStore",
    "FILE_NAME",
    "HEADLESS_ENVIRONMENT",
    "ENVIRONMENT_TYPES",
    "ENVIRONMENT_TYPE_PRODUCTION",
    "ENVIRONMENT_TYPE_SANDBOX",
    "validate_environment_name",
    "validate_environment_type",
    "config_path",
    "apply_env_overrides",
    "load_profile_store",
]
