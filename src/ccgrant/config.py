"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for ccgrant:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.ccgrant/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_registrations_dir`.
* **Global config** -- A single :class:`~ccgrant.models.GlobalConfig`
  JSON file storing defaults (default registration, HTTP settings, output).
* **Registrations** -- One JSON file per OAuth client, each deserialised into
  a :class:`~ccgrant.models.RegistrationConfig`. Managed via
  :func:`load_registration`, :func:`save_registration`,
  :func:`delete_registration`.
* **Credential resolution** -- :func:`resolve_credential` reads client
  secrets from env vars, files, or interactive prompts. Secrets are never
  written into the registration files.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional

from ccgrant.exceptions import ConfigError
from ccgrant.models import ClientRegistration, GlobalConfig, RegistrationConfig

_APP_NAME = "ccgrant"
_CONFIG_FILENAME = "config.json"
_REGISTRATION_ENV_VAR = "CCGRANT_REGISTRATION"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform follows the XDG Base Directory layout (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/ccgrant/`` (default ``~/.config/ccgrant/``).
    On macOS/Windows: ``~/.ccgrant/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_registrations_dir() -> Path:
    """Return ``<config_dir>/registrations/``, creating it if necessary."""
    path = get_config_dir() / "registrations"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* through a temp file in the same directory and ``os.replace``."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration.

    Returns:
        The deserialised :class:`~ccgrant.models.GlobalConfig`, or a default
        instance if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Registrations ---


def _registration_path(name: str) -> Path:
    return get_registrations_dir() / f"{name}.json"


def list_registrations() -> list[str]:
    """Return all stored registration names, sorted alphabetically."""
    return sorted(
        p.stem for p in get_registrations_dir().glob("*.json") if p.is_file()
    )


def registration_exists(name: str) -> bool:
    return _registration_path(name).is_file()


def load_registration(name: str) -> RegistrationConfig:
    """Load and validate a stored registration.

    Raises:
        ConfigError: If the file does not exist, contains invalid JSON, or
            fails Pydantic validation.
    """
    path = _registration_path(name)
    if not path.is_file():
        raise ConfigError(f"Registration '{name}' not found at {path}")
    try:
        return RegistrationConfig.model_validate(
            json.loads(path.read_text(encoding="utf-8"))
        )
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid registration '{name}' at {path}: {exc}") from exc


def save_registration(registration: RegistrationConfig) -> None:
    """Persist *registration* atomically; the file name is derived from its ``name``."""
    data = registration.model_dump(mode="json")
    _atomic_write(
        _registration_path(registration.name), json.dumps(data, indent=2) + "\n"
    )


def delete_registration(name: str) -> None:
    """Delete a stored registration.

    Raises:
        ConfigError: If the registration does not exist.
    """
    path = _registration_path(name)
    if not path.is_file():
        raise ConfigError(f"Registration '{name}' not found at {path}")
    path.unlink()


# --- Precedence resolution ---


def resolve_registration_name(
    cli_name: Optional[str] = None,
    config: Optional[GlobalConfig] = None,
) -> str:
    """Pick the registration to use.

    Precedence (high to low):
        1. The name given on the command line.
        2. The ``CCGRANT_REGISTRATION`` environment variable.
        3. ``default_registration`` from the global config.
        4. The only stored registration, if exactly one exists.

    Raises:
        ConfigError: If no registration can be selected.
    """
    if cli_name:
        return cli_name
    env_name = os.environ.get(_REGISTRATION_ENV_VAR)
    if env_name:
        return env_name
    if config is None:
        config = load_global_config()
    if config.default_registration:
        return config.default_registration
    names = list_registrations()
    if len(names) == 1:
        return names[0]
    raise ConfigError(
        "No registration selected. Pass a name, set "
        f"{_REGISTRATION_ENV_VAR}, or set default_registration."
    )


def build_client_registration(registration: RegistrationConfig) -> ClientRegistration:
    """Resolve the client secret of *registration* and build the protocol model."""
    secret = resolve_credential(registration.client_secret_source)
    return registration.to_client_registration(secret)


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts interactively (requires a TTY)

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("Client secret: ")

    raise ConfigError(f"Unknown credential source format: {source}")
