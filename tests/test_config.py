"""Tests for ccgrant.config -- XDG paths, registrations, precedence, credentials."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ccgrant.config import (
    _atomic_write,
    build_client_registration,
    delete_registration,
    get_config_dir,
    get_registrations_dir,
    list_registrations,
    load_global_config,
    load_registration,
    registration_exists,
    resolve_credential,
    resolve_registration_name,
    save_global_config,
    save_registration,
)
from ccgrant.exceptions import ConfigError
from ccgrant.models import ClientAuthenticationMethod, GlobalConfig, RegistrationConfig


def _make_registration(name: str = "billing", **kwargs: object) -> RegistrationConfig:
    defaults: dict[str, object] = {
        "name": name,
        "token_uri": "https://auth.example.com/oauth2/token",
        "client_id": "billing-svc",
        "client_secret_source": "env:BILLING_SECRET",
    }
    defaults.update(kwargs)
    return RegistrationConfig(**defaults)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


class TestPaths:
    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("ccgrant.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))

        result = get_config_dir()
        assert result == tmp_path / "xdg" / "ccgrant"
        assert result.is_dir()

    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("ccgrant.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".config" / "ccgrant"

    def test_config_dir_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("ccgrant.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".ccgrant"

    def test_registrations_dir(self, isolated_config: Path) -> None:
        assert get_registrations_dir() == isolated_config / "config" / "ccgrant" / "registrations"


class TestAtomicWrite:
    def test_writes_and_leaves_no_temp_files(self, tmp_path: Path) -> None:
        target = tmp_path / "sub" / "file.json"
        _atomic_write(target, "{}\n")
        assert target.read_text() == "{}\n"
        assert list(target.parent.iterdir()) == [target]

    def test_overwrites(self, tmp_path: Path) -> None:
        target = tmp_path / "file.json"
        target.write_text("old")
        _atomic_write(target, "new")
        assert target.read_text() == "new"


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_missing_file_gives_defaults(self, isolated_config: Path) -> None:
        assert load_global_config() == GlobalConfig()

    def test_round_trip(self, isolated_config: Path) -> None:
        config = GlobalConfig(default_registration="billing")
        config.request.timeout = 5
        save_global_config(config)
        assert load_global_config() == config

    def test_invalid_json(self, isolated_config: Path) -> None:
        (get_config_dir() / "config.json").write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()


# ---------------------------------------------------------------------------
# Registrations
# ---------------------------------------------------------------------------


class TestRegistrations:
    def test_save_and_load(self, isolated_config: Path) -> None:
        registration = _make_registration(scopes=["read:invoices"])
        save_registration(registration)

        assert registration_exists("billing")
        assert load_registration("billing") == registration

    def test_list_sorted(self, isolated_config: Path) -> None:
        for name in ("zeta", "alpha"):
            save_registration(_make_registration(name))
        assert list_registrations() == ["alpha", "zeta"]

    def test_load_missing(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_registration("nope")

    def test_load_invalid(self, isolated_config: Path) -> None:
        (get_registrations_dir() / "bad.json").write_text(json.dumps({"name": "bad"}))
        with pytest.raises(ConfigError, match="Invalid registration 'bad'"):
            load_registration("bad")

    def test_delete(self, isolated_config: Path) -> None:
        save_registration(_make_registration())
        delete_registration("billing")
        assert not registration_exists("billing")

    def test_delete_missing(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError):
            delete_registration("nope")

    def test_build_client_registration(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("BILLING_SECRET", "s3cret")
        registration = build_client_registration(
            _make_registration(client_authentication_method="post")
        )
        assert registration.client_secret == "s3cret"
        assert registration.client_authentication_method == ClientAuthenticationMethod.CLIENT_SECRET_POST


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveRegistrationName:
    def test_cli_wins(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CCGRANT_REGISTRATION", "from-env")
        config = GlobalConfig(default_registration="from-config")
        assert resolve_registration_name("from-cli", config) == "from-cli"

    def test_env_over_config(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CCGRANT_REGISTRATION", "from-env")
        config = GlobalConfig(default_registration="from-config")
        assert resolve_registration_name(None, config) == "from-env"

    def test_config_default(self, isolated_config: Path) -> None:
        config = GlobalConfig(default_registration="from-config")
        assert resolve_registration_name(None, config) == "from-config"

    def test_single_registration(self, isolated_config: Path) -> None:
        save_registration(_make_registration("only"))
        assert resolve_registration_name() == "only"

    def test_nothing_selected(self, isolated_config: Path) -> None:
        save_registration(_make_registration("one"))
        save_registration(_make_registration("two"))
        with pytest.raises(ConfigError, match="No registration selected"):
            resolve_registration_name()


# ---------------------------------------------------------------------------
# Credential sources
# ---------------------------------------------------------------------------


class TestResolveCredential:
    def test_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_SECRET", "value")
        assert resolve_credential("env:MY_SECRET") == "value"

    def test_env_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MY_SECRET", raising=False)
        with pytest.raises(ConfigError, match="MY_SECRET"):
            resolve_credential("env:MY_SECRET")

    def test_file(self, tmp_path: Path) -> None:
        secret = tmp_path / "secret.txt"
        secret.write_text("  s3cret\n")
        assert resolve_credential(f"file:{secret}") == "s3cret"

    def test_file_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            resolve_credential(f"file:{tmp_path / 'missing'}")

    def test_prompt_without_tty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin.isatty", lambda: False)
        with pytest.raises(ConfigError, match="not a TTY"):
            resolve_credential("prompt")

    def test_prompt_with_tty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin.isatty", lambda: True)
        monkeypatch.setattr("ccgrant.config.getpass.getpass", lambda prompt: "typed")
        assert resolve_credential("prompt") == "typed"

    def test_unknown(self) -> None:
        with pytest.raises(ConfigError, match="Unknown credential source"):
            resolve_credential("vault:thing")
