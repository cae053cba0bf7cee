"""Tests for linkedin_auth.config -- settings resolution and credential sources."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from linkedin_auth.config import (
    AUTHORIZATION_URL,
    DEFAULT_STATE_BYTES,
    ENV_AUTHORIZATION_URL,
    ENV_TOKEN_METHOD,
    ENV_TOKEN_URL,
    TOKEN_URL,
    load_settings,
    resolve_credential,
)
from linkedin_auth.exceptions import ConfigError
from linkedin_auth.models import FlowSettings, TokenMethod


# ---------------------------------------------------------------------------
# Provider settings
# ---------------------------------------------------------------------------


class TestLoadSettings:
    def test_defaults_are_linkedin_endpoints(self) -> None:
        settings = load_settings()
        assert settings.authorization_url == AUTHORIZATION_URL
        assert settings.token_url == TOKEN_URL
        assert settings.token_method == TokenMethod.GET
        assert settings.state_bytes == DEFAULT_STATE_BYTES

    def test_env_overrides_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_AUTHORIZATION_URL, "https://env.example.com/auth")
        monkeypatch.setenv(ENV_TOKEN_URL, "https://env.example.com/token")
        monkeypatch.setenv(ENV_TOKEN_METHOD, "post")

        settings = load_settings()
        assert settings.authorization_url == "https://env.example.com/auth"
        assert settings.token_url == "https://env.example.com/token"
        assert settings.token_method == TokenMethod.POST

    def test_arguments_override_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_TOKEN_URL, "https://env.example.com/token")
        monkeypatch.setenv(ENV_TOKEN_METHOD, "POST")

        settings = load_settings(token_url="https://cli.example.com/token", token_method="get")
        assert settings.token_url == "https://cli.example.com/token"
        assert settings.token_method == TokenMethod.GET

    def test_empty_env_value_falls_back_to_default(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(ENV_TOKEN_URL, "")
        assert load_settings().token_url == TOKEN_URL

    def test_unknown_method_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_TOKEN_METHOD, "PATCH")
        with pytest.raises(ConfigError, match="Invalid provider settings"):
            load_settings()

    @pytest.mark.parametrize(
        "value",
        ["not a url", "/oauth/v2/authorization", "http://www.linkedin.com/oauth", "https://"],
    )
    @pytest.mark.parametrize("env_var", [ENV_AUTHORIZATION_URL, ENV_TOKEN_URL])
    def test_endpoint_must_be_absolute_https(
        self, monkeypatch: pytest.MonkeyPatch, env_var: str, value: str
    ) -> None:
        monkeypatch.setenv(env_var, value)
        with pytest.raises(ConfigError, match="Invalid provider settings"):
            load_settings()

    def test_config_error_exit_code(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_settings(token_method="DELETE")
        assert exc_info.value.exit_code == 1


class TestFlowSettingsModel:
    def test_state_bytes_below_minimum_rejected(self) -> None:
        with pytest.raises(ValueError):
            FlowSettings(state_bytes=16)

    def test_larger_state_allowed(self) -> None:
        assert FlowSettings(state_bytes=256).state_bytes == 256

    def test_plain_http_token_url_rejected(self) -> None:
        with pytest.raises(ValueError, match="absolute https URL"):
            FlowSettings(token_url="http://sandbox.example.com/token")

    def test_https_endpoint_kept_verbatim(self) -> None:
        settings = FlowSettings(authorization_url="https://sandbox.example.com/authorize")
        assert settings.authorization_url == "https://sandbox.example.com/authorize"


# ---------------------------------------------------------------------------
# Credential sources
# ---------------------------------------------------------------------------


class TestResolveCredential:
    def test_env_source(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_SECRET", "secret123")
        assert resolve_credential("env:MY_SECRET") == "secret123"

    def test_env_source_missing_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NONEXISTENT_VAR", raising=False)
        with pytest.raises(ConfigError, match="not set"):
            resolve_credential("env:NONEXISTENT_VAR")

    def test_env_source_empty_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EMPTY_SECRET", "")
        assert resolve_credential("env:EMPTY_SECRET") == ""

    def test_file_source(self, tmp_path: Path) -> None:
        cred_file = tmp_path / "secret.txt"
        cred_file.write_text("  my-client-secret  \n", encoding="utf-8")
        assert resolve_credential(f"file:{cred_file}") == "my-client-secret"

    def test_file_source_missing_raises(self) -> None:
        with pytest.raises(ConfigError, match="not found"):
            resolve_credential("file:/nonexistent/path/secret.txt")

    def test_file_source_unreadable_raises(self, tmp_path: Path) -> None:
        cred_file = tmp_path / "unreadable.txt"
        cred_file.write_text("secret", encoding="utf-8")
        cred_file.chmod(0o000)
        try:
            if hasattr(os, "geteuid") and os.geteuid() == 0:
                pytest.skip("root ignores file permissions")
            with pytest.raises(ConfigError, match="Cannot read"):
                resolve_credential(f"file:{cred_file}")
        finally:
            # Restore permissions so pytest can clean up tmp_path
            cred_file.chmod(stat.S_IRUSR | stat.S_IWUSR)

    def test_prompt_source_with_tty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin.isatty", lambda: True)
        monkeypatch.setattr("getpass.getpass", lambda prompt: "user-typed-secret")

        assert resolve_credential("prompt") == "user-typed-secret"

    def test_prompt_source_non_tty_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin.isatty", lambda: False)

        with pytest.raises(ConfigError, match="not a TTY"):
            resolve_credential("prompt")

    def test_unknown_source_raises(self) -> None:
        with pytest.raises(ConfigError, match="Unknown credential source"):
            resolve_credential("keyring:service:account")
