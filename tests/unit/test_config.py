"""Unit tests for configuration."""
import pytest
from pydantic import ValidationError

from donezo.config import Settings


def test_settings_defaults():
    """Test default settings values."""
    settings = Settings(password="secret", _env_file=None)

    assert settings.environment == "development"
    assert settings.host == "0.0.0.0"
    assert settings.port == 3000
    assert settings.base_path == ""
    assert settings.database_url == "sqlite:///todos.db"
    assert settings.otel_enabled is False
    assert settings.password.get_secret_value() == "secret"


def test_settings_password_required(monkeypatch):
    """The login secret has no default."""
    monkeypatch.delenv("DONEZO_PASSWORD", raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_settings_from_environment(monkeypatch):
    """Settings are read from DONEZO_* variables."""
    monkeypatch.setenv("DONEZO_PASSWORD", "from-env")
    monkeypatch.setenv("DONEZO_PORT", "8080")
    monkeypatch.setenv("DONEZO_BASE_PATH", "/todo")

    settings = Settings(_env_file=None)

    assert settings.password.get_secret_value() == "from-env"
    assert settings.port == 8080
    assert settings.base_path == "/todo"


def test_settings_password_not_exposed_in_repr():
    """The secret is masked when settings are printed."""
    settings = Settings(password="hunter2", _env_file=None)
    assert "hunter2" not in repr(settings)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("", ""),
        ("/", ""),
        ("todo", "/todo"),
        ("/todo", "/todo"),
        ("/todo/", "/todo"),
        ("apps/todo//", "/apps/todo"),
    ],
)
def test_settings_base_path_normalized(raw, expected):
    """Base paths get a leading slash and lose trailing ones."""
    settings = Settings(password="secret", base_path=raw, _env_file=None)
    assert settings.base_path == expected


def test_settings_otlp_headers():
    """OTLP headers are parsed from key=value pairs."""
    settings = Settings(
        password="secret",
        otel_exporter_otlp_headers="x-api-key=abc,broken,x-team=core",
        _env_file=None,
    )
    assert settings.get_otlp_headers() == {"x-api-key": "abc", "x-team": "core"}
