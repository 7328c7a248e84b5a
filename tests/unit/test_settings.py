"""Tests for settings and database URL resolution."""

import pytest

from backend.tripdesk.config import Settings, get_settings
from backend.tripdesk.db.engine import resolve_database_url


def test_settings_accessible() -> None:
    """Test that Settings can be imported and accessed."""
    settings = get_settings()
    assert settings is not None
    assert get_settings() is settings


def test_limits_have_sane_defaults() -> None:
    settings = Settings()
    assert settings.max_image_bytes == 10 * 1024 * 1024
    assert settings.collaborator_timeout_s > 0
    assert settings.submissions_list_limit > 0
    assert settings.idempotency_ttl_seconds > 0


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCUMENT_RENDERER_URL", "https://renderer.test/render")
    monkeypatch.setenv("MAX_IMAGE_BYTES", "1024")

    settings = Settings()

    assert settings.document_renderer_url == "https://renderer.test/render"
    assert settings.max_image_bytes == 1024


@pytest.mark.parametrize(
    ("configured", "resolved"),
    [
        ("postgresql://u:p@db:5432/trips", "postgresql+asyncpg://u:p@db:5432/trips"),
        ("sqlite:///./trips.db", "sqlite+aiosqlite:///./trips.db"),
        ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
    ],
)
def test_database_url_switches_to_async_driver(configured: str, resolved: str) -> None:
    assert resolve_database_url(Settings(database_url=configured)) == resolved


def test_placeholder_database_url_is_refused(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)

    with pytest.raises(ValueError):
        resolve_database_url(Settings(database_url=None, _env_file=None))  # type: ignore[call-arg]
