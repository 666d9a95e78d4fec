import pytest

from app.config import Settings
from app.core.exceptions import ConfigurationError


def test_list_settings_accept_csv_and_json():
    settings = Settings(
        CORS_ORIGINS='["http://a.com", "http://b.com"]',
        BANNED_WORDS="Kerfuffle, sharbert ,,FORNAX",
    )

    assert settings.CORS_ORIGINS == ["http://a.com", "http://b.com"]
    assert settings.BANNED_WORDS == ["kerfuffle", "sharbert", "fornax"]


def test_platform_controls_dev_mode():
    assert Settings(PLATFORM="dev").is_dev_platform
    assert not Settings(PLATFORM="prod").is_dev_platform


def test_empty_secret_is_fatal():
    with pytest.raises(ConfigurationError):
        Settings(JWT_SECRET="").validate_security_settings()


def test_production_rejects_weak_secret():
    with pytest.raises(ConfigurationError):
        Settings(ENVIRONMENT="production", JWT_SECRET="change-me").validate_security_settings()

    Settings(ENVIRONMENT="production", JWT_SECRET="x" * 64).validate_security_settings()


def test_fileserver_root_defaults_to_public_dir():
    assert Settings(FILESERVER_ROOT="").get_fileserver_root().endswith("public")
    assert Settings(FILESERVER_ROOT="/srv/www").get_fileserver_root() == "/srv/www"
