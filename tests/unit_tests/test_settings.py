import pytest
from pydantic import ValidationError

from content_files_api.config.settings import Settings, get_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "STORAGE_BACKEND",
        "STORAGE_CONNECTION_STRING",
        "STORAGE_DIR",
        "LOG_LEVEL",
        "AWS_DEFAULT_REGION",
        "AWS_ENDPOINT_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.storage_backend == "local"
    assert settings.storage_connection_string is None
    assert settings.log_level == "INFO"
    assert settings.aws_region == "us-east-1"


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "S3")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")
    monkeypatch.setenv("AWS_ENDPOINT_URL", "http://localhost:5000")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.storage_backend == "s3"
    assert settings.aws_region == "eu-west-1"
    assert settings.aws_endpoint_url == "http://localhost:5000"
    assert settings.log_level == "DEBUG"


def test_rejects_unknown_backend():
    with pytest.raises(ValidationError, match="Invalid storage_backend"):
        Settings(_env_file=None, storage_backend="ftp")


def test_azure_requires_connection_string():
    with pytest.raises(ValidationError, match="storage_connection_string is required"):
        Settings(_env_file=None, storage_backend="azure")


def test_azure_with_connection_string():
    settings = Settings(
        _env_file=None,
        storage_backend="azure",
        storage_connection_string="DefaultEndpointsProtocol=https;AccountName=acct;AccountKey=secret",
    )
    assert settings.storage_backend == "azure"


def test_describe_masks_connection_string():
    settings = Settings(
        _env_file=None,
        storage_backend="azure",
        storage_connection_string="DefaultEndpointsProtocol=https;AccountName=acct;AccountKey=secret",
    )

    description = settings.describe()

    assert description["Storage Connection String"] == "***"
    assert "secret" not in str(description)


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
