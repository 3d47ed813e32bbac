from __future__ import annotations

import pytest

from s3fetch.common.config import Settings, StorageSettings, get_settings

STORAGE_ENV = {
    "AWS_REGION": "us-east-1",
    "S3_BUCKET_NAME": "test-bucket",
    "S3_FILE_NAME": "hello.txt",
}


@pytest.fixture(autouse=True)
def clear_caches():
    get_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture
def storage_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    monkeypatch.delenv("PORT", raising=False)
    for key in ("S3_ENDPOINT_URL", "ENABLE_METRICS", "LOG_FORMAT"):
        monkeypatch.delenv(key, raising=False)
    for key, value in STORAGE_ENV.items():
        monkeypatch.setenv(key, value)
    return dict(STORAGE_ENV)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        storage=StorageSettings(
            region="us-east-1",
            bucket_name="test-bucket",
            object_key="hello.txt",
        ),
    )
