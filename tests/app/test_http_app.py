"""测试 HTTP 应用：对象读取端点与错误映射（使用 Mock 存储避免真实 S3 依赖）。"""

from __future__ import annotations

import dataclasses

import pytest
from fastapi.testclient import TestClient

from s3fetch.api.v1.deps import get_fetch_service
from s3fetch.common.config import Settings, StorageSettings
from s3fetch.infra.storage.client import StoredObject
from s3fetch.main import _status_for_error, create_app
from s3fetch.services.errors import (
    ObjectNotFoundError,
    StorageAuthenticationError,
    StorageInternalError,
    StorageUnavailableError,
)
from s3fetch.services.fetch_service import FetchService
from tests.services.mock_storage import (
    MockObjectBody,
    MockStorageClient,
    failing_client,
)


def _client_for(settings, storage: MockStorageClient) -> TestClient:
    service = FetchService(settings, client=storage)
    return TestClient(create_app(settings, fetch_service=service))


class TestObjectEndpoint:
    """测试 /api/v1/object 端点。"""

    def test_returns_content_as_plain_text(self, settings) -> None:
        """成功读取时应该返回纯文本内容。"""
        storage = MockStorageClient()
        storage.put_text("test-bucket", "hello.txt", "Hello, World!")

        r = _client_for(settings, storage).get("/api/v1/object")

        assert r.status_code == 200
        assert r.text == "Hello, World!"
        assert r.headers["content-type"].startswith("text/plain")

    def test_empty_object(self, settings) -> None:
        """空对象应该返回空字符串。"""
        storage = MockStorageClient()
        storage.put_text("test-bucket", "hello.txt", "")

        r = _client_for(settings, storage).get("/api/v1/object")

        assert r.status_code == 200
        assert r.text == ""

    @pytest.mark.parametrize(
        ("code", "status", "error_code", "detail"),
        [
            ("NoSuchKey", 404, "not_found", "File or bucket not found"),
            ("NetworkingError", 503, "service_unavailable", "S3 service is unavailable"),
            ("AccessDenied", 403, "forbidden", "Access denied"),
            ("UnknownError", 500, "internal_error", "Unexpected error occurred"),
        ],
    )
    def test_maps_fetch_errors_to_problem_json(
        self, settings, code, status, error_code, detail
    ) -> None:
        """存储错误应该映射为对应状态码的 problem+json 响应。"""
        client = _client_for(settings, failing_client(code))

        r = client.get("/api/v1/object", headers={"X-Request-Id": "req-1"})

        assert r.status_code == status
        assert r.headers["content-type"].startswith("application/problem+json")
        payload = r.json()
        assert payload["status"] == status
        assert payload["error_code"] == error_code
        assert payload["detail"] == detail
        assert payload["request_id"] == "req-1"

    def test_unknown_route_uses_problem_json(self, settings) -> None:
        """未知路由应该返回 problem+json 格式的 404。"""
        client = _client_for(settings, MockStorageClient())

        r = client.get("/api/v1/missing")

        assert r.status_code == 404
        assert r.json()["error_code"] == "not_found"


class TestStatusForError:
    """测试错误类型到 HTTP 状态码的映射。"""

    def test_each_kind_has_a_status(self) -> None:
        assert _status_for_error(ObjectNotFoundError("x")) == 404
        assert _status_for_error(StorageUnavailableError("x")) == 503
        assert _status_for_error(StorageAuthenticationError("x")) == 403
        assert _status_for_error(StorageInternalError("x")) == 500


def test_health(settings) -> None:
    client = _client_for(settings, MockStorageClient())
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_metrics_can_be_disabled(settings) -> None:
    app = create_app(
        dataclasses.replace(settings, enable_metrics=False),
        fetch_service=FetchService(settings, client=MockStorageClient()),
    )
    r = TestClient(app).get("/metrics")
    assert r.status_code == 404


class TestAppSettingsBinding:
    """测试应用绑定到传入的配置，而不是重新读取环境变量。"""

    @pytest.fixture
    def echo_s3(self, monkeypatch: pytest.MonkeyPatch) -> list[object]:
        """用回显 bucket/key 的桩替换 S3StorageClient。"""
        import s3fetch.infra.storage.s3_client as s3_client_mod

        built: list[object] = []

        class _EchoS3Client:
            def __init__(self, *, settings) -> None:
                built.append(settings)

            def get_object(self, *, bucket: str, object_key: str) -> StoredObject:
                return StoredObject(body=MockObjectBody(f"{bucket}/{object_key}"))

        monkeypatch.setattr(s3_client_mod, "S3StorageClient", _EchoS3Client)
        return built

    def test_explicit_settings_without_environment(
        self, echo_s3, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """显式传入配置且环境变量缺失时，应该读取配置中的对象。"""
        for key in ("AWS_REGION", "S3_BUCKET_NAME", "S3_FILE_NAME"):
            monkeypatch.delenv(key, raising=False)
        settings = Settings(
            storage=StorageSettings(
                region="eu-west-1", bucket_name="explicit", object_key="k.txt"
            )
        )

        r = TestClient(create_app(settings)).get("/api/v1/object")

        assert r.status_code == 200
        assert r.text == "explicit/k.txt"
        assert echo_s3 == [settings.storage]

    def test_reads_settings_from_environment_by_default(
        self, echo_s3, storage_env
    ) -> None:
        """未传入配置时应该从环境变量加载。"""
        r = TestClient(create_app()).get("/api/v1/object")

        assert r.status_code == 200
        assert r.text == "test-bucket/hello.txt"

    def test_fetch_service_dependency_is_overridable(self, settings) -> None:
        """依赖覆盖应该替换应用绑定的服务。"""
        storage = MockStorageClient()
        storage.put_text("test-bucket", "hello.txt", "overridden")
        app = create_app(
            settings, fetch_service=FetchService(settings, client=MockStorageClient())
        )
        app.dependency_overrides[get_fetch_service] = lambda: FetchService(
            settings, client=storage
        )

        r = TestClient(app).get("/api/v1/object")

        assert r.status_code == 200
        assert r.text == "overridden"
