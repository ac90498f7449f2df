"""Tests for ConstraintStore and ConstraintConfig."""

import json
import logging
from pathlib import Path

import httpx
import pytest
import yaml

from constraintforge.config import ConstraintConfig
from constraintforge.constraints.store import ConstraintStore
from constraintforge.constraints.types import FieldConstraint
from constraintforge.errors import (
    ConstraintConfigurationError,
    ConstraintDocumentError,
    ConstraintLoadError,
)


CONSTRAINTS = {
    "SuperHero": {
        "name": {
            "javaType": "java.lang.String",
            "types": ["text"],
            "required": True,
            "maximumLength": 50,
            "name": "name",
        },
        "email": {
            "javaType": "java.lang.String",
            "types": ["email", "text"],
            "required": True,
            "maximumLength": 255,
            "name": "email",
        },
    }
}

URL = "https://example.test/api/constraints"


def make_store(handler, **config) -> ConstraintStore:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ConstraintStore(ConstraintConfig(constraints_url=URL, **config), client=client)


def json_handler(body, status_code=200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=body)

    return handler


# =============================================================================
# Configuration
# =============================================================================


class TestConfiguration:
    def test_config_before_configure_raises(self):
        store = ConstraintStore()

        with pytest.raises(ConstraintConfigurationError, match="not initialized"):
            store.config

    def test_configure(self):
        store = ConstraintStore()
        config = ConstraintConfig(constraints_url="/api/constraints")

        store.configure(config)

        assert store.config is config

    @pytest.mark.asyncio
    async def test_load_before_configure_raises(self):
        store = ConstraintStore()

        with pytest.raises(ConstraintConfigurationError):
            await store.load()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CONSTRAINTFORGE_CONSTRAINTS_URL", URL)
        monkeypatch.setenv("CONSTRAINTFORGE_NEEDS_AUTHENTICATION", "True")
        monkeypatch.setenv("CONSTRAINTFORGE_TIMEOUT", "2.5")

        config = ConstraintConfig.from_env()

        assert config == ConstraintConfig(
            constraints_url=URL, needs_authentication=True, timeout=2.5
        )

    def test_from_env_defaults(self, monkeypatch):
        monkeypatch.setenv("CONSTRAINTFORGE_CONSTRAINTS_URL", URL)
        monkeypatch.delenv("CONSTRAINTFORGE_NEEDS_AUTHENTICATION", raising=False)
        monkeypatch.delenv("CONSTRAINTFORGE_TIMEOUT", raising=False)

        config = ConstraintConfig.from_env()

        assert config.needs_authentication is False
        assert config.timeout == 10.0

    def test_from_env_requires_url(self, monkeypatch):
        monkeypatch.delenv("CONSTRAINTFORGE_CONSTRAINTS_URL", raising=False)

        with pytest.raises(ConstraintConfigurationError):
            ConstraintConfig.from_env()

    def test_from_env_rejects_bad_timeout(self, monkeypatch):
        monkeypatch.setenv("CONSTRAINTFORGE_CONSTRAINTS_URL", URL)
        monkeypatch.setenv("CONSTRAINTFORGE_TIMEOUT", "soon")

        with pytest.raises(ConstraintConfigurationError, match="soon"):
            ConstraintConfig.from_env()


# =============================================================================
# Get / Set
# =============================================================================


class TestGetSet:
    def test_empty_by_default(self):
        assert ConstraintStore().get() is None

    def test_set_parses_raw_documents(self):
        store = ConstraintStore()

        store.set(CONSTRAINTS)

        constraint = store.get()["SuperHero"]["email"]
        assert isinstance(constraint, FieldConstraint)
        assert constraint.types == ("email", "text")
        assert constraint.maximum_length == 255

    def test_set_replaces_whole_document(self):
        store = ConstraintStore()
        store.set(CONSTRAINTS)

        store.set({"Villain": {"name": {"required": True}}})

        assert list(store.get()) == ["Villain"]

    def test_set_none_clears(self):
        store = ConstraintStore()
        store.set(CONSTRAINTS)

        store.set(None)

        assert store.get() is None

    @pytest.mark.parametrize(
        "document",
        [
            {"Hero": ["name"]},
            {"Hero": {"name": {"types": [["text"]]}}},
            {"Hero": {"name": {"required": "yes"}}},
        ],
    )
    def test_set_rejects_malformed_document_and_keeps_previous(self, document):
        store = ConstraintStore()
        store.set(CONSTRAINTS)
        previous = store.get()

        with pytest.raises(ConstraintDocumentError, match=r"from set\(\)") as exc_info:
            store.set(document)

        assert exc_info.value.issues
        assert store.get() is previous

    def test_set_accepts_parsed_records(self):
        store = ConstraintStore()
        store.set(CONSTRAINTS)
        parsed = store.get()

        store.set(parsed)

        assert store.get() == parsed


# =============================================================================
# Load
# =============================================================================


class TestLoad:
    @pytest.mark.asyncio
    async def test_load_stores_document(self, caplog):
        store = make_store(json_handler(CONSTRAINTS))

        with caplog.at_level(logging.INFO):
            document = await store.load()

        assert store.get() is document
        assert document["SuperHero"]["name"].maximum_length == 50
        assert "Loaded constraints for 1 entities" in caplog.text

    @pytest.mark.asyncio
    async def test_load_sends_get_to_configured_url(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=CONSTRAINTS)

        await make_store(handler).load()

        assert len(requests) == 1
        assert requests[0].method == "GET"
        assert str(requests[0].url) == URL

    @pytest.mark.asyncio
    async def test_credentials_sent_when_authentication_needed(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=CONSTRAINTS)

        store = make_store(
            handler, needs_authentication=True, credentials=("user", "secret")
        )
        await store.load()

        assert requests[0].headers["Authorization"].startswith("Basic ")

    @pytest.mark.asyncio
    async def test_client_auth_not_sent_without_authentication(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=CONSTRAINTS)

        client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler), auth=("user", "secret")
        )
        store = ConstraintStore(ConstraintConfig(constraints_url=URL), client=client)
        await store.load()

        assert "Authorization" not in requests[0].headers

    @pytest.mark.asyncio
    async def test_client_auth_used_when_no_credentials_configured(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=CONSTRAINTS)

        client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler), auth=("user", "secret")
        )
        store = ConstraintStore(
            ConstraintConfig(constraints_url=URL, needs_authentication=True),
            client=client,
        )
        await store.load()

        assert "Authorization" in requests[0].headers

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [301, 401, 404, 500])
    async def test_non_success_status_keeps_previous_document(self, status_code):
        store = make_store(json_handler({"error": "nope"}, status_code=status_code))
        store.set(CONSTRAINTS)
        previous = store.get()

        with pytest.raises(ConstraintLoadError) as exc_info:
            await store.load()

        assert exc_info.value.status_code == status_code
        assert exc_info.value.url == URL
        assert store.get() is previous

    @pytest.mark.asyncio
    async def test_invalid_json_keeps_previous_document(self):
        def handler(request):
            return httpx.Response(200, content=b"<html>login</html>")

        store = make_store(handler)

        with pytest.raises(ConstraintLoadError, match="not valid JSON"):
            await store.load()

        assert store.get() is None

    @pytest.mark.asyncio
    async def test_undecodable_body_keeps_previous_document(self):
        def handler(request):
            return httpx.Response(200, content=b"\xff\xfe{")

        store = make_store(handler)
        store.set(CONSTRAINTS)
        previous = store.get()

        with pytest.raises(ConstraintLoadError, match="not valid JSON") as exc_info:
            await store.load()

        assert exc_info.value.status_code == 200
        assert store.get() is previous

    @pytest.mark.asyncio
    async def test_transport_error_is_wrapped(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        store = make_store(handler)

        with pytest.raises(ConstraintLoadError) as exc_info:
            await store.load()

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_wrong_shape_keeps_previous_document(self):
        store = make_store(json_handler({"SuperHero": {"name": {"required": "yes"}}}))
        store.set(CONSTRAINTS)
        previous = store.get()

        with pytest.raises(ConstraintDocumentError) as exc_info:
            await store.load()

        assert [issue.path for issue in exc_info.value.issues] == [
            "SuperHero/name/required"
        ]
        assert store.get() is previous


# =============================================================================
# Load File
# =============================================================================


class TestLoadFile:
    def test_yaml_file(self, tmp_path: Path):
        path = tmp_path / "constraints.yaml"
        path.write_text(yaml.dump(CONSTRAINTS))
        store = ConstraintStore()

        store.load_file(path)

        assert store.get()["SuperHero"]["name"].required is True

    def test_json_file(self, tmp_path: Path):
        path = tmp_path / "constraints.json"
        path.write_text(json.dumps(CONSTRAINTS))
        store = ConstraintStore()

        store.load_file(path)

        assert store.get()["SuperHero"]["email"].types == ("email", "text")

    def test_unparseable_file(self, tmp_path: Path):
        path = tmp_path / "broken.yaml"
        path.write_text("SuperHero: [unclosed")
        store = ConstraintStore()

        with pytest.raises(ConstraintDocumentError, match="Failed to parse"):
            store.load_file(path)

        assert store.get() is None

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        store = ConstraintStore()
        store.set(CONSTRAINTS)

        with pytest.raises(ConstraintDocumentError, match="Document is empty"):
            store.load_file(path)

        assert store.get() is not None
