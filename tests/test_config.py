"""Tests for settings resolution."""

from __future__ import annotations

import pytest

from backend.config import (
    DEFAULT_CATALOG_BASE_URL,
    DEFAULT_JWT_SECRET,
    HOSTED_CATALOG_BASE_URL,
    Settings,
    resolve_catalog_base_url,
)


@pytest.fixture()
def clean_env(monkeypatch):
    for name in (
        "CATALOG_BASE_URL",
        "FAKESTORE_BASE_URL",
        "RENDER",
        "JWT_SECRET",
        "STRIPE_SECRET_KEY",
        "PORT",
        "FRONTEND_URL",
        "CORS_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestCatalogBaseUrl:
    def test_default(self, clean_env) -> None:
        assert resolve_catalog_base_url() == DEFAULT_CATALOG_BASE_URL

    def test_hosted_heuristic(self, clean_env) -> None:
        clean_env.setenv("RENDER", "true")
        assert resolve_catalog_base_url() == HOSTED_CATALOG_BASE_URL

    def test_override_beats_heuristic(self, clean_env) -> None:
        clean_env.setenv("RENDER", "true")
        clean_env.setenv("CATALOG_BASE_URL", "https://catalog.example/")
        assert resolve_catalog_base_url() == "https://catalog.example"

    def test_legacy_override_name(self, clean_env) -> None:
        clean_env.setenv("FAKESTORE_BASE_URL", "https://legacy.example")
        assert resolve_catalog_base_url() == "https://legacy.example"


class TestSettings:
    def test_defaults(self, clean_env) -> None:
        s = Settings()
        assert s.port == 5001
        assert s.jwt_secret == DEFAULT_JWT_SECRET
        assert s.uses_default_secret is True
        assert s.payments_configured is False
        assert s.frontend_url == "http://localhost:5173"
        assert s.cors_origins == ["*"]

    def test_environment_overrides(self, clean_env) -> None:
        clean_env.setenv("PORT", "8080")
        clean_env.setenv("JWT_SECRET", "real-secret")
        clean_env.setenv("STRIPE_SECRET_KEY", "sk_test_1")
        clean_env.setenv("FRONTEND_URL", "https://shop.example/")
        clean_env.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
        s = Settings()
        assert s.port == 8080
        assert s.uses_default_secret is False
        assert s.payments_configured is True
        assert s.frontend_url == "https://shop.example"
        assert s.cors_origins == ["https://a.example", "https://b.example"]

    def test_empty_secret_falls_back_to_default(self, clean_env) -> None:
        clean_env.setenv("JWT_SECRET", "")
        assert Settings().jwt_secret == DEFAULT_JWT_SECRET

    def test_describe_masks_secrets(self, clean_env) -> None:
        clean_env.setenv("JWT_SECRET", "real-secret")
        clean_env.setenv("STRIPE_SECRET_KEY", "sk_test_1")
        described = Settings().describe()
        text = repr(described)
        assert "real-secret" not in text
        assert "sk_test_1" not in text
        assert described["payments_configured"] is True
