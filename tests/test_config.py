"""Tests for settings validation and provider construction."""

from __future__ import annotations

import pytest
from pydantic import ValidationError as SettingsValidationError

from review_insights.config import Settings
from review_insights.providers.base import ProviderConfigurationError, ReviewProvider, build_review_provider


def _settings(**overrides) -> Settings:
    values = {"_env_file": None, "OPENAI_API_KEY": "", "ANTHROPIC_API_KEY": ""}
    values.update(overrides)
    return Settings(**values)


class TestSettings:
    def test_defaults(self):
        settings = _settings()
        assert settings.api_prefix == "/api"
        assert settings.max_upload_bytes == 100 * 1024
        assert settings.max_page_size == 20
        assert settings.default_page_size == 10
        assert settings.default_window_days == 90

    def test_rejects_malformed_openai_key(self):
        with pytest.raises(SettingsValidationError):
            _settings(OPENAI_API_KEY="not-a-key")

    def test_rejects_non_positive_page_size(self):
        with pytest.raises(SettingsValidationError):
            _settings(max_page_size=0)

    def test_fallback_models_follow_provider(self):
        assert _settings().fallback_models[0].startswith("gpt-")
        assert _settings(REVIEW_PROVIDER="anthropic").fallback_models[0].startswith("claude-")

    def test_preferred_models_are_split(self):
        assert _settings(preferred_models=" gpt-4o , ,gpt-4.1").preferred_model_list == ["gpt-4o", "gpt-4.1"]

    def test_cors_origins_include_frontend(self):
        settings = _settings(cors_origins="http://a.test", frontend_origin="http://b.test")
        assert settings.allowed_cors_origins == ["http://a.test", "http://b.test"]


class TestBuildReviewProvider:
    def test_missing_openai_key(self):
        with pytest.raises(ProviderConfigurationError, match="OPENAI_API_KEY"):
            build_review_provider(_settings())

    def test_missing_anthropic_key(self):
        with pytest.raises(ProviderConfigurationError, match="ANTHROPIC_API_KEY"):
            build_review_provider(_settings(REVIEW_PROVIDER="anthropic"))

    def test_openai_provider(self):
        provider = build_review_provider(_settings(OPENAI_API_KEY="sk-test-1234567890"))
        assert provider.name == "openai"
        assert provider.model_family == "gpt-"

    def test_anthropic_provider(self):
        provider = build_review_provider(_settings(REVIEW_PROVIDER="anthropic", ANTHROPIC_API_KEY="test-key"))
        assert provider.name == "anthropic"
        assert provider.max_tokens == 4000

    def test_max_tokens_come_from_settings(self):
        provider = build_review_provider(_settings(OPENAI_API_KEY="sk-test-1234567890", provider_max_tokens=1234))
        assert provider.max_tokens == 1234
        assert "max_tokens" not in vars(ReviewProvider)
