"""Centralized configuration and environment-driven settings for the review service."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	"""Application settings loaded from environment variables."""

	model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

	DATABASE_URL: str = Field(default="sqlite:///./review_insights.db")
	OPENAI_API_KEY: SecretStr = Field(default=SecretStr(""))
	ANTHROPIC_API_KEY: SecretStr = Field(default=SecretStr(""))
	REVIEW_PROVIDER: Literal["openai", "anthropic"] = Field(default="openai")
	ENVIRONMENT: Literal["development", "staging", "production", "test"] = Field(default="production")

	app_name: str = Field(default="Review Insights")
	app_version: str = Field(default="1.0.0")
	app_description: str = Field(
		default=(
			"AI-assisted code review service with persistent review history "
			"and analytics over accumulated reviews."
		)
	)
	debug: bool = Field(default=False)

	api_prefix: str = Field(default="/api")
	frontend_origin: str = Field(default="http://localhost:3000")
	cors_origins: str = Field(default="http://localhost:3000,http://127.0.0.1:3000")

	log_level: str = Field(default="INFO")

	max_upload_bytes: int = Field(default=100 * 1024)
	max_page_size: int = Field(default=20)
	default_page_size: int = Field(default=10)
	default_window_days: int = Field(default=90)

	openai_fallback_models: str = Field(default="gpt-4o,gpt-4o-mini,gpt-4.1,gpt-4.1-mini,gpt-4-turbo")
	anthropic_fallback_models: str = Field(
		default="claude-sonnet-4-20250514,claude-3-7-sonnet-latest,claude-3-5-haiku-latest"
	)
	preferred_models: str = Field(default="")
	provider_max_tokens: int = Field(default=4000)

	@field_validator("OPENAI_API_KEY")
	@classmethod
	def validate_openai_key(cls, value: SecretStr) -> SecretStr:
		"""Validate OpenAI API key shape when one is configured."""
		secret = value.get_secret_value()
		if secret and (not secret.startswith("sk-") or len(secret) < 10):
			raise ValueError("OPENAI_API_KEY must start with 'sk-' and be a valid key format.")
		return value

	@field_validator("max_upload_bytes")
	@classmethod
	def validate_max_upload_bytes(cls, value: int) -> int:
		"""Keep the upload ceiling within a sane range."""
		if value < 1024 or value > 10 * 1024 * 1024:
			raise ValueError("max_upload_bytes must be between 1 KB and 10 MB.")
		return value

	@field_validator("max_page_size", "default_page_size", "default_window_days")
	@classmethod
	def validate_positive(cls, value: int) -> int:
		if value < 1:
			raise ValueError("value must be a positive integer.")
		return value

	@property
	def database_url(self) -> str:
		return self.DATABASE_URL

	@property
	def openai_api_key(self) -> str:
		return self.OPENAI_API_KEY.get_secret_value()

	@property
	def anthropic_api_key(self) -> str:
		return self.ANTHROPIC_API_KEY.get_secret_value()

	@property
	def review_provider(self) -> str:
		return self.REVIEW_PROVIDER

	@property
	def environment(self) -> str:
		return self.ENVIRONMENT

	@property
	def allowed_cors_origins(self) -> List[str]:
		"""Return normalized CORS origins list."""
		raw_origins = [item.strip() for item in self.cors_origins.split(",")]
		merged = [origin for origin in raw_origins if origin]
		if self.frontend_origin and self.frontend_origin not in merged:
			merged.append(self.frontend_origin)
		return merged

	@property
	def fallback_models(self) -> List[str]:
		"""Return the hardcoded priority list for the active provider."""
		raw = self.openai_fallback_models if self.REVIEW_PROVIDER == "openai" else self.anthropic_fallback_models
		return _split_csv(raw)

	@property
	def preferred_model_list(self) -> List[str]:
		return _split_csv(self.preferred_models)


def _split_csv(raw: str) -> List[str]:
	return [item.strip() for item in raw.split(",") if item.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
	"""Return cached settings instance for dependency injection."""
	return Settings()
