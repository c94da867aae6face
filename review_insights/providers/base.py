"""Review provider abstraction.

A provider does two things: list the models it can serve and run one
completion against a named model. Prompting, parsing, validation and model
fallback live in ``services.review_service`` so they are shared by every
provider.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from review_insights.errors import UpstreamError

if TYPE_CHECKING:
	from review_insights.config import Settings


class ProviderConfigurationError(UpstreamError):
	"""Raised when a provider cannot be constructed from settings."""


class ReviewProvider(ABC):
	name: str = "base"
	# Substring a listed model id must contain to be a review candidate.
	model_family: str = ""

	@abstractmethod
	def list_models(self) -> list[str]:
		"""Return model identifiers visible to the configured API key.

		Raises on network or auth failure; the catalog decides what to do.
		"""

	@abstractmethod
	def complete(self, model: str, prompt: str) -> str:
		"""Run a single completion and return the raw text response."""


def build_review_provider(settings: Settings) -> ReviewProvider:
	"""Instantiate the provider named by ``REVIEW_PROVIDER``."""
	provider_name = settings.review_provider
	if provider_name == "openai":
		from review_insights.providers.openai_provider import OpenAIReviewProvider

		if not settings.openai_api_key:
			raise ProviderConfigurationError("OPENAI_API_KEY is not configured.")
		return OpenAIReviewProvider(api_key=settings.openai_api_key, max_tokens=settings.provider_max_tokens)
	if provider_name == "anthropic":
		from review_insights.providers.anthropic_provider import AnthropicReviewProvider

		if not settings.anthropic_api_key:
			raise ProviderConfigurationError("ANTHROPIC_API_KEY is not configured.")
		return AnthropicReviewProvider(api_key=settings.anthropic_api_key, max_tokens=settings.provider_max_tokens)
	raise ProviderConfigurationError(f"Unknown review provider: {provider_name}")
