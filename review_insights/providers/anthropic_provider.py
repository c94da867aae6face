from __future__ import annotations

from anthropic import Anthropic
from anthropic.types import TextBlock

from review_insights.providers.base import ReviewProvider


class AnthropicReviewProvider(ReviewProvider):
    name = "anthropic"
    model_family = "claude-"
    TEMPERATURE = 0.3

    def __init__(self, api_key: str, max_tokens: int = 4000):
        self.client = Anthropic(api_key=api_key)
        self.max_tokens = max_tokens

    def list_models(self) -> list[str]:
        return [model.id for model in self.client.models.list()]

    def complete(self, model: str, prompt: str) -> str:
        response = self.client.messages.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.TEMPERATURE,
            max_tokens=self.max_tokens,
        )
        text_blocks = [block.text for block in response.content if isinstance(block, TextBlock)]
        return "".join(text_blocks).strip()
