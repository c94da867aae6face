from __future__ import annotations

from openai import OpenAI

from review_insights.providers.base import ReviewProvider


class OpenAIReviewProvider(ReviewProvider):
    name = "openai"
    model_family = "gpt-"
    # Low temperature keeps the JSON structure stable across calls.
    TEMPERATURE = 0.2

    def __init__(self, api_key: str, max_tokens: int = 4000):
        self.client = OpenAI(api_key=api_key)
        self.max_tokens = max_tokens

    def list_models(self) -> list[str]:
        return [model.id for model in self.client.models.list()]

    def complete(self, model: str, prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.TEMPERATURE,
            max_tokens=self.max_tokens,
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content if response.choices else None
        return (content or "").strip()
