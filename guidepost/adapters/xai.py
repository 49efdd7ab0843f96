"""
xAI adapter, OpenAI Responses compatible.

Endpoint: POST https://api.x.ai/v1/responses
Only "input" is sent; xAI may reject the "instructions" parameter.
"""

from typing import Any

from .base import HTTPAdapter, PreparedRequest, bearer_headers
from .openai import extract_responses_text

XAI_RESPONSES_URL = "https://api.x.ai/v1/responses"


class XAIAdapter(HTTPAdapter):
    kind = "xai"
    label = "xAI"
    api_key_env = "XAI_API_KEY"
    default_timeout = 60.0

    def prepare(self, prompt: str, model: str) -> PreparedRequest:
        return PreparedRequest(
            url=XAI_RESPONSES_URL,
            headers=bearer_headers(self.api_key),
            payload={"model": model, "input": prompt},
        )

    @staticmethod
    def extract_output_text(data: Any) -> str:
        return extract_responses_text(data)
