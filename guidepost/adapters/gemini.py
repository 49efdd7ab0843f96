"""
Gemini adapter using the REST generateContent endpoint.

Endpoint: POST https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent
"""

from typing import Any

from .base import HTTPAdapter, PreparedRequest, first_item

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


def extract_gemini_text(data: Any) -> str:
    """Join the text parts of the first candidate; fall back to top-level text"""
    if not isinstance(data, dict):
        return ""

    ok, candidate = first_item(data.get("candidates"))
    if ok and isinstance(candidate, dict):
        content = candidate.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if isinstance(parts, list):
            texts = [
                part["text"]
                for part in parts
                if isinstance(part, dict) and isinstance(part.get("text"), str) and part["text"]
            ]
            if texts:
                return "\n".join(texts)

    if isinstance(data.get("text"), str):
        return data["text"]
    return ""


class GeminiAdapter(HTTPAdapter):
    kind = "gemini"
    label = "Gemini"
    api_key_env = "GEMINI_API_KEY"
    default_timeout = 15.0

    def prepare(self, prompt: str, model: str) -> PreparedRequest:
        return PreparedRequest(
            url=f"{GEMINI_BASE_URL}/{model}:generateContent",
            headers={"Content-Type": "application/json"},
            params={"key": self.api_key},
            payload={"contents": [{"parts": [{"text": prompt}]}]},
        )

    @staticmethod
    def extract_output_text(data: Any) -> str:
        return extract_gemini_text(data)
