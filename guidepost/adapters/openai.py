"""
OpenAI adapter using the Responses API.

Endpoint: POST https://api.openai.com/v1/responses
"""

from typing import Any

from .base import HTTPAdapter, PreparedRequest, bearer_headers, first_item

OPENAI_RESPONSES_URL = "https://api.openai.com/v1/responses"


def extract_responses_text(data: Any) -> str:
    """
    Pull assistant text out of a Responses API body.

    Tries output[0].content[0].text, then top-level "output" and "text"
    strings, then choices[0].text / choices[0].message.content.
    Returns "" when nothing matches.
    """
    if not isinstance(data, dict):
        return ""

    ok, output = first_item(data.get("output"))
    if ok and isinstance(output, dict):
        ok, content = first_item(output.get("content"))
        if ok and isinstance(content, dict):
            text = content.get("text")
            if isinstance(text, str) and text:
                return text

    if isinstance(data.get("output"), str) and data["output"]:
        return data["output"]
    if isinstance(data.get("text"), str) and data["text"]:
        return data["text"]

    ok, choice = first_item(data.get("choices"))
    if ok and isinstance(choice, dict):
        text = choice.get("text")
        if isinstance(text, str) and text:
            return text
        message = choice.get("message")
        if isinstance(message, dict) and isinstance(message.get("content"), str):
            return message["content"]

    return ""


class OpenAIAdapter(HTTPAdapter):
    kind = "openai"
    label = "OpenAI"
    api_key_env = "OPENAI_API_KEY"
    default_timeout = 15.0

    def prepare(self, prompt: str, model: str) -> PreparedRequest:
        return PreparedRequest(
            url=OPENAI_RESPONSES_URL,
            headers=bearer_headers(self.api_key),
            payload={"model": model, "input": prompt},
        )

    @staticmethod
    def extract_output_text(data: Any) -> str:
        return extract_responses_text(data)
