"""
HTTP Adapter Base

Shared call policy for all agent adapters:
- POST with a per-adapter timeout
- one retry after a fixed delay on 429, 5xx, timeout or transport failure
- the retry runs under the same timeout
- any remaining non-2xx becomes AdapterHTTPError(status, body)
- text extraction never raises; "" means nothing was extractable
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import httpx

from .errors import (
    AdapterHTTPError,
    AdapterNetworkError,
    AdapterTimeoutError,
    MissingCredentialError,
)

DEFAULT_RETRY_DELAY = 1.0


@dataclass(frozen=True)
class AdapterResponse:
    """Extracted answer text plus the provider's raw response body"""
    output_text: str
    raw: Any


@dataclass(frozen=True)
class PreparedRequest:
    url: str
    headers: Dict[str, str]
    payload: Dict[str, Any]
    params: Optional[Dict[str, str]] = None


def is_retryable_status(status: int) -> bool:
    return status == 429 or status >= 500


class HTTPAdapter(ABC):
    """
    One agent kind's REST call.

    Subclasses set kind/label/api_key_env/default_timeout and implement
    prepare() and extract_output_text().

    Usage:
        adapter = OpenAIAdapter(api_key="sk-...", timeout=15.0)
        response = await adapter.invoke(prompt="...", model="gpt-4.1-mini")
    """

    kind: str = ""
    label: str = ""
    api_key_env: str = ""
    default_timeout: float = 15.0

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Initialize adapter.

        Args:
            api_key: Provider credential
            timeout: Request timeout in seconds (per attempt)
            retry_delay: Seconds to wait before the single retry
            client: Shared AsyncClient; one is opened per call otherwise
            sleep: Awaitable used for the retry delay
        """
        self.api_key = api_key or ""
        self.timeout = timeout if timeout is not None else self.default_timeout
        self.retry_delay = retry_delay
        self._client = client
        self._sleep = sleep
        self.logger = logging.getLogger(f"guidepost.adapters.{self.kind}")

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    @abstractmethod
    def prepare(self, prompt: str, model: str) -> PreparedRequest:
        """Build the endpoint, headers and payload for one call"""
        pass

    @staticmethod
    @abstractmethod
    def extract_output_text(data: Any) -> str:
        """Pull the answer text out of a decoded body; "" when absent"""
        pass

    @asynccontextmanager
    async def _client_scope(self):
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient() as client:
            yield client

    async def _send(self, client: httpx.AsyncClient, request: PreparedRequest) -> httpx.Response:
        try:
            return await client.post(
                request.url,
                headers=request.headers,
                params=request.params,
                json=request.payload,
                timeout=self.timeout,
            )
        except httpx.TimeoutException:
            raise AdapterTimeoutError(
                f"{self.label} API request timed out after {self.timeout:g} seconds"
            )
        except httpx.RequestError as e:
            raise AdapterNetworkError(
                f"{self.label} API request failed: {str(e) or type(e).__name__}"
            )

    async def _send_with_retry(self, client: httpx.AsyncClient, request: PreparedRequest) -> httpx.Response:
        try:
            response = await self._send(client, request)
        except (AdapterTimeoutError, AdapterNetworkError) as e:
            self.logger.warning("%s; retrying once in %.1fs", e, self.retry_delay)
            await self._sleep(self.retry_delay)
            return await self._send(client, request)

        if is_retryable_status(response.status_code):
            self.logger.warning(
                "%s API returned %d; retrying once in %.1fs",
                self.label, response.status_code, self.retry_delay,
            )
            await self._sleep(self.retry_delay)
            return await self._send(client, request)

        return response

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return {"text": response.text}

    async def invoke(self, prompt: str, model: str) -> AdapterResponse:
        """
        Send the prompt and extract the answer text.

        Raises:
            MissingCredentialError: No API key configured
            AdapterTimeoutError: Both attempts timed out (or the retry did)
            AdapterNetworkError: Transport failure on the final attempt
            AdapterHTTPError: Non-2xx status on the final attempt
        """
        if not self.has_credential:
            raise MissingCredentialError(f"{self.api_key_env} environment variable is not set")

        request = self.prepare(prompt, model)
        async with self._client_scope() as client:
            response = await self._send_with_retry(client, request)

        if not response.is_success:
            raise AdapterHTTPError(self.label, response.status_code, response.text)

        data = self._decode(response)
        return AdapterResponse(output_text=self.extract_output_text(data), raw=data)


def bearer_headers(api_key: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }


def first_item(value: Any) -> Tuple[bool, Any]:
    """(True, value[0]) for a non-empty list, (False, None) otherwise"""
    if isinstance(value, list) and value:
        return True, value[0]
    return False, None
