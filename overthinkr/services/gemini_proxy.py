"""Proxy boundary to the Gemini generateContent API.

This is the only component that reads the model credential. It receives a
prompt, attaches the key, forwards the request and hands back the model's
JSON envelope verbatim. Failures become ProxyError with a short public
message; upstream detail stays in the server log.
"""

import logging
import time
from typing import Any

import httpx

from overthinkr.core.config import GeminiConfig
from overthinkr.core.exceptions import ProxyError


logger = logging.getLogger(__name__)

SERVER_ERROR = "Server error"
UPSTREAM_UNAVAILABLE = "Model request failed"
CREDENTIAL_MISSING = "Model credentials are not configured"


class GeminiProxy:
    """Forwards one prompt to Gemini with the server-held API key."""

    def __init__(
        self,
        config: GeminiConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the proxy.

        Args:
            config: Model settings, including the secret key.
            transport: Optional httpx transport, used by tests to fake Gemini.
        """
        self._config = config
        self._transport = transport

    @property
    def endpoint(self) -> str:
        base_url = self._config.base_url.rstrip("/")
        return f"{base_url}/models/{self._config.model}:generateContent"

    @property
    def is_configured(self) -> bool:
        return self._config.has_key

    def build_payload(self, prompt: str) -> dict:
        return {"contents": [{"parts": [{"text": prompt}]}]}

    async def forward(self, prompt: str) -> dict[str, Any]:
        """Send the prompt upstream and return the envelope.

        Args:
            prompt: The compiled prompt, carried as the only content part.

        Returns:
            The upstream JSON envelope, unmodified.

        Raises:
            ProxyError: 502 for credential or upstream application failures,
                500 for anything else.
        """
        if not self.is_configured:
            logger.error("GEMINI_KEY is not set; refusing to call upstream")
            raise ProxyError(CREDENTIAL_MISSING, status_code=502)

        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self._config.key.get_secret_value(),
        }

        start_time = time.time()
        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self.endpoint,
                    headers=headers,
                    json=self.build_payload(prompt),
                )
        except httpx.HTTPError as e:
            raise ProxyError(
                SERVER_ERROR,
                status_code=500,
                message=f"Upstream request failed: {type(e).__name__}: {e}",
            ) from e

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Upstream responded: model={self._config.model}, "
            f"status={response.status_code}, duration_ms={duration_ms:.1f}"
        )

        if not response.is_success:
            raise ProxyError(
                UPSTREAM_UNAVAILABLE,
                status_code=502,
                message=f"Upstream returned HTTP {response.status_code}: {self._upstream_detail(response)}",
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProxyError(
                SERVER_ERROR,
                status_code=500,
                message=f"Upstream returned a non-JSON body: {e}",
            ) from e

    @staticmethod
    def _upstream_detail(response: httpx.Response) -> str:
        try:
            error = response.json().get("error", {})
        except (ValueError, AttributeError):
            return response.text[:200]
        if isinstance(error, dict):
            return f"{error.get('status')}: {error.get('message')}"
        return str(error)[:200]
