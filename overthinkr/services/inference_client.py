"""Inference client for the proxy boundary.

Sends one compiled prompt to the proxy and returns the model envelope
verbatim. The client knows only the proxy URL; the model credential lives
with the proxy and is never passed here.
"""

import logging
import time
from typing import Any

import httpx

from overthinkr.core.exceptions import TransportError, UpstreamError


logger = logging.getLogger(__name__)

RawEnvelope = dict[str, Any]

# Status the proxy uses for application-level upstream failures
# (missing credential, model rejected the request).
UPSTREAM_FAILURE_STATUS = 502


class InferenceClient:
    """Client for the model proxy.

    One ``infer`` call makes exactly one POST carrying the prompt as the only
    payload. Nothing is retried here; the same prompt can be sent again.
    """

    def __init__(
        self,
        proxy_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            proxy_url: Full URL of the proxy's analyze route.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, used by tests to fake the proxy.
        """
        self.proxy_url = proxy_url
        self.timeout = timeout
        self._transport = transport

    async def infer(self, prompt: str) -> RawEnvelope:
        """Send the prompt and return the raw model envelope.

        Args:
            prompt: The compiled prompt.

        Returns:
            The envelope JSON object, un-interpreted.

        Raises:
            TransportError: Network failure, timeout, non-2xx status or a
                body that is not a JSON object.
            UpstreamError: The proxy or the model reported an application
                failure.
        """
        start_time = time.time()
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(self.proxy_url, json={"text": prompt})
        except httpx.TimeoutException as e:
            raise TransportError(f"Request to proxy timed out: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Request to proxy failed: {e}") from e
        except UnicodeEncodeError as e:
            raise TransportError(f"Prompt cannot be sent as UTF-8: {e.reason}") from e

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Proxy responded: status={response.status_code}, "
            f"duration_ms={duration_ms:.1f}, prompt_chars={len(prompt)}"
        )

        if response.status_code == UPSTREAM_FAILURE_STATUS:
            raise UpstreamError(
                f"Proxy reported upstream failure: {self._error_text(response)}"
            )

        if not response.is_success:
            raise TransportError(
                f"Proxy returned HTTP {response.status_code}: {self._error_text(response)}",
                status_code=response.status_code,
            )

        try:
            envelope = response.json()
        except ValueError as e:
            raise TransportError(f"Proxy returned a non-JSON body: {e}") from e

        if not isinstance(envelope, dict):
            raise TransportError(
                f"Proxy returned {type(envelope).__name__} instead of a JSON object"
            )

        # The model's own error object, relayed with a 2xx status
        if "error" in envelope:
            raise UpstreamError(f"Model reported an error: {self._describe_error(envelope['error'])}")

        return envelope

    @staticmethod
    def _describe_error(error: Any) -> str:
        if isinstance(error, dict):
            return str(error.get("message") or error.get("status") or "unknown error")
        return str(error)

    @classmethod
    def _error_text(cls, response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text[:200]
        if isinstance(data, dict) and "error" in data:
            return cls._describe_error(data["error"])
        return str(data)[:200]
