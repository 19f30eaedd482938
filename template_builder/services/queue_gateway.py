"""
Queue Submission Gateway
========================

Packages a compiled template into the queue item envelope and posts it to
the relay endpoint. One attempt per export, no retry.
"""

import os
import logging
from typing import Optional
import httpx

from ..models.export_models import CompiledTemplate, QueueItemEnvelope, SubmissionResult

logger = logging.getLogger(__name__)

RELAY_URL = os.getenv("RELAY_URL", "http://localhost:8080/proxy-post-api")

SUCCESS_MESSAGE = "Template Created Successfully!"
ERROR_PREFIX = "Error Creating Template: "


class QueueSubmissionGateway:
    """
    Client for the local relay.

    Usage:
        gateway = QueueSubmissionGateway()
        result = await gateway.submit(compiled)
        print(result.message)
    """

    def __init__(self, relay_url: Optional[str] = None, timeout: float = 60.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.relay_url = relay_url or RELAY_URL
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        logger.info(f"[QUEUE-GATEWAY] Initialized with relay_url={self.relay_url}")

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def build_envelope(compiled: CompiledTemplate) -> dict:
        return QueueItemEnvelope.from_compiled(compiled).to_payload()

    async def submit(self, compiled: CompiledTemplate) -> SubmissionResult:
        """
        Submit a compiled template through the relay.

        Every failure (relay error status, network error) comes back as a
        single user-facing error message instead of an exception.
        """
        payload = self.build_envelope(compiled)

        try:
            client = await self._get_client()
            response = await client.post(self.relay_url, json=payload)

            if response.status_code < 200 or response.status_code >= 300:
                reason = f"{response.status_code} {response.reason_phrase} - {response.text}"
                logger.error(f"[QUEUE-GATEWAY] Relay rejected template '{compiled.name}': {reason}")
                return SubmissionResult(
                    success=False,
                    message=f"{ERROR_PREFIX}{reason}",
                    status_code=response.status_code,
                    error=reason,
                )

            logger.info(f"[QUEUE-GATEWAY] Template '{compiled.name}' queued ({response.status_code})")
            return SubmissionResult(
                success=True,
                message=SUCCESS_MESSAGE,
                status_code=response.status_code,
            )

        except httpx.HTTPError as e:
            logger.error(f"[QUEUE-GATEWAY] Connection error: {e}")
            return SubmissionResult(
                success=False,
                message=f"{ERROR_PREFIX}{type(e).__name__}: {str(e)}",
                error=str(e),
            )
        except Exception as e:
            logger.error(f"[QUEUE-GATEWAY] Unexpected error: {e}")
            return SubmissionResult(
                success=False,
                message=f"{ERROR_PREFIX}{str(e)}",
                error=str(e),
            )
