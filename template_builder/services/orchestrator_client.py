"""
Orchestrator Client
===================

Downstream side of the relay: exchanges client credentials for a bearer
token with the identity service, then adds the envelope as a queue item.
"""

import os
import logging
import ssl
import certifi
import aiohttp
from typing import Optional, Any
from pydantic import BaseModel

logger = logging.getLogger(__name__)

ORCHESTRATOR_HOST = os.getenv("ORCHESTRATOR_HOST", "https://staging.uipath.com")
ORCHESTRATOR_TENANT = os.getenv("ORCHESTRATOR_TENANT", "")
ORCHESTRATOR_IDENTITY_URL = os.getenv(
    "ORCHESTRATOR_IDENTITY_URL",
    f"{ORCHESTRATOR_HOST}/identity_/connect/token"
)


def build_api_url(host: str, tenant: str = "") -> str:
    """OData base URL; an empty tenant adds no path segment."""
    parts = [host.rstrip("/")]
    if tenant.strip("/"):
        parts.append(tenant.strip("/"))
    return "/".join(parts) + "/odata/"


ORCHESTRATOR_API_URL = os.getenv(
    "ORCHESTRATOR_API_URL",
    build_api_url(ORCHESTRATOR_HOST, ORCHESTRATOR_TENANT)
)
DEFAULT_SCOPES = (
    "OR.Queues OR.Queues.Read OR.Queues.Write "
    "OR.TestDataQueues OR.TestDataQueues.Read OR.TestDataQueues.Write"
)
ADD_QUEUE_ITEM_PATH = "Queues/UiPathODataSvc.AddQueueItem"


class OrchestratorError(Exception):
    """A hop of the relay chain failed."""


class OrchestratorConfig(BaseModel):
    """Static credentials and endpoints of the queueing service."""
    identity_url: str = ORCHESTRATOR_IDENTITY_URL
    api_base_url: str = ORCHESTRATOR_API_URL
    client_id: str = os.getenv("ORCHESTRATOR_CLIENT_ID", "")
    client_secret: str = os.getenv("ORCHESTRATOR_CLIENT_SECRET", "")
    folder_id: str = os.getenv("ORCHESTRATOR_FOLDER_ID", "")
    queue_name: str = os.getenv("ORCHESTRATOR_QUEUE_NAME", "Document Template Queue")
    scopes: str = os.getenv("ORCHESTRATOR_SCOPES", DEFAULT_SCOPES)

    @property
    def queue_item_url(self) -> str:
        return f"{self.api_base_url}{ADD_QUEUE_ITEM_PATH}"


class RelayResponse(BaseModel):
    """Result of forwarding one envelope."""
    success: bool
    status_code: int = 500
    body: Optional[Any] = None
    error: Optional[str] = None


class OrchestratorClient:
    """Client for the identity service and the queue API."""

    def __init__(self, config: Optional[OrchestratorConfig] = None, timeout: float = 30.0):
        self.config = config or OrchestratorConfig()
        self.timeout = timeout
        self._session = None
        logger.info(f"[ORCHESTRATOR] Initialized with queue url={self.config.queue_item_url}")

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            # Create SSL context using certifi for proper certificate verification
            ssl_context = ssl.create_default_context(cafile=certifi.where())
            connector = aiohttp.TCPConnector(ssl=ssl_context)
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                connector=connector
            )
        return self._session

    async def close(self):
        """Close the client session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def fetch_token(self) -> str:
        """Client-credentials grant against the identity service."""
        form = {
            "grant_type": "client_credentials",
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "scope": self.config.scopes,
        }
        session = await self._get_session()
        async with session.post(self.config.identity_url, data=form) as resp:
            if resp.status != 200:
                error_text = await resp.text()
                raise OrchestratorError(
                    f"Failed to get access token: {resp.status} {resp.reason} - {error_text}"
                )
            data = await resp.json(content_type=None)

        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise OrchestratorError("Failed to get access token: no access_token in response")
        logger.info("[ORCHESTRATOR] Access token received")
        return token

    async def add_queue_item(self, token: str, payload: Any) -> RelayResponse:
        """Post the envelope to the queue; non-2xx becomes an OrchestratorError."""
        headers = {
            "Authorization": f"Bearer {token}",
            "X-UIPATH-OrganizationUnitId": self.config.folder_id,
        }
        logger.info(
            f"[ORCHESTRATOR] Adding queue item to '{self.config.queue_name}' "
            f"in folder '{self.config.folder_id}'"
        )
        session = await self._get_session()
        async with session.post(self.config.queue_item_url, json=payload, headers=headers) as resp:
            if resp.status < 200 or resp.status >= 300:
                error_text = await resp.text()
                raise OrchestratorError(
                    f"External API responded with status {resp.status}: {error_text}"
                )
            body = await resp.json(content_type=None)
            return RelayResponse(success=True, status_code=resp.status, body=body)

    async def forward(self, payload: Any) -> RelayResponse:
        """
        Run the whole chain for one request: token, then queue item.

        Never raises; any failing hop is reported in the response.
        """
        try:
            token = await self.fetch_token()
            return await self.add_queue_item(token, payload)
        except OrchestratorError as e:
            logger.error(f"[ORCHESTRATOR] {e}")
            return RelayResponse(success=False, error=str(e))
        except aiohttp.ClientError as e:
            logger.error(f"[ORCHESTRATOR] Connection error: {e}")
            return RelayResponse(success=False, error=f"Connection error: {str(e)}")
        except Exception as e:
            logger.error(f"[ORCHESTRATOR] Unexpected error: {e}")
            return RelayResponse(success=False, error=f"Unexpected error: {str(e)}")
