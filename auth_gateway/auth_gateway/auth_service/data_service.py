"""
HTTP client for the external GraphQL data service.
"""
from typing import Any, Dict, Mapping, Optional
import logging

import httpx

from .config import Settings
from .exceptions import TransportError

logger = logging.getLogger(__name__)

ADMIN_SECRET_HEADER = "X-Hasura-Admin-Secret"


class DataServiceClient:
    """
    Sends GraphQL queries and mutations to the data service.

    A single instance holds one connection pool and is shared by all requests.
    """

    def __init__(
        self,
        url: str,
        admin_secret: str,
        verify_tls: bool = True,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.url = url
        if not verify_tls:
            logger.warning(
                "TLS certificate verification is DISABLED for the data service at %s; "
                "use this only for local development",
                url,
            )
        self._client = httpx.Client(
            headers={
                ADMIN_SECRET_HEADER: admin_secret,
                "Content-Type": "application/json",
            },
            verify=verify_tls,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: Optional[httpx.BaseTransport] = None
    ) -> "DataServiceClient":
        return cls(
            url=settings.DATA_SERVICE_URL,
            admin_secret=settings.DATA_SERVICE_ADMIN_SECRET,
            verify_tls=settings.DATA_SERVICE_VERIFY_TLS,
            timeout=settings.DATA_SERVICE_TIMEOUT_SECONDS,
            transport=transport,
        )

    def execute(self, query: str, variables: Mapping[str, Any]) -> bytes:
        """
        POST a GraphQL document with its variables.

        Args:
            query: GraphQL query or mutation text
            variables: Values bound to the document's variables

        Returns:
            The raw response body; the GraphQL envelope is left to the caller

        Raises:
            TransportError: If the request could not complete (DNS, refused
                connection, TLS failure, timeout)
        """
        body: Dict[str, Any] = {"query": query, "variables": dict(variables)}
        try:
            response = self._client.post(self.url, json=body)
        except httpx.HTTPError as exc:
            logger.error("Data service request to %s failed: %s", self.url, exc)
            raise TransportError(context={"reason": str(exc)}) from exc

        if response.is_error:
            logger.warning("Data service responded with HTTP %s", response.status_code)
        return response.content

    def close(self) -> None:
        self._client.close()
