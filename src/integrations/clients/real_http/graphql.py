"""
GraphQL HTTP Client.

The only place where upstream HTTP calls are made. Both the certificate
lookup and the market transactions clients go through ``GraphQLClient.execute``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from src.error_handler import UpstreamError

logger = logging.getLogger(__name__)


class GraphQLClient:
    def __init__(
        self,
        bearer_token: str,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.bearer_token = bearer_token
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.bearer_token}",
        }

    async def execute(
        self,
        url: str,
        operation_name: str,
        query: str,
        variables: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        POST one GraphQL operation and return its ``data`` object.

        Raises UpstreamError on network failure, non-2xx status, an undecodable
        body, or a body without a ``data`` object.
        """
        payload = {
            "operationName": operation_name,
            "variables": variables,
            "query": query,
        }

        try:
            async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout_seconds), transport=self._transport) as client:
                response = await client.post(url, json=payload, headers=self._headers())
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                f"{operation_name} returned HTTP {e.response.status_code}",
                operation=operation_name,
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise UpstreamError(f"{operation_name} request failed: {e.__class__.__name__}", operation=operation_name) from e
        except ValueError as e:
            raise UpstreamError(f"{operation_name} returned a non-JSON body", operation=operation_name) from e

        if not isinstance(body, dict):
            raise UpstreamError(f"{operation_name} returned a non-object body", operation=operation_name)

        errors = body.get("errors")
        if errors:
            logger.warning("%s returned GraphQL errors: %s", operation_name, errors)

        data = body.get("data")
        if not isinstance(data, dict):
            raise UpstreamError(f"{operation_name} response has no data object", operation=operation_name)

        logger.debug("%s succeeded (status=%s)", operation_name, response.status_code)
        return data
