"""
Certificate Lookup HTTP Client.

Purpose:
- Translates a human-facing certificate (slab) number into the upstream internal asset id
- One GraphQL ``Cert`` round trip per call, no retries
"""

from __future__ import annotations

import logging

from src.integrations.clients.real_http.graphql import GraphQLClient
from src.integrations.policy.response_wrappers import normalize_cert_response

logger = logging.getLogger(__name__)

CERT_QUERY = """query Cert($certNumber: String!) {
  cert(certNumber: $certNumber) {
    ...CertBase
    __typename
  }
}
fragment CertBase on Cert {
  certNumber
  asset {
    id
    name
    __typename
  }
  __typename
}"""


class CertLookupClient:
    def __init__(self, graphql: GraphQLClient, url: str) -> None:
        self.graphql = graphql
        self.url = url

    async def resolve(self, cert_number: str) -> str:
        data = await self.graphql.execute(
            self.url,
            operation_name="Cert",
            query=CERT_QUERY,
            variables={"certNumber": cert_number},
        )
        asset = normalize_cert_response(data)
        logger.info("Resolved cert %s to asset %s (%s)", cert_number, asset.id, asset.name or "unnamed")
        return asset.id
