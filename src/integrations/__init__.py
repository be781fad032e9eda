"""
Integrations layer.
This package contains all code used to communicate with the upstream GraphQL services:
- the certificate API (slab number -> internal asset id)
- the market transactions API (asset id -> historical sale prices)

Key rule:
- Request handling MUST NOT call upstream APIs directly.
- It goes through PriceLookupService, which uses the clients under src/integrations/clients.
"""

from .contracts.interfaces import ConfidenceLevel, ConfidenceResult, PriceLookupResult, Transaction
from .contracts.prices import ConfidencePayload, PriceResponse, TransactionPayload

__all__ = [
    # interfaces
    "ConfidenceLevel", "ConfidenceResult", "PriceLookupResult", "Transaction",
    # prices
    "ConfidencePayload", "PriceResponse", "TransactionPayload",
]
