"""
Market Transactions HTTP Client.

Fetches historical sale prices for an asset across a matrix of
(grading company, grade number) filters and merges them into one list.
Sub-queries run one after another; the first failure aborts the whole
aggregation.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from src.integrations.clients.real_http.graphql import GraphQLClient
from src.integrations.contracts.interfaces import Transaction
from src.integrations.policy.response_wrappers import normalize_market_transactions
from src.utils.config_loader import DEFAULT_GRADE_MATRIX

logger = logging.getLogger(__name__)

MARKET_TRANSACTIONS_QUERY = """query AssetMarketTransactions($id: ID!, $marketTransactionFilter: MarketTransactionFilter!) {
  asset(id: $id) {
    marketTransactions(marketTransactionFilter: $marketTransactionFilter) {
      price
      date
      __typename
    }
    __typename
  }
}"""


def build_query_matrix(
    grade_matrix: Dict[str, Sequence[str]],
    grading_company: Optional[str] = None,
    grade_number: Optional[str] = None,
) -> List[Tuple[str, str]]:
    """Expand the optional filters into the ordered (company, grade) pairs to query."""
    if grading_company and grade_number:
        return [(grading_company, grade_number)]

    companies = [grading_company] if grading_company else list(grade_matrix)
    pairs: List[Tuple[str, str]] = []
    for company in companies:
        grades = [grade_number] if grade_number else list(grade_matrix.get(company, []))
        pairs.extend((company, grade) for grade in grades)
    return pairs


class MarketTransactionsClient:
    def __init__(
        self,
        graphql: GraphQLClient,
        url: str,
        grade_matrix: Optional[Dict[str, Sequence[str]]] = None,
    ) -> None:
        self.graphql = graphql
        self.url = url
        self.grade_matrix = grade_matrix or DEFAULT_GRADE_MATRIX

    async def fetch_prices(
        self,
        asset_id: str,
        grading_company: Optional[str] = None,
        grade_number: Optional[str] = None,
    ) -> List[Transaction]:
        pairs = build_query_matrix(self.grade_matrix, grading_company, grade_number)
        if not pairs:
            logger.info("No grades configured for grading company %s; nothing to query", grading_company)

        all_transactions: List[Transaction] = []
        for company, grade in pairs:
            data = await self.graphql.execute(
                self.url,
                operation_name="AssetMarketTransactions",
                query=MARKET_TRANSACTIONS_QUERY,
                variables={
                    "id": asset_id,
                    "marketTransactionFilter": {
                        "gradingCompany": company,
                        "gradeNumber": grade,
                        "showSkipped": True,
                    },
                },
            )
            transactions = normalize_market_transactions(data, grading_company=company, grade_number=grade)
            logger.debug("Asset %s %s %s: %d transactions", asset_id, company, grade, len(transactions))
            all_transactions.extend(transactions)

        logger.info("Fetched %d transactions for asset %s over %d filter(s)", len(all_transactions), asset_id, len(pairs))
        return all_transactions
