"""In-process fake for the upstream GraphQL services."""

import json
from datetime import datetime, timedelta, timezone

import httpx

CERT_URL = "https://upstream.test/graphql/Cert"
TRANSACTIONS_URL = "https://upstream.test/graphql/AssetMarketTransactions"


def days_ago(n):
    """ISO date n days back on the UTC calendar the estimator uses."""
    return (datetime.now(timezone.utc).date() - timedelta(days=n)).isoformat()


class FakeUpstream:
    """Answers Cert and AssetMarketTransactions operations from canned data."""

    def __init__(self, asset_id="A1", transactions=None, cert_body=None, status_code=200, fail_on=None):
        self.asset_id = asset_id
        self.transactions = transactions or {}
        self.cert_body = cert_body
        self.status_code = status_code
        self.fail_on = set(fail_on or ())
        self.calls = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        operation = body["operationName"]
        self.calls.append((operation, body["variables"], request))

        if self.status_code != 200:
            return httpx.Response(self.status_code, text="upstream unavailable")

        if operation == "Cert":
            if self.cert_body is not None:
                return httpx.Response(200, json=self.cert_body)
            return httpx.Response(
                200,
                json={"data": {"cert": {"certNumber": body["variables"]["certNumber"], "asset": {"id": self.asset_id, "name": "Charizard"}}}},
            )

        flt = body["variables"]["marketTransactionFilter"]
        if (flt["gradingCompany"], flt["gradeNumber"]) in self.fail_on:
            return httpx.Response(502, text="bad gateway")
        rows = self.transactions.get((flt["gradingCompany"], flt["gradeNumber"]), [])
        return httpx.Response(200, json={"data": {"asset": {"marketTransactions": rows}}})

    def transaction_filters(self):
        return [
            (v["marketTransactionFilter"]["gradingCompany"], v["marketTransactionFilter"]["gradeNumber"])
            for op, v, _ in self.calls
            if op == "AssetMarketTransactions"
        ]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)
