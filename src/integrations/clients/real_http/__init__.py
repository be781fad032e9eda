"""
Real HTTP integration clients.

These clients communicate with the upstream GraphQL services:
- graphql.py: the single helper that performs HTTP calls
- cert_lookup.py: certificate number -> internal asset id
- market_transactions.py: asset id -> merged transactions over the grade matrix

Tests swap the network out by passing an httpx transport to GraphQLClient.
"""
