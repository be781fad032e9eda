"""
Contracts (data models).

This folder defines the shapes exchanged with and returned by the relay:
- tagged market transactions
- confidence results per trailing window
- the JSON payload of GET /get-prices

Why this exists:
- Keeps the API and the CLI script returning the same payload
- Flows rely on stable models, not on ad-hoc dicts from upstream
"""
