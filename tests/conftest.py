"""Pytest fixtures for the price relay tests."""

import pytest

from src.utils.config_loader import RelayConfig, UpstreamConfig

from tests.fakes import CERT_URL, TRANSACTIONS_URL, FakeUpstream


@pytest.fixture
def relay_config():
    return RelayConfig(
        upstream=UpstreamConfig(
            bearer_token="test-token",
            cert_api_url=CERT_URL,
            transactions_api_url=TRANSACTIONS_URL,
        )
    )


@pytest.fixture
def upstream():
    return FakeUpstream()
