"""Tests for the resolve -> aggregate -> fallback -> estimate orchestration."""

import pytest

from src.error_handler import InputValidationError, UpstreamError
from src.integrations.contracts.interfaces import ConfidenceLevel
from src.integrations.policy.price_lookup_service import build_price_lookup_service

from tests.fakes import FakeUpstream, days_ago


@pytest.mark.asyncio
async def test_lookup_without_filters_uses_full_matrix(relay_config):
    upstream = FakeUpstream(transactions={("BGS", "10.0"): [{"price": "300", "date": days_ago(2)}]})
    service = build_price_lookup_service(relay_config, transport=upstream.transport)

    result = await service.lookup("12345678")

    assert result.asset_id == "A1"
    assert len(result.prices) == 1
    assert result.fallback_used is False
    assert len(upstream.transaction_filters()) == 5
    assert result.confidence["week"].confidence_level == ConfidenceLevel.HIGH


@pytest.mark.asyncio
async def test_empty_filtered_result_falls_back_to_full_matrix(relay_config):
    upstream = FakeUpstream(
        transactions={
            ("PSA", "9.0"): [{"price": "100", "date": days_ago(3)}, {"price": "160", "date": days_ago(5)}],
        }
    )
    service = build_price_lookup_service(relay_config, transport=upstream.transport)

    result = await service.lookup("12345678", grading_company="BGS", grade_number="10.0")

    assert result.fallback_used is True
    assert upstream.transaction_filters()[0] == ("BGS", "10.0")
    assert len(upstream.transaction_filters()) == 1 + 5
    assert [t.grading_company for t in result.prices] == ["PSA", "PSA"]
    # mean 130, deviation 30 -> ~23% of mean
    assert result.confidence["month"].confidence_level == ConfidenceLevel.LOW


@pytest.mark.asyncio
async def test_no_fallback_when_explicit_filter_has_data(relay_config):
    upstream = FakeUpstream(transactions={("PSA", "10.0"): [{"price": "100", "date": days_ago(1)}]})
    service = build_price_lookup_service(relay_config, transport=upstream.transport)

    result = await service.lookup("12345678", grading_company="PSA", grade_number="10.0")

    assert result.fallback_used is False
    assert upstream.transaction_filters() == [("PSA", "10.0")]


@pytest.mark.asyncio
async def test_blank_filters_are_ignored(relay_config):
    upstream = FakeUpstream()
    service = build_price_lookup_service(relay_config, transport=upstream.transport)

    result = await service.lookup(" 12345678 ", grading_company="", grade_number="  ")

    assert result.fallback_used is False
    assert len(upstream.transaction_filters()) == 5
    assert upstream.calls[0][1] == {"certNumber": "12345678"}


@pytest.mark.asyncio
@pytest.mark.parametrize("slab", [None, "", "   "])
async def test_missing_slab_number_is_rejected_before_upstream(relay_config, slab):
    upstream = FakeUpstream()
    service = build_price_lookup_service(relay_config, transport=upstream.transport)

    with pytest.raises(InputValidationError):
        await service.lookup(slab)
    assert upstream.calls == []


@pytest.mark.asyncio
async def test_cert_failure_stops_before_transactions(relay_config):
    upstream = FakeUpstream(cert_body={"data": {}})
    service = build_price_lookup_service(relay_config, transport=upstream.transport)

    with pytest.raises(UpstreamError):
        await service.lookup("12345678")
    assert upstream.transaction_filters() == []


@pytest.mark.asyncio
async def test_late_sub_query_failure_fails_the_lookup(relay_config):
    upstream = FakeUpstream(
        transactions={("PSA", "10.0"): [{"price": "100", "date": days_ago(1)}]},
        fail_on={("BGS", "9.5")},
    )
    service = build_price_lookup_service(relay_config, transport=upstream.transport)

    with pytest.raises(UpstreamError):
        await service.lookup("12345678")
    assert len(upstream.transaction_filters()) == 4
