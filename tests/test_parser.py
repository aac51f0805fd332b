"""메시지 파서 테스트"""

import pytest

from fum_ai.models import DurationCommitment, PriceBandCommitment
from fum_ai.parser import (
    duration_to_days,
    extract_wallet_address,
    is_wallet_request,
    parse_commitment_request,
    parse_duration,
    parse_price_band,
)


class TestDurationToDays:
    """duration_to_days 테스트"""

    @pytest.mark.parametrize("value, unit, days", [
        (10, "days", 10),
        (1, "day", 1),
        (2, "weeks", 14),
        (3, "months", 90),
        (1, "Year", 365),
    ])
    def test_conversion(self, value, unit, days):
        assert duration_to_days(value, unit) == days


class TestParseDuration:
    """parse_duration 테스트"""

    def test_months(self):
        request = parse_duration("I want to lock 10 ETH for 3 months")

        assert request == DurationCommitment(
            amount=10.0,
            token_symbol="ETH",
            duration_days=90,
            duration_value=3,
            duration_unit="months",
        )

    def test_decimal_amount_lowercase_token(self):
        request = parse_duration("lock 2.5 btc for 1 year please")

        assert request.amount == 2.5
        assert request.token_symbol == "BTC"
        assert request.duration_days == 365

    def test_missing_duration(self):
        assert parse_duration("lock 10 ETH") is None

    def test_unsupported_token(self):
        assert parse_duration("lock 10 PEPE for 3 months") is None

    def test_token_word_boundary(self):
        assert parse_duration("lock 10 ETHX for 3 months") is None


class TestParsePriceBand:
    """parse_price_band 테스트"""

    @pytest.mark.parametrize("text", [
        "Lock 3 ETH until either the price goes up to $3000 or goes down to $2000",
        "lock 3 eth until price reaches 3000 or 2000",
        "Lock 3 ETH until the price hits $3000 or $2000",
        "lock 3 ETH till 3000 or 2000",
    ])
    def test_variants(self, text):
        request = parse_price_band(text)

        assert request == PriceBandCommitment(
            amount=3.0, token_symbol="ETH", up_target=3000.0, down_target=2000.0
        )

    def test_no_band(self):
        assert parse_price_band("lock 3 ETH for 2 weeks") is None


class TestParseCommitmentRequest:
    """parse_commitment_request 테스트"""

    def test_price_band_takes_precedence(self):
        request = parse_commitment_request("Lock 1 SOL until price reaches 250 or 100 within 2 months")
        assert isinstance(request, PriceBandCommitment)

    def test_duration(self):
        request = parse_commitment_request("Can you analyze locking 100 LINK for 2 weeks?")

        assert isinstance(request, DurationCommitment)
        assert request.duration_days == 14

    @pytest.mark.parametrize("text", ["", "How is the market today?", "lock ETH forever"])
    def test_general(self, text):
        assert parse_commitment_request(text) is None


class TestWalletRequest:
    """is_wallet_request / extract_wallet_address 테스트"""

    @pytest.mark.parametrize("text", [
        "Analyze my wallet please",
        "can you analyze trading history for me",
        "What's my risk score?",
        "Show my trading patterns",
        "I need a portfolio review",
        "wallet analysis for 0x0000000000000000000000000000000000000001",
    ])
    def test_wallet_request(self, text):
        assert is_wallet_request(text) is True

    @pytest.mark.parametrize("text", ["", "lock 10 ETH for 3 months", "How is the market today?"])
    def test_not_wallet_request(self, text):
        assert is_wallet_request(text) is False

    def test_extract_address(self):
        address = "0x" + "aB" * 20
        assert extract_wallet_address(f"analyze my wallet {address} and 0x{'1' * 40}") == address

    @pytest.mark.parametrize("text", ["", "analyze my wallet", "analyze 0x1234"])
    def test_no_address(self, text):
        assert extract_wallet_address(text) is None
