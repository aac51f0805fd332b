"""데이터 모델 테스트"""

import dataclasses

import pytest

from fum_ai.models import (
    DurationCommitment,
    MarketSnapshot,
    SentimentSnapshot,
    TokenNotFoundError,
    ValidationError,
)


class TestMarketSnapshot:
    """MarketSnapshot.from_coingecko 테스트"""

    def test_flat_markets_payload(self):
        snapshot = MarketSnapshot.from_coingecko({
            "symbol": "sol",
            "name": "Solana",
            "current_price": 150.5,
            "price_change_percentage_24h": 2.0,
            "market_cap": 70000000000,
            "total_volume": 3000000000,
            "ath_change_percentage": -45.0,
        })

        assert snapshot.symbol == "SOL"
        assert snapshot.current_price == 150.5
        assert snapshot.market_cap == 70000000000.0
        assert snapshot.ath_change_percentage == -45.0

    def test_missing_fields_default_to_zero(self):
        snapshot = MarketSnapshot.from_coingecko({"market_data": {"current_price": {"usd": None}}})

        assert snapshot.current_price == 0.0
        assert snapshot.price_change_30d == 0.0
        assert snapshot.symbol == ""

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            MarketSnapshot().current_price = 1.0


class TestErrors:
    """예외 테스트"""

    def test_token_not_found(self):
        error = TokenNotFoundError("XYZ", [("XYZ2", "Xyz Two")])

        assert isinstance(error, LookupError)
        assert str(error) == "Token not found: XYZ"
        assert error.suggestions == [("XYZ2", "Xyz Two")]

    def test_token_not_found_without_suggestions(self):
        assert TokenNotFoundError("XYZ").suggestions == []

    def test_validation_error_is_value_error(self):
        assert issubclass(ValidationError, ValueError)


class TestToDict:
    """to_dict 테스트"""

    def test_request(self):
        assert DurationCommitment(1.0, "ETH", 30).to_dict() == {
            "amount": 1.0,
            "token_symbol": "ETH",
            "duration_days": 30,
            "duration_value": None,
            "duration_unit": "days",
        }

    def test_sentiment(self):
        assert SentimentSnapshot(42, "Fear", 1000).to_dict() == {
            "value": 42,
            "classification": "Fear",
            "timestamp_ms": 1000,
        }
