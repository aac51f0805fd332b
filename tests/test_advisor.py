"""CommitmentAdvisor 테스트"""

import pytest

from conftest import WALLET, FakeLedger, FakeMarketSource
from fum_ai.advisor import (
    ACTION_NAME,
    ERROR_TEXT,
    WALLET_ACTION_NAME,
    WALLET_ERROR_TEXT,
    WALLET_UNAVAILABLE_TEXT,
    CommitmentAdvisor,
)
from fum_ai.insight import FALLBACK_OVERVIEW
from fum_ai.models import (
    DurationCommitment,
    MarketSnapshot,
    PriceBandCommitment,
    TokenNotFoundError,
)


class TestAnalyze:
    """analyze_duration / analyze_price_band 테스트"""

    def test_history_window_covers_duration(self, fake_source):
        advisor = CommitmentAdvisor(fake_source, history_days=365)
        advisor.analyze_duration(DurationCommitment(1, "ETH", 730))
        advisor.analyze_duration(DurationCommitment(1, "ETH", 30))

        assert fake_source.history_requests == [("ETH", 730), ("ETH", 365)]

    def test_unknown_token(self, fake_source):
        advisor = CommitmentAdvisor(fake_source)

        with pytest.raises(TokenNotFoundError) as exc_info:
            advisor.analyze_duration(DurationCommitment(1, "BTC", 30))

        assert exc_info.value.symbol == "BTC"
        assert exc_info.value.suggestions == [("ETHW", "EthereumPoW"), ("ETHFI", "Ether.fi")]

    def test_price_band(self, fake_source):
        fake_source.snapshots["ETH"] = MarketSnapshot(current_price=2500.0, symbol="ETH")
        advisor = CommitmentAdvisor(fake_source)

        analysis = advisor.analyze_price_band(PriceBandCommitment(3, "ETH", 3000, 2000))

        assert analysis.token_symbol == "ETH"
        assert analysis.expected_return.up_scenario == pytest.approx(20.0)

    def test_market_overview_fallback(self, fake_source):
        fake_source.overview = None

        assert CommitmentAdvisor(fake_source).market_overview() is FALLBACK_OVERVIEW


class TestHandleMessage:
    """handle_message 테스트"""

    @pytest.fixture
    def advisor(self, fake_source):
        return CommitmentAdvisor(fake_source)

    def test_duration_commitment(self, advisor):
        response = advisor.handle_message("I want to lock 10 ETH for 4 months")

        assert response.success is True
        assert response.action == ACTION_NAME
        assert "**Proposal:** Lock 10 ETH for 4 months" in response.text
        meta = response.metadata
        assert meta["token"] == "ETH"
        assert meta["durationInDays"] == 120
        assert meta["unit"] == "months"
        assert meta["score"] == 90
        assert meta["recommendation"] == "HIGHLY_RECOMMENDED"
        assert meta["riskLevel"] == "MODERATE"
        assert meta["fearGreedIndex"] == 20
        assert meta["analysis"]["score"] == 90

    def test_price_band_commitment(self, advisor, fake_source):
        fake_source.snapshots["ETH"] = MarketSnapshot(current_price=2500.0, symbol="ETH")

        response = advisor.handle_message("Lock 3 ETH until price reaches 3000 or 2000")

        assert response.success is True
        assert response.text.startswith("🎯 **Price-Based Commitment Analysis**")
        assert response.metadata["upTarget"] == 3000.0
        assert response.metadata["downTarget"] == 2000.0

    def test_invalid_price_band(self, advisor):
        response = advisor.handle_message("Lock 3 ETH until price reaches 2000 or 1000")

        assert response.success is False
        assert "Up target (2000) must be higher than current price (3000)" in response.text

    def test_token_not_found(self, advisor):
        response = advisor.handle_message("lock 1 BTC for 3 months")

        assert response.success is False
        assert "Did you mean one of these?" in response.text
        assert "• ETHW (EthereumPoW)" in response.text

    def test_general_query(self, advisor):
        response = advisor.handle_message("How is the market looking?")

        assert response.success is True
        assert response.text.startswith("Please provide a commitment proposal for analysis.")
        assert response.metadata["analysisType"] == "general"
        assert response.metadata["fearGreedIndex"] == 20

    def test_general_query_fallback(self, fake_source):
        fake_source.overview = None
        response = CommitmentAdvisor(fake_source).handle_message("hello")

        assert "Market Data Unavailable" in response.text
        assert response.metadata["marketData"]["is_fallback"] is True

    def test_missing_sentiment(self, fake_source):
        fake_source.sentiment = None
        response = CommitmentAdvisor(fake_source).handle_message("lock 10 ETH for 4 months")

        assert response.success is True
        assert response.metadata["fearGreedIndex"] is None
        assert response.metadata["score"] == 70

    def test_unexpected_error(self, eth_snapshot):
        class BrokenSource(FakeMarketSource):
            def get_historical_series(self, symbol, days):
                raise RuntimeError("boom")

        advisor = CommitmentAdvisor(BrokenSource(snapshots={"ETH": eth_snapshot}))
        response = advisor.handle_message("lock 10 ETH for 4 months")

        assert response.success is False
        assert response.text == ERROR_TEXT


class TestWalletMessage:
    """지갑 분석 메시지 테스트"""

    @pytest.fixture
    def advisor(self, fake_source, fake_ledger):
        return CommitmentAdvisor(fake_source, ledger=fake_ledger)

    def test_wallet_analysis(self, advisor, fake_ledger):
        response = advisor.handle_message(f"Please analyze my wallet {WALLET}")

        assert response.success is True
        assert response.action == WALLET_ACTION_NAME
        assert response.text.startswith("# 📊 **Wallet Trading Analysis Report**")
        assert response.metadata["walletAddress"] == WALLET
        assert response.metadata["analysis"]["risk_profile"] == "MODERATE_RISK"
        assert fake_ledger.requests == [WALLET]

    def test_explicit_address(self, advisor, fake_ledger):
        response = advisor.handle_wallet_message("what is my risk score", wallet_address=WALLET)

        assert response.success is True
        assert fake_ledger.requests == [WALLET]

    def test_commitment_takes_precedence(self, advisor, fake_ledger):
        response = advisor.handle_message("Analyze my portfolio: lock 10 ETH for 4 months")

        assert response.action == ACTION_NAME
        assert fake_ledger.requests == []

    def test_without_ledger(self, fake_source):
        response = CommitmentAdvisor(fake_source).handle_message("analyze my wallet")

        assert response.success is False
        assert response.action == WALLET_ACTION_NAME
        assert response.text == WALLET_UNAVAILABLE_TEXT

    def test_ledger_error(self, fake_source):
        class BrokenLedger(FakeLedger):
            def get_transactions(self, address):
                raise ConnectionError("indexer offline")

        advisor = CommitmentAdvisor(fake_source, ledger=BrokenLedger())
        response = advisor.handle_message("analyze my trading history")

        assert response.success is False
        assert response.text == WALLET_ERROR_TEXT

    def test_fallback_overview_means_no_market_data(self, fake_source, fake_ledger):
        fake_source.overview = None
        advisor = CommitmentAdvisor(fake_source, ledger=fake_ledger)

        analysis, overview = advisor.analyze_wallet(WALLET)

        assert overview is FALLBACK_OVERVIEW
        assert analysis.market_analysis.recommendation.startswith("Market data unavailable")

    def test_analyze_wallet_requires_ledger(self, fake_source):
        with pytest.raises(RuntimeError):
            CommitmentAdvisor(fake_source).analyze_wallet(WALLET)
