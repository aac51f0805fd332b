"""공용 픽스처 (가짜 시장 데이터 소스, 샘플 시계열)"""

import pytest

from fum_ai.insight import MarketInsightAnalyzer
from fum_ai.models import MS_PER_DAY, MarketSnapshot, SentimentSnapshot

START_MS = 1_700_000_000_000
WALLET = "0x" + "ab" * 20
COUNTERPARTY = "0x" + "cd" * 20


def build_series(prices, start_ms=START_MS, step_days=1):
    """가격 목록 → [(timestamp_ms, price), ...] (일 간격)"""
    return [(start_ms + i * step_days * MS_PER_DAY, float(p)) for i, p in enumerate(prices)]


def linear_series(start_price, end_price, days=365):
    """시작가 → 종료가 선형 시계열 (days + 1 포인트)"""
    step = (end_price - start_price) / days
    return build_series([start_price + step * i for i in range(days + 1)])


def zigzag_series(low=100.0, high=150.0, points=120):
    """고변동성 시계열 (low/high 반복)"""
    return build_series([low if i % 2 == 0 else high for i in range(points)])


class FakeMarketSource:
    """테스트용 MarketDataSource (메모리 데이터)"""

    def __init__(self, snapshots=None, series=None, sentiment=None, overview=None, suggestions=None):
        self.snapshots = snapshots or {}
        self.series = series or {}
        self.sentiment = sentiment
        self.overview = overview
        self.suggestions = suggestions or []
        self.history_requests = []

    def get_snapshot(self, symbol):
        return self.snapshots.get(symbol.upper())

    def get_historical_series(self, symbol, days):
        self.history_requests.append((symbol, days))
        return self.series.get(symbol.upper())

    def get_sentiment(self):
        return self.sentiment

    def suggest_tokens(self, symbol):
        return self.suggestions

    def get_market_overview(self):
        if self.overview is None:
            raise ConnectionError("market data offline")
        return self.overview


class FakeLedger:
    """테스트용 LedgerDataSource (인덱서 레코드 dict)"""

    def __init__(self, transactions=None, balances=None):
        self.transactions = transactions or []
        self.balances = balances or []
        self.requests = []

    def get_transactions(self, address):
        self.requests.append(address)
        return self.transactions

    def get_token_balances(self, address):
        return self.balances


@pytest.fixture
def eth_snapshot():
    """30일 -25%, 시가총액/ATH 정보 없는 ETH"""
    return MarketSnapshot(
        current_price=3000.0,
        price_change_24h=-1.5,
        price_change_7d=-8.0,
        price_change_30d=-25.0,
        symbol="ETH",
        name="Ethereum",
    )


@pytest.fixture
def neutral_snapshot():
    """모든 점수 규칙이 0점인 스냅샷 (수량 10 기준)"""
    return MarketSnapshot(
        current_price=100.0,
        price_change_30d=0.0,
        market_cap=5_000_000_000,
        ath_change_percentage=-30.0,
        symbol="TKN",
        name="Token",
    )


@pytest.fixture
def extreme_fear():
    return SentimentSnapshot(value=20, classification="Extreme Fear", timestamp_ms=START_MS)


@pytest.fixture
def extreme_greed():
    return SentimentSnapshot(value=80, classification="Extreme Greed", timestamp_ms=START_MS)


@pytest.fixture
def neutral_sentiment():
    return SentimentSnapshot(value=50, classification="Neutral", timestamp_ms=START_MS)


@pytest.fixture
def market_overview():
    return MarketInsightAnalyzer.build_overview(
        {
            "bitcoin": {"usd": 60000.0, "usd_24h_change": 1.5},
            "ethereum": {"usd": 3000.0, "usd_24h_change": -0.5},
            "solana": {"usd": 150.0, "usd_24h_change": 3.2},
        },
        20,
        1.0,
    )


@pytest.fixture
def fake_source(eth_snapshot, extreme_fear, market_overview):
    return FakeMarketSource(
        snapshots={"ETH": eth_snapshot},
        sentiment=extreme_fear,
        overview=market_overview,
        suggestions=[("ETHW", "EthereumPoW"), ("ETHFI", "Ether.fi")],
    )


@pytest.fixture
def fake_ledger():
    """
    ETH 네이티브 1회 + AVAX JOE 1회 왕복 거래 (각 40일 보유), ETH USDC 잔고

    총 2거래, 평균 보유 40일, 변동성 선호 50, 분산 점수 40, 감정 거래 없음
    """
    day = MS_PER_DAY
    return FakeLedger(
        transactions=[
            {"hash": "0x1", "timestamp": START_MS, "from": COUNTERPARTY, "to": WALLET,
             "value": "2000000000000000000", "chain": "ETH"},
            {"hash": "0x2", "timestamp": START_MS + 40 * day, "from": WALLET, "to": COUNTERPARTY,
             "value": "1000000000000000000", "chain": "ETH"},
            {"hash": "0x3", "timestamp": START_MS + 5 * day, "from": COUNTERPARTY, "to": WALLET,
             "value": "5000000000000000000", "chain": "AVAX",
             "tokenAddress": "0xjoe", "tokenSymbol": "JOE", "tokenDecimals": 18},
            {"hash": "0x4", "timestamp": START_MS + 45 * day, "from": WALLET, "to": COUNTERPARTY,
             "value": "5000000000000000000", "chain": "AVAX",
             "tokenAddress": "0xjoe", "tokenSymbol": "JOE", "tokenDecimals": 18},
        ],
        balances=[
            {"tokenAddress": "0xusdc", "tokenSymbol": "USDC", "tokenName": "USD Coin",
             "tokenDecimals": 6, "balance": "1500000000", "chain": "ETH"},
        ],
    )
