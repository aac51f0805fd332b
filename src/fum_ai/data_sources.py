"""
시장 데이터 소스
- MarketDataSource / LedgerDataSource 인터페이스
- Alternative.me Fear & Greed Index (센티먼트 규칙 입력)
  - API 문서: https://alternative.me/crypto/api/
- CoinGecko 기반 MarketDataSource 구현 (심볼 → 코인 ID 변환 + LRU 캐시)
"""

import threading
from collections import OrderedDict
from typing import Protocol

import httpx
import requests

from fum_ai.client import CoinGeckoClient
from fum_ai.insight import MarketInsightAnalyzer
from fum_ai.log import get_logger
from fum_ai.models import (
    HistoricalSeries,
    MarketOverview,
    MarketSnapshot,
    SentimentSnapshot,
)

logger = get_logger("data_sources")


# ============================================================
# 인터페이스
# ============================================================


class MarketDataSource(Protocol):
    """분석 엔진이 사용하는 시장 데이터 공급자"""

    def get_snapshot(self, symbol: str) -> MarketSnapshot | None: ...

    def get_historical_series(self, symbol: str, days: int) -> HistoricalSeries | None: ...

    def get_sentiment(self) -> SentimentSnapshot | None: ...


class LedgerDataSource(Protocol):
    """지갑 트랜잭션/잔고 공급자 (온체인 인덱서)"""

    def get_transactions(self, address: str) -> list[dict]: ...

    def get_token_balances(self, address: str) -> list[dict]: ...


# ============================================================
# 센티먼트 (Alternative.me Fear & Greed Index)
# ============================================================


class AlternativeMeClient:
    """
    Fear & Greed Index 조회 (Alternative.me /fng)
    - 키 불필요, 분당 60회 제한
    """

    BASE_URL = "https://api.alternative.me"

    def __init__(self, timeout: float = 30):
        self.timeout = timeout

    def get_fear_greed_index(self) -> SentimentSnapshot | None:
        """
        최신 Fear & Greed Index 조회

        Returns:
            최신 값 1건 (data가 비어 있으면 None), timestamp는 ms로 변환
        """
        with httpx.Client() as client:
            response = client.get(f"{self.BASE_URL}/fng/", params={"limit": 1}, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()

        if data.get("metadata", {}).get("error"):
            raise ValueError(f"API Error: {data['metadata']['error']}")

        result = data.get("data", [])
        if not result:
            return None

        item = result[0]
        return SentimentSnapshot(
            value=int(item["value"]),
            classification=item["value_classification"],
            timestamp_ms=int(item["timestamp"]) * 1000,
        )

    @staticmethod
    def interpret_fear_greed(value: int) -> str:
        """값 → Alternative.me 분류 라벨 (0-25 / 26-46 / 47-52 / 53-74 / 75-100)"""
        if value <= 25:
            return "Extreme Fear"
        elif value <= 46:
            return "Fear"
        elif value <= 52:
            return "Neutral"
        elif value <= 74:
            return "Greed"
        else:
            return "Extreme Greed"


# ============================================================
# 심볼 → CoinGecko ID 변환
# ============================================================

# 주요 코인 (심볼/이름 → CoinGecko ID)
COMMON_TOKENS = {
    "btc": "bitcoin",
    "bitcoin": "bitcoin",
    "eth": "ethereum",
    "ethereum": "ethereum",
    "usdt": "tether",
    "tether": "tether",
    "usdc": "usd-coin",
    "usd-coin": "usd-coin",
    "bnb": "binancecoin",
    "binancecoin": "binancecoin",
    "sol": "solana",
    "solana": "solana",
    "ada": "cardano",
    "cardano": "cardano",
    "avax": "avalanche-2",
    "avalanche": "avalanche-2",
    "dot": "polkadot",
    "polkadot": "polkadot",
    "atom": "cosmos",
    "cosmos": "cosmos",
    "etc": "ethereum-classic",
    "ethereum-classic": "ethereum-classic",
    "matic": "matic-network",
    "polygon": "matic-network",
    "link": "chainlink",
    "chainlink": "chainlink",
    "uni": "uniswap",
    "uniswap": "uniswap",
    "ltc": "litecoin",
    "litecoin": "litecoin",
    "bch": "bitcoin-cash",
    "bitcoin-cash": "bitcoin-cash",
    "xrp": "ripple",
    "ripple": "ripple",
    "doge": "dogecoin",
    "dogecoin": "dogecoin",
    "shib": "shiba-inu",
    "shiba-inu": "shiba-inu",
    "trx": "tron",
    "tron": "tron",
}

COMMON_SYMBOLS = (
    "BTC", "ETH", "USDT", "USDC", "BNB", "SOL", "ADA", "AVAX", "DOT", "ATOM",
    "ETC", "MATIC", "LINK", "UNI", "LTC", "BCH", "XRP", "DOGE", "SHIB", "TRX",
)


class TokenResolver:
    """
    심볼 → CoinGecko 코인 ID 변환

    조회 순서: 캐시 → 주요 코인 맵 → /coins/list 심볼 일치 → 이름 일치 → 부분 일치
    캐시 접근은 락으로 보호 (여러 요청 스레드에서 공유)
    """

    def __init__(self, client: CoinGeckoClient, cache_size: int = 512):
        self.client = client
        self.cache_size = cache_size
        self._cache: OrderedDict[str, str] = OrderedDict()
        self._coin_list: list[dict] | None = None
        self._lock = threading.Lock()

    def _remember(self, key: str, coin_id: str) -> str:
        with self._lock:
            self._cache[key] = coin_id
            self._cache.move_to_end(key)
            while len(self._cache) > self.cache_size:
                self._cache.popitem(last=False)
        return coin_id

    def _cached(self, key: str) -> str | None:
        with self._lock:
            coin_id = self._cache.get(key)
            if coin_id is not None:
                self._cache.move_to_end(key)
            return coin_id

    def _coins(self) -> list[dict]:
        if self._coin_list is None:
            self._coin_list = self.client.get_coin_list()
        return self._coin_list

    def resolve(self, symbol: str) -> str | None:
        """심볼을 코인 ID로 변환 (없으면 None)"""
        key = symbol.strip().lower()
        if not key:
            return None

        cached = self._cached(key)
        if cached is not None:
            return cached

        if key in COMMON_TOKENS:
            return self._remember(key, COMMON_TOKENS[key])

        coins = self._coins()

        for coin in coins:
            if coin["symbol"].lower() == key:
                return self._remember(key, coin["id"])

        for coin in coins:
            name = coin["name"].lower()
            if name == key or name.replace(" ", "") == key:
                return self._remember(key, coin["id"])

        for coin in coins:
            coin_symbol = coin["symbol"].lower()
            name = coin["name"].lower()
            if coin_symbol in key or key in coin_symbol or key in name or name in key:
                return self._remember(key, coin["id"])

        return None

    def suggest(self, symbol: str, limit: int = 10) -> list[tuple[str, str]]:
        """유사 심볼 추천 [(SYMBOL, name), ...]"""
        key = symbol.strip().lower()
        try:
            coins = self._coins()
        except requests.RequestException as e:
            logger.warning("코인 목록 조회 실패: %s", e)
            return []

        matches = [
            (coin["symbol"].upper(), coin["name"])
            for coin in coins
            if key in coin["symbol"].lower() or key in coin["name"].lower()
        ]
        return matches[:limit]

    @staticmethod
    def common_symbols() -> list[str]:
        """주요 코인 심볼 목록"""
        return list(COMMON_SYMBOLS)


# ============================================================
# CoinGecko 기반 MarketDataSource
# ============================================================


class CoinGeckoMarketSource:
    """
    CoinGecko + Alternative.me 기반 시장 데이터 공급자

    사용 예:
        source = CoinGeckoMarketSource()
        snapshot = source.get_snapshot("ETH")
        series = source.get_historical_series("ETH", 365)
        sentiment = source.get_sentiment()
    """

    def __init__(
        self,
        coingecko: CoinGeckoClient | None = None,
        alternative_me: AlternativeMeClient | None = None,
        resolver: TokenResolver | None = None,
    ):
        self.coingecko = coingecko or CoinGeckoClient()
        self.alternative_me = alternative_me or AlternativeMeClient()
        self.resolver = resolver or TokenResolver(self.coingecko)

    def get_snapshot(self, symbol: str) -> MarketSnapshot | None:
        """토큰 스냅샷 (심볼을 찾지 못하면 None, HTTP 오류는 전파)"""
        coin_id = self.resolver.resolve(symbol)
        if coin_id is None:
            return None
        return self.coingecko.get_snapshot(coin_id)

    def get_historical_series(self, symbol: str, days: int) -> HistoricalSeries | None:
        """가격 히스토리 (실패 시 None → 저신뢰 fallback)"""
        coin_id = self.resolver.resolve(symbol)
        if coin_id is None:
            return None

        try:
            return self.coingecko.get_historical_series(coin_id, days=days)
        except requests.RequestException as e:
            logger.warning("%s 히스토리 조회 실패: %s", symbol, e)
            return None

    def get_sentiment(self) -> SentimentSnapshot | None:
        """Fear & Greed Index (실패 시 None)"""
        try:
            return self.alternative_me.get_fear_greed_index()
        except (httpx.HTTPError, ValueError, KeyError) as e:
            logger.warning("Fear & Greed Index 조회 실패: %s", e)
            return None

    def suggest_tokens(self, symbol: str) -> list[tuple[str, str]]:
        """유사 토큰 추천"""
        return self.resolver.suggest(symbol)

    def get_market_overview(self) -> MarketOverview:
        """BTC/ETH/SOL 시세 + 센티먼트 + 시가총액 변동"""
        prices = self.coingecko.get_simple_price(["bitcoin", "ethereum", "solana"])
        global_data = self.coingecko.get_global()
        sentiment = self.alternative_me.get_fear_greed_index()

        return MarketInsightAnalyzer.build_overview(
            prices,
            sentiment.value if sentiment else 50,
            global_data.get("market_cap_change_percentage_24h_usd") or 0,
        )
