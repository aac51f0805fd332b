"""CoinGecko API 클라이언트"""

from collections.abc import Sequence

import pandas as pd
import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from fum_ai.models import HistoricalSeries, MarketSnapshot


class CoinGeckoClient:
    """
    CoinGecko 공개 API 클라이언트
    - 무료 (30 calls/min), 데모 키가 있으면 헤더로 전달
    - 코인 목록, 코인 상세(market_data), 가격 히스토리
    """

    BASE_URL = "https://api.coingecko.com/api/v3"

    def __init__(self, api_key: str | None = None, timeout: float = 30):
        self.api_key = api_key
        self.timeout = timeout
        self.headers = {"Accept": "application/json"}
        if api_key:
            self.headers["x-cg-demo-api-key"] = api_key

    @retry(
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    def _request(self, endpoint: str, params: dict | None = None):
        """API 요청 (연결 오류 재시도)"""
        url = f"{self.BASE_URL}{endpoint}"
        response = requests.get(url, headers=self.headers, params=params or {}, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def get_coin_list(self) -> list[dict]:
        """
        지원되는 모든 코인 목록

        Returns:
            [{"id": "bitcoin", "symbol": "btc", "name": "Bitcoin"}, ...]
        """
        return self._request("/coins/list")

    def get_coin(self, coin_id: str) -> dict:
        """코인 상세 (market_data 포함)"""
        return self._request(f"/coins/{coin_id}", {
            "localization": "false",
            "tickers": "false",
            "market_data": "true",
            "community_data": "false",
            "developer_data": "false",
            "sparkline": "false",
        })

    def get_snapshot(self, coin_id: str) -> MarketSnapshot:
        """코인 상세를 MarketSnapshot으로 변환"""
        return MarketSnapshot.from_coingecko(self.get_coin(coin_id))

    def get_market_chart(
        self,
        coin_id: str,
        days: int | str = 365,
        vs_currency: str = "usd",
    ) -> pd.DataFrame:
        """
        가격 히스토리

        Returns:
            DataFrame [timestamp(ms), price] (시간 오름차순)
        """
        data = self._request(f"/coins/{coin_id}/market_chart", {
            "vs_currency": vs_currency,
            "days": days,
        })

        df = pd.DataFrame(data.get("prices", []), columns=["timestamp", "price"])
        df = df.dropna()
        return df.sort_values("timestamp").reset_index(drop=True)

    def get_historical_series(self, coin_id: str, days: int | str = 365) -> HistoricalSeries:
        """가격 히스토리를 [(timestamp_ms, price), ...]로"""
        df = self.get_market_chart(coin_id, days=days)
        return [
            (int(ts), float(price))
            for ts, price in zip(df["timestamp"], df["price"])
        ]

    def get_simple_price(self, ids: list[str], vs_currencies: Sequence[str] = ("usd",)) -> dict:
        """
        간단 시세 조회

        Returns:
            {"bitcoin": {"usd": 45000, "usd_24h_change": -1.5, ...}, ...}
        """
        return self._request("/simple/price", {
            "ids": ",".join(ids),
            "vs_currencies": ",".join(vs_currencies),
            "include_24hr_change": "true",
            "include_24hr_vol": "true",
        })

    def get_global(self) -> dict:
        """글로벌 시장 데이터"""
        data = self._request("/global")
        return data.get("data", {})
