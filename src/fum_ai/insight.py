"""전체 시장 센티먼트/변동성 인사이트"""

from fum_ai.models import MarketOverview

FALLBACK_OVERVIEW = MarketOverview(
    btc=65000,
    eth=3500,
    sol=120,
    btc_change_24h=0,
    eth_change_24h=0,
    sol_change_24h=0,
    sentiment="neutral",
    volatility="moderate",
    fear_greed_index=55,
    market_cap_change_24h=0,
    is_fallback=True,
)


class MarketInsightAnalyzer:
    """시장 전체 현황 기반 행동 재무 인사이트"""

    @staticmethod
    def sentiment_label(fear_greed_index: int) -> str:
        """Fear & Greed → 센티먼트 라벨"""
        if fear_greed_index >= 75:
            return "extreme greed"
        if fear_greed_index >= 60:
            return "greed"
        if fear_greed_index >= 40:
            return "neutral"
        if fear_greed_index >= 25:
            return "fear"
        return "extreme fear"

    @staticmethod
    def volatility_label(market_cap_change_24h: float) -> str:
        """24h 시가총액 변동률 → 변동성 라벨"""
        abs_change = abs(market_cap_change_24h)
        if abs_change > 10:
            return "extreme"
        if abs_change > 5:
            return "high"
        if abs_change > 2:
            return "moderate"
        return "low"

    @classmethod
    def build_overview(
        cls,
        prices: dict,
        fear_greed_index: int,
        market_cap_change_24h: float,
    ) -> MarketOverview:
        """
        CoinGecko simple/price 응답 + 지표로 MarketOverview 구성

        시세가 누락된 코인은 fallback 가격 사용
        """
        btc = prices.get("bitcoin", {})
        eth = prices.get("ethereum", {})
        sol = prices.get("solana", {})

        return MarketOverview(
            btc=btc.get("usd") or FALLBACK_OVERVIEW.btc,
            eth=eth.get("usd") or FALLBACK_OVERVIEW.eth,
            sol=sol.get("usd") or FALLBACK_OVERVIEW.sol,
            btc_change_24h=btc.get("usd_24h_change") or 0,
            eth_change_24h=eth.get("usd_24h_change") or 0,
            sol_change_24h=sol.get("usd_24h_change") or 0,
            sentiment=cls.sentiment_label(fear_greed_index),
            volatility=cls.volatility_label(market_cap_change_24h),
            fear_greed_index=fear_greed_index,
            market_cap_change_24h=market_cap_change_24h,
        )

    @staticmethod
    def behavioral_context(overview: MarketOverview) -> list[str]:
        """시장 상황별 행동 가이드"""
        context = []

        if overview.sentiment == "extreme fear":
            context.append("Extreme fear often marks market bottoms - good time for commitment strategies")
        elif overview.sentiment == "extreme greed":
            context.append("Extreme greed suggests potential market top - consider waiting")

        if overview.volatility == "extreme":
            context.append("High volatility - focus on risk management and shorter commitments")
        elif overview.volatility == "low":
            context.append("Low volatility - good environment for longer-term commitments")

        return context
