"""
지갑 거래 이력 기반 행동 리스크 분석
- TradingAnalyzer: 트랜잭션/잔고 → 거래 행동 지표
- 리스크 점수, 신뢰도, 리스크 허용도, 맞춤 추천
- WalletAnalyzer: LedgerDataSource 조회 + 시장 현황 결합
"""

from collections import defaultdict
from decimal import Decimal, InvalidOperation

from fum_ai.data_sources import LedgerDataSource
from fum_ai.log import get_logger
from fum_ai.models import (
    MS_PER_DAY,
    MarketOverview,
    MarketSentiment,
    RiskTolerance,
    TokenBalance,
    TradingMetrics,
    TrendDirection,
    WalletAnalysis,
    WalletMarketAnalysis,
    WalletRiskProfile,
    WalletTransaction,
)

logger = get_logger("wallet")

ZERO_ADDRESS = "0x" + "0" * 40
MS_PER_WEEK = MS_PER_DAY * 7

DEFAULT_HOLD_DAYS = 30.0
DEFAULT_VOLATILITY_TOLERANCE = 50.0

VOLATILE_TOKENS = {
    "ETH": ("SHIB", "DOGE", "PEPE", "FLOKI", "MEME"),
    "AVAX": ("JOE", "TIME", "SPELL", "MIM"),
}

# 손익/낙폭/샤프 고정값 (가격 이력 미사용)
PROFIT_LOSS_RATIO = 1.2
WIN_RATE = 0.55
MAX_DRAWDOWN = 15.0
SHARPE_RATIO = 1.2

PANIC_SELLING = "Detected panic selling during market downturns"
FOMO_BUYING = "FOMO buying patterns detected during price rallies"

UNAVAILABLE_MARKET_TEXT = (
    "Market data unavailable. Consider waiting for clearer market signals "
    "before making significant trading decisions."
)

MARKET_RECOMMENDATIONS = {
    MarketSentiment.BULLISH: (
        "Market sentiment is bullish with positive momentum. Consider gradual position "
        "building while maintaining risk management protocols."
    ),
    MarketSentiment.BEARISH: (
        "Market sentiment is bearish. Focus on capital preservation and consider defensive "
        "strategies. Look for oversold conditions for potential opportunities."
    ),
    MarketSentiment.NEUTRAL: (
        "Market sentiment is neutral. This is a good time to review and rebalance your "
        "portfolio based on your risk tolerance and investment goals."
    ),
}


# ============================================================
# 거래 행동 지표
# ============================================================


class TradingAnalyzer:
    """
    트랜잭션 이력 → TradingMetrics

    사용 예:
        analyzer = TradingAnalyzer()
        metrics = analyzer.analyze_trading_history(transactions, balances, address)
    """

    def analyze_trading_history(
        self,
        transactions: list[WalletTransaction],
        balances: list[TokenBalance],
        address: str | None = None,
    ) -> TradingMetrics:
        """
        거래 행동 지표 계산

        Args:
            transactions: 지갑 트랜잭션 (순서 무관)
            balances: 토큰 잔고
            address: 지갑 주소 (있으면 보낸 트랜잭션=매도, 받은 트랜잭션=매수로 구분)

        Returns:
            TradingMetrics
        """
        ordered = sorted(transactions, key=lambda tx: tx.timestamp_ms)
        groups = self.group_by_token(ordered)
        sizes = self._trade_sizes(ordered)
        eth_activity, avax_activity = self._chain_activity(ordered)

        return TradingMetrics(
            total_trades=sum(len(trades) // 2 for trades in groups.values()),
            average_hold_time=self._average_hold_time(groups),
            trade_frequency=self._trade_frequency(ordered),
            volatility_tolerance=self._volatility_tolerance(groups),
            diversification_score=self._diversification_score(balances, groups),
            emotional_trading_indicators=tuple(self._emotional_indicators(ordered, address)),
            profit_loss_ratio=PROFIT_LOSS_RATIO,
            max_drawdown=MAX_DRAWDOWN,
            sharpe_ratio=SHARPE_RATIO,
            win_rate=WIN_RATE,
            average_trade_size=sum(sizes) / len(sizes) if sizes else 0.0,
            largest_trade=max(sizes, default=0.0),
            smallest_trade=min(sizes, default=0.0),
            eth_activity=eth_activity,
            avax_activity=avax_activity,
        )

    @staticmethod
    def group_by_token(
        transactions: list[WalletTransaction],
    ) -> dict[tuple[str, str], list[WalletTransaction]]:
        """(체인, 토큰 주소 또는 NATIVE) 별 트랜잭션 묶음"""
        groups: dict[tuple[str, str], list[WalletTransaction]] = defaultdict(list)
        for tx in transactions:
            groups[(tx.chain, tx.token_address or "NATIVE")].append(tx)
        return dict(groups)

    @staticmethod
    def _average_hold_time(groups: dict) -> float:
        # 토큰별 시간순 (매수, 매도) 쌍
        hold_days = []
        for trades in groups.values():
            for buy, sell in zip(trades[::2], trades[1::2]):
                hold_days.append((sell.timestamp_ms - buy.timestamp_ms) / MS_PER_DAY)
        return sum(hold_days) / len(hold_days) if hold_days else DEFAULT_HOLD_DAYS

    @staticmethod
    def _trade_frequency(transactions: list[WalletTransaction]) -> float:
        """주당 트랜잭션 수"""
        if len(transactions) < 2:
            return 0.0
        weeks = (transactions[-1].timestamp_ms - transactions[0].timestamp_ms) / MS_PER_WEEK
        return len(transactions) / weeks if weeks > 0 else 0.0

    @staticmethod
    def _volatility_tolerance(groups: dict) -> float:
        """밈/고변동 토큰 거래 비중 (0~100)"""
        total = 0
        volatile = 0
        for (chain, token_address), trades in groups.items():
            total += len(trades)
            symbol = (trades[0].token_symbol or token_address).upper()
            if any(token in symbol for token in VOLATILE_TOKENS.get(chain, ())):
                volatile += len(trades)
        return volatile / total * 100 if total else DEFAULT_VOLATILITY_TOLERANCE

    @staticmethod
    def _diversification_score(balances: list[TokenBalance], groups: dict) -> float:
        """보유/거래 토큰 수 + 멀티체인 여부 (0~100)"""
        tokens: dict[str, set[str]] = {"ETH": set(), "AVAX": set()}
        for balance in balances:
            if balance.chain in tokens:
                tokens[balance.chain].add(balance.token_address)
        for chain, token_address in groups:
            if chain in tokens:
                tokens[chain].add(token_address)

        unique = len(tokens["ETH"]) + len(tokens["AVAX"])
        score = 20 if tokens["ETH"] and tokens["AVAX"] else 0

        if unique >= 10:
            score += 70
        elif unique >= 7:
            score += 50
        elif unique >= 5:
            score += 30
        elif unique >= 3:
            score += 20
        else:
            score += 10

        return float(min(score, 100))

    @staticmethod
    def _has_burst(transactions: list[WalletTransaction]) -> bool:
        """24시간 안에 3건 이상 연속 거래"""
        return any(
            later.timestamp_ms - earlier.timestamp_ms < MS_PER_DAY
            for earlier, later in zip(transactions, transactions[2:])
        )

    def _emotional_indicators(
        self,
        transactions: list[WalletTransaction],
        address: str | None,
    ) -> list[str]:
        if address:
            owner = address.lower()
            sells = [tx for tx in transactions if tx.from_address.lower() == owner]
            buys = [tx for tx in transactions if tx.to_address.lower() == owner]
        else:
            sells = buys = transactions

        indicators = []
        if self._has_burst(sells):
            indicators.append(PANIC_SELLING)
        if self._has_burst(buys):
            indicators.append(FOMO_BUYING)
        return indicators

    @staticmethod
    def _trade_sizes(transactions: list[WalletTransaction]) -> list[float]:
        """토큰 단위 거래 규모 (0 제외)"""
        sizes = []
        for tx in transactions:
            try:
                raw = Decimal(tx.value or "0")
            except InvalidOperation:
                logger.warning("거래 금액 파싱 실패 (%s): %r", tx.hash, tx.value)
                continue
            decimals = tx.token_decimals if tx.token_decimals is not None else 18
            size = float(raw.scaleb(-decimals))
            if size > 0:
                sizes.append(size)
        return sizes

    @staticmethod
    def _chain_activity(transactions: list[WalletTransaction]) -> tuple[float, float]:
        """ETH / AVAX 트랜잭션 비중 (%)"""
        if not transactions:
            return 0.0, 0.0
        total = len(transactions)
        eth = sum(1 for tx in transactions if tx.chain == "ETH")
        avax = sum(1 for tx in transactions if tx.chain == "AVAX")
        return eth / total * 100, avax / total * 100


# ============================================================
# 리스크 평가
# ============================================================


def calculate_risk_score(metrics: TradingMetrics) -> float:
    """거래 행동 리스크 점수 (0~100, 높을수록 위험)"""
    score = 0.0
    score += min(metrics.trade_frequency * 5, 30)
    score += max(0.0, (30 - metrics.average_hold_time) * 2)
    score += metrics.volatility_tolerance * 0.3
    score += max(0.0, (50 - metrics.diversification_score) * 0.5)
    score += len(metrics.emotional_trading_indicators) * 10
    if metrics.profit_loss_ratio < 1:
        score += 20
    score += metrics.max_drawdown * 0.5
    return min(max(score, 0.0), 100.0)


def calculate_confidence(metrics: TradingMetrics) -> float:
    """분석 신뢰도 (%) - 거래 수가 많고 보유 기간이 길수록 높음 (50~95)"""
    confidence = 70.0
    if metrics.total_trades > 100:
        confidence += 15
    elif metrics.total_trades > 50:
        confidence += 10
    else:
        confidence -= 10
    if metrics.average_hold_time > 30:
        confidence += 10
    if metrics.diversification_score > 70:
        confidence += 5
    confidence -= len(metrics.emotional_trading_indicators) * 5
    return min(max(confidence, 50.0), 95.0)


def risk_profile_for(risk_score: float) -> WalletRiskProfile:
    """리스크 점수 → 프로필"""
    if risk_score < 25:
        return WalletRiskProfile.LOW_RISK
    if risk_score < 50:
        return WalletRiskProfile.MODERATE_RISK
    if risk_score < 75:
        return WalletRiskProfile.HIGH_RISK
    return WalletRiskProfile.EXTREME_RISK


def risk_tolerance_for(metrics: TradingMetrics, risk_score: float) -> RiskTolerance:
    """거래 빈도/변동성 선호/보유 기간 → 리스크 허용도"""
    tolerance = (
        metrics.trade_frequency * 10
        + metrics.volatility_tolerance * 0.5
        + max(0.0, (30 - metrics.average_hold_time) * 2)
        + risk_score * 0.3
    )
    if tolerance < 30:
        return RiskTolerance.CONSERVATIVE
    if tolerance < 60:
        return RiskTolerance.MODERATE
    if tolerance < 90:
        return RiskTolerance.AGGRESSIVE
    return RiskTolerance.EXTREME


def analyze_market_conditions(overview: MarketOverview | None) -> WalletMarketAnalysis:
    """Fear & Greed + 24h 시가총액 변동 → 시장 방향"""
    if overview is None:
        return WalletMarketAnalysis(
            MarketSentiment.NEUTRAL, TrendDirection.SIDEWAYS, UNAVAILABLE_MARKET_TEXT
        )

    change = overview.market_cap_change_24h
    if overview.fear_greed_index >= 60:
        sentiment = MarketSentiment.BULLISH
        trend = TrendDirection.UPWARD if change > 0 else TrendDirection.SIDEWAYS
    elif overview.fear_greed_index <= 40:
        sentiment = MarketSentiment.BEARISH
        trend = TrendDirection.DOWNWARD if change < 0 else TrendDirection.SIDEWAYS
    else:
        sentiment = MarketSentiment.NEUTRAL
        if abs(change) < 2:
            trend = TrendDirection.SIDEWAYS
        elif change > 0:
            trend = TrendDirection.UPWARD
        else:
            trend = TrendDirection.DOWNWARD

    return WalletMarketAnalysis(sentiment, trend, MARKET_RECOMMENDATIONS[sentiment])


def personalized_recommendations(
    metrics: TradingMetrics,
    risk_score: float,
    market: WalletMarketAnalysis,
) -> list[str]:
    """리스크/거래 습관/시장 상황별 추천"""
    recommendations = []

    if risk_score > 70:
        recommendations.append(
            "Your trading patterns indicate high risk. Consider implementing strict "
            "stop-losses and reducing position sizes."
        )
    elif risk_score > 50:
        recommendations.append(
            "Consider diversifying your portfolio and implementing basic risk management strategies."
        )
    else:
        recommendations.append(
            "Your current risk profile is well-managed. Continue with your current strategies."
        )

    if metrics.trade_frequency > 5:
        recommendations.append(
            "High-frequency trading may lead to increased transaction costs and emotional "
            "decisions. Consider longer holding periods."
        )
    if metrics.average_hold_time < 14:
        recommendations.append(
            "Short holding periods often indicate emotional trading. Consider implementing "
            "a minimum 30-day holding rule."
        )
    if metrics.diversification_score < 50:
        recommendations.append(
            "Your portfolio appears concentrated. Consider spreading investments across "
            "different assets and sectors."
        )

    if market.sentiment is MarketSentiment.BEARISH:
        recommendations.append(
            "Consider defensive positions, dollar-cost averaging, and focus on capital preservation."
        )
    elif market.sentiment is MarketSentiment.BULLISH:
        recommendations.append(
            "While markets are bullish, maintain discipline and avoid FOMO-driven decisions."
        )

    if metrics.emotional_trading_indicators:
        recommendations.append(
            "Consider using commitment vaults to lock positions and prevent emotional "
            "decisions during market volatility."
        )

    recommendations.append(
        "Consider implementing a systematic investment plan with regular rebalancing to "
        "reduce emotional decision-making."
    )
    return recommendations


def assess_trading_metrics(
    metrics: TradingMetrics,
    overview: MarketOverview | None = None,
    wallet_address: str | None = None,
) -> WalletAnalysis:
    """TradingMetrics + 시장 현황 → WalletAnalysis"""
    risk_score = calculate_risk_score(metrics)
    market = analyze_market_conditions(overview)

    return WalletAnalysis(
        wallet_address=wallet_address,
        risk_score=risk_score,
        confidence_percentage=calculate_confidence(metrics),
        risk_profile=risk_profile_for(risk_score),
        risk_tolerance=risk_tolerance_for(metrics, risk_score),
        market_analysis=market,
        metrics=metrics,
        recommendations=tuple(personalized_recommendations(metrics, risk_score, market)),
    )


# ============================================================
# 지갑 분석 (LedgerDataSource 조회)
# ============================================================


class WalletAnalyzer:
    """
    LedgerDataSource 기반 지갑 리스크 분석

    사용 예:
        analyzer = WalletAnalyzer(ledger)
        analysis = analyzer.analyze("0xabc...", overview)
    """

    def __init__(self, ledger: LedgerDataSource, trading_analyzer: TradingAnalyzer | None = None):
        self.ledger = ledger
        self.trading_analyzer = trading_analyzer or TradingAnalyzer()

    def analyze(
        self,
        wallet_address: str | None,
        overview: MarketOverview | None = None,
    ) -> WalletAnalysis:
        """
        지갑 거래 이력 분석

        Args:
            wallet_address: 0x 주소 (없으면 zero address 조회)
            overview: 시장 현황 (없으면 시장 판단 NEUTRAL)

        Returns:
            WalletAnalysis
        """
        address = wallet_address or ZERO_ADDRESS
        transactions = [WalletTransaction.from_dict(tx) for tx in self.ledger.get_transactions(address)]
        balances = [TokenBalance.from_dict(b) for b in self.ledger.get_token_balances(address)]
        logger.info("지갑 %s: 트랜잭션 %d건, 잔고 %d건", address, len(transactions), len(balances))

        metrics = self.trading_analyzer.analyze_trading_history(
            transactions, balances, address=wallet_address
        )
        return assess_trading_metrics(metrics, overview, wallet_address)
