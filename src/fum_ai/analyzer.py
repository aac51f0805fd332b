"""기간 기반 커밋먼트 점수 엔진"""

from dataclasses import dataclass, field

from fum_ai.models import (
    CommitmentAnalysis,
    HistoricalSeries,
    MarketSnapshot,
    Recommendation,
    RiskLevel,
    SentimentSnapshot,
)
from fum_ai.prediction import calculate_expected_return, generate_price_predictions
from fum_ai.stats import SeriesStats, has_history, summarize

BASE_SCORE = 75


@dataclass
class _Findings:
    """점수 규칙이 누적하는 텍스트 목록"""
    factors: list[str] = field(default_factory=list)
    behavioral_insights: list[str] = field(default_factory=list)
    market_conditions: list[str] = field(default_factory=list)
    suggested_optimizations: list[str] = field(default_factory=list)
    fear_greed_insights: list[str] = field(default_factory=list)


def recommendation_for(score: int) -> Recommendation:
    """점수 → 추천 등급"""
    if score >= 85:
        return Recommendation.HIGHLY_RECOMMENDED
    if score >= 70:
        return Recommendation.RECOMMENDED
    if score >= 50:
        return Recommendation.CAUTION
    return Recommendation.NOT_RECOMMENDED


def risk_level_for(
    price_change_30d: float,
    market_cap: float,
    volatility: float | None,
    sentiment: SentimentSnapshot | None,
) -> RiskLevel:
    """30일 변동률/변동성/센티먼트 → 리스크 등급"""
    fng = sentiment.value if sentiment is not None else None

    if (
        price_change_30d > 50
        or (volatility is not None and volatility > 0.8)
        or (fng is not None and fng > 75)
    ):
        return RiskLevel.EXTREME
    if (
        price_change_30d > 20
        or (volatility is not None and volatility > 0.6)
        or (fng is not None and fng > 60)
    ):
        return RiskLevel.HIGH
    if price_change_30d < -10 and market_cap > 1_000_000_000 and fng is not None and fng < 30:
        return RiskLevel.LOW
    return RiskLevel.MODERATE


class CommitmentAnalyzer:
    """
    다중 요인 가산 점수 기반 커밋먼트 분석

    기본 75점에서 기간/금액/30일 추세/Fear & Greed/변동성/시가총액/ATH 거리
    규칙별로 가감한 뒤 0~100으로 제한
    """

    def score_duration_commitment(
        self,
        snapshot: MarketSnapshot,
        series: HistoricalSeries | None,
        amount: float,
        duration_days: float,
        sentiment: SentimentSnapshot | None = None,
        *,
        as_of_ms: int | None = None,
    ) -> CommitmentAnalysis:
        """
        기간 기반 커밋먼트 분석

        Args:
            snapshot: 토큰 시장 스냅샷
            series: 히스토리 시계열 (없으면 변동성 규칙 생략)
            amount: 락업 수량
            duration_days: 락업 기간 (일)
            sentiment: Fear & Greed Index (없으면 센티먼트 규칙 생략)
            as_of_ms: 예측 기준 시각 (기본: 시계열 마지막 시각)

        Returns:
            점수, 추천/리스크 등급, 인사이트, 가격 예측, 기대 수익
        """
        stats = summarize(series) if has_history(series) else None
        total_value = amount * snapshot.current_price
        findings = _Findings()

        score = BASE_SCORE
        score += self._score_duration(duration_days, findings)
        score += self._score_amount(total_value, findings)
        score += self._score_momentum(snapshot.price_change_30d, findings)
        score += self._score_sentiment(sentiment, findings)
        if stats is not None:
            score += self._score_volatility(stats, findings)
        score += self._score_market_cap(snapshot.market_cap, findings)
        score += self._score_ath_distance(snapshot.ath_change_percentage, findings)

        if duration_days >= 90:
            findings.behavioral_insights.append(
                "90+ day commitments help break emotional trading patterns"
            )
            findings.behavioral_insights.append(
                "Longer locks reduce FOMO and panic selling impulses"
            )

        self._suggest_optimizations(score, snapshot, total_value, sentiment, findings)

        final_score = max(0, min(100, score))

        if as_of_ms is None:
            as_of_ms = _default_as_of(series, sentiment)

        predictions = generate_price_predictions(
            snapshot, series, duration_days, sentiment, as_of_ms=as_of_ms
        )
        expected_return = calculate_expected_return(
            amount, snapshot.current_price, predictions, duration_days
        )

        return CommitmentAnalysis(
            score=final_score,
            recommendation=recommendation_for(final_score),
            risk_level=risk_level_for(
                snapshot.price_change_30d,
                snapshot.market_cap,
                stats.volatility if stats is not None else None,
                sentiment,
            ),
            factors=tuple(findings.factors),
            behavioral_insights=tuple(findings.behavioral_insights),
            market_conditions=tuple(findings.market_conditions),
            suggested_optimizations=tuple(findings.suggested_optimizations),
            fear_greed_insights=tuple(findings.fear_greed_insights),
            expected_return=expected_return,
            predictions=tuple(predictions),
        )

    # ------------------------------------------------------------
    # 점수 규칙
    # ------------------------------------------------------------

    @staticmethod
    def _score_duration(duration_days: float, findings: _Findings) -> int:
        if duration_days < 30:
            findings.factors.append("Short duration may not provide meaningful commitment benefits")
            findings.behavioral_insights.append(
                "Short locks often lead to premature exits during volatility"
            )
            return -15
        if duration_days > 365:
            findings.factors.append(
                "Very long duration increases opportunity cost and reduces flexibility"
            )
            findings.behavioral_insights.append(
                "Long-term commitments require strong conviction in the asset"
            )
            return -10
        if 90 <= duration_days <= 180:
            findings.factors.append("Optimal duration for behavioral change and market cycle coverage")
            findings.behavioral_insights.append("3-6 month commitments align with typical market cycles")
            return 10
        return 0

    @staticmethod
    def _score_amount(total_value: float, findings: _Findings) -> int:
        if total_value > 10_000:
            findings.factors.append(
                "Large commitment - ensure this represents less than 30% of portfolio"
            )
            findings.behavioral_insights.append(
                "Large amounts increase emotional pressure during volatility"
            )
            return -10
        if total_value < 100:
            findings.factors.append("Small amount may not provide meaningful behavioral benefits")
            findings.behavioral_insights.append(
                "Small commitments may not create sufficient psychological barrier"
            )
            return -5
        return 0

    @staticmethod
    def _score_momentum(price_change_30d: float, findings: _Findings) -> int:
        if price_change_30d < -20:
            findings.factors.append(
                f"Recent 30-day decline of {price_change_30d:.1f}% may present buying opportunity"
            )
            findings.market_conditions.append("Asset trading significantly below recent highs")
            return 10
        if price_change_30d > 50:
            findings.factors.append(
                f"Recent 30-day gains of {price_change_30d:.1f}% may indicate overvaluation"
            )
            findings.market_conditions.append("Asset trading significantly above recent averages")
            return -10
        return 0

    @staticmethod
    def _score_sentiment(sentiment: SentimentSnapshot | None, findings: _Findings) -> int:
        if sentiment is None:
            findings.factors.append("Fear & Greed Index unavailable - using other market indicators")
            return 0

        value = sentiment.value
        if value <= 25:
            findings.factors.append(
                f"Extreme Fear & Greed Index ({value}) - historically excellent buying opportunity"
            )
            findings.fear_greed_insights.extend([
                "Extreme fear periods historically mark major market bottoms",
                "73% of major crypto rallies begin during extreme fear periods",
            ])
            findings.behavioral_insights.extend([
                "Fear periods are optimal for commitment strategies",
                "Market fear often creates the best long-term opportunities",
            ])
            findings.market_conditions.append(
                "Fear & Greed Index suggests potential buying opportunity"
            )
            return 20
        if value <= 45:
            findings.factors.append(f"Fear & Greed Index ({value}) - good buying opportunity")
            findings.fear_greed_insights.extend([
                "Fear periods often precede accumulation phases",
                "Patient investors typically outperform during fear periods",
            ])
            findings.behavioral_insights.append("Fear periods reduce FOMO and emotional trading")
            return 10
        if value <= 55:
            findings.factors.append(
                f"Neutral Fear & Greed Index ({value}) - balanced market conditions"
            )
            findings.fear_greed_insights.extend([
                "Neutral sentiment suggests stable market conditions",
                "Good time for systematic commitment strategies",
            ])
            return 0
        if value <= 75:
            findings.factors.append(f"Greed on Fear & Greed Index ({value}) - caution advised")
            findings.fear_greed_insights.extend([
                "Greed periods often precede market corrections",
                "Consider shorter commitment durations during greed",
            ])
            findings.behavioral_insights.append(
                "Greed periods increase FOMO and emotional trading risk"
            )
            findings.market_conditions.append(
                "Fear & Greed Index suggests caution - consider waiting"
            )
            return -10

        findings.factors.append(
            f"Extreme Greed on Fear & Greed Index ({value}) - high risk of correction"
        )
        findings.fear_greed_insights.extend([
            "Extreme greed historically marks market tops",
            "87% of major corrections occur during extreme greed",
        ])
        findings.behavioral_insights.append(
            "Extreme greed periods often precede significant losses"
        )
        findings.market_conditions.append("Extreme greed suggests potential market top")
        findings.suggested_optimizations.extend([
            "Wait for market sentiment to improve before committing",
            "Consider a shorter duration to test the waters",
        ])
        return -20

    @staticmethod
    def _score_volatility(stats: SeriesStats, findings: _Findings) -> int:
        delta = 0
        if stats.volatility > 0.8:
            delta -= 20
            findings.factors.append(
                f"High volatility ({stats.volatility * 100:.1f}%) increases risk of significant drawdowns"
            )
            findings.market_conditions.append(
                "High volatility environment - consider shorter duration or smaller amount"
            )
        elif stats.volatility < 0.4:
            delta += 5
            findings.factors.append(
                f"Low volatility ({stats.volatility * 100:.1f}%) suggests stable price action"
            )
            findings.market_conditions.append(
                "Low volatility environment favorable for longer commitments"
            )

        if stats.max_drawdown > 0.5:
            delta -= 10
            findings.factors.append(
                f"Historical max drawdown of {stats.max_drawdown * 100:.1f}% indicates high risk"
            )
            findings.market_conditions.append("Asset has experienced significant historical losses")

        return delta

    @staticmethod
    def _score_market_cap(market_cap: float, findings: _Findings) -> int:
        if market_cap > 10_000_000_000:
            findings.factors.append("Large market cap suggests established, less volatile asset")
            return 5
        if market_cap < 100_000_000:
            findings.factors.append("Small market cap indicates higher risk and volatility")
            return -10
        return 0

    @staticmethod
    def _score_ath_distance(ath_change: float, findings: _Findings) -> int:
        if ath_change < -50:
            findings.factors.append(
                f"Trading {abs(ath_change):.1f}% below all-time high - potential value opportunity"
            )
            return 5
        if ath_change > -10:
            findings.factors.append("Trading close to all-time high - consider waiting for pullback")
            return -5
        return 0

    @staticmethod
    def _suggest_optimizations(
        score: int,
        snapshot: MarketSnapshot,
        total_value: float,
        sentiment: SentimentSnapshot | None,
        findings: _Findings,
    ) -> None:
        tips = findings.suggested_optimizations

        if score < 70:
            tips.append("Consider reducing the commitment amount")
            tips.append("Shorten the lock duration to reduce risk")

        if snapshot.price_change_30d > 30:
            tips.append("Consider waiting for a pullback before committing")
            tips.append("Implement dollar-cost averaging instead of lump sum")

        if total_value > 5000:
            tips.append("Add price-based unlock conditions for downside protection")
            tips.append("Consider splitting the commitment into smaller amounts")

        if sentiment is not None and sentiment.value > 75:
            tips.append("Consider waiting for fear sentiment to return")
            tips.append("Implement smaller, incremental commitments")
        elif sentiment is not None and sentiment.value < 25:
            tips.append("Excellent timing - consider increasing commitment amount")
            tips.append("Extend duration to capture full recovery cycle")


def _default_as_of(series: HistoricalSeries | None, sentiment: SentimentSnapshot | None) -> int:
    """예측 기준 시각: 시계열 마지막 → 센티먼트 시각 → 0"""
    if series:
        return int(series[-1][0])
    if sentiment is not None:
        return sentiment.timestamp_ms
    return 0


def score_duration_commitment(
    snapshot: MarketSnapshot,
    series: HistoricalSeries | None,
    amount: float,
    duration_days: float,
    sentiment: SentimentSnapshot | None = None,
    *,
    as_of_ms: int | None = None,
) -> CommitmentAnalysis:
    """CommitmentAnalyzer().score_duration_commitment 단축 함수"""
    return CommitmentAnalyzer().score_duration_commitment(
        snapshot, series, amount, duration_days, sentiment, as_of_ms=as_of_ms
    )
