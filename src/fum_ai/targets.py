"""가격 타겟 도달 분석 (단일 타겟 / 상하단 가격 밴드)"""

import math

from fum_ai.models import (
    BandReturns,
    HistoricalSeries,
    MarketSnapshot,
    PriceBandAnalysis,
    PriceTargetAnalysis,
    RiskLevel,
    SentimentSnapshot,
    TargetDirection,
    TimeToTargets,
    ValidationError,
)
from fum_ai.stats import has_history, summarize

MIN_EXPECTED_DAYS = 7
MAX_EXPECTED_DAYS = 730


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _fallback_estimate(direction: TargetDirection, price_change_30d: float) -> tuple[float, float]:
    """히스토리 없을 때 30일 변동률로 (예상 일수, 확률) 선택"""
    if direction is TargetDirection.UP:
        if price_change_30d > 20:
            return 90, 0.6
        if price_change_30d < -20:
            return 180, 0.4
        return 120, 0.5

    if price_change_30d < -20:
        return 30, 0.7
    if price_change_30d > 20:
        return 90, 0.3
    return 60, 0.5


def analyze_price_target(
    current_price: float,
    target_price: float,
    direction: TargetDirection,
    series: HistoricalSeries | None = None,
    sentiment: SentimentSnapshot | None = None,
    price_change_30d: float = 0.0,
) -> PriceTargetAnalysis:
    """
    가격 타겟 도달 예상 기간/신뢰도/확률 추정

    Args:
        current_price: 현재가
        target_price: 목표가
        direction: UP (상단 타겟) 또는 DOWN (하단 타겟)
        series: 히스토리 시계열
        sentiment: Fear & Greed Index
        price_change_30d: 30일 변동률 (%), 히스토리 없을 때 사용

    Returns:
        PriceTargetAnalysis (expected_days 7~730, confidence/probability 0.1~0.9)
    """
    price_change_percent = (target_price - current_price) / current_price * 100

    expected_days = 180.0
    confidence = 0.5
    probability = 0.5
    risk_factors: list[str] = []
    market_conditions: list[str] = []

    if has_history(series):
        stats = summarize(series)
        volatility = stats.volatility
        avg_annual_return = stats.average_annual_return

        if direction is TargetDirection.UP:
            if avg_annual_return > 0:
                expected_days = abs(price_change_percent / (avg_annual_return * 100)) * 365
            else:
                expected_days = 365
        else:
            avg_daily_move = volatility / math.sqrt(365)
            if avg_daily_move > 0:
                expected_days = abs(price_change_percent / (avg_daily_move * 100))
            else:
                # 가격 변동이 없으면 하단 타겟은 도달 불가 → 상한
                expected_days = MAX_EXPECTED_DAYS

        if volatility > 0.8:
            expected_days *= 0.7
            risk_factors.append(
                f"High volatility ({volatility * 100:.1f}%) increases price movement speed"
            )
        elif volatility < 0.4:
            expected_days *= 1.3
            market_conditions.append(
                f"Low volatility ({volatility * 100:.1f}%) suggests stable price action"
            )

        confidence = _clamp(
            0.4 + (0.2 if stats.points > 100 else 0) + (0.1 if volatility < 0.6 else -0.1),
            0.1,
            0.8,
        )

        if direction is TargetDirection.UP:
            if avg_annual_return > 0.2:
                probability = min(0.8, 0.5 + (avg_annual_return - 0.2) * 2)
            elif avg_annual_return < -0.2:
                probability = max(0.2, 0.5 + (avg_annual_return + 0.2) * 2)
        else:
            max_drawdown = stats.max_drawdown
            if max_drawdown > 0.5:
                probability = min(0.8, 0.5 + (max_drawdown - 0.5) * 2)
            else:
                probability = max(0.2, 0.5 - (0.5 - max_drawdown) * 2)
    else:
        expected_days, probability = _fallback_estimate(direction, price_change_30d)
        confidence = 0.3
        risk_factors.append("Limited historical data available for analysis")

    if sentiment is not None:
        if direction is TargetDirection.UP:
            if sentiment.value <= 25:
                expected_days *= 0.8
                probability = min(0.9, probability + 0.2)
                market_conditions.append("Extreme fear sentiment favors upward price movement")
            elif sentiment.value >= 75:
                expected_days *= 1.5
                probability = max(0.1, probability - 0.2)
                risk_factors.append("Extreme greed sentiment may limit upside potential")
        else:
            if sentiment.value >= 75:
                expected_days *= 0.7
                probability = min(0.9, probability + 0.2)
                risk_factors.append("Extreme greed sentiment increases downside risk")
            elif sentiment.value <= 25:
                expected_days *= 1.3
                probability = max(0.1, probability - 0.2)
                market_conditions.append("Extreme fear sentiment may limit further downside")

    expected_days = _clamp(expected_days, MIN_EXPECTED_DAYS, MAX_EXPECTED_DAYS)

    return PriceTargetAnalysis(
        target_price=target_price,
        direction=direction,
        expected_days=_round_half_up(expected_days),
        confidence=_clamp(confidence, 0.1, 0.9),
        probability=_clamp(probability, 0.1, 0.9),
        risk_factors=tuple(risk_factors),
        market_conditions=tuple(market_conditions),
    )


# ============================================================
# 가격 밴드 (상단/하단 동시 타겟)
# ============================================================


def validate_price_band(current_price: float, up_target: float, down_target: float) -> None:
    """up_target > current_price > down_target 검증"""
    if current_price <= 0:
        raise ValidationError("Current price is unavailable for this token")
    if up_target <= current_price:
        raise ValidationError(
            f"Up target ({up_target:g}) must be higher than current price ({current_price:g})"
        )
    if down_target >= current_price:
        raise ValidationError(
            f"Down target ({down_target:g}) must be lower than current price ({current_price:g})"
        )


def _overall_risk(
    up: PriceTargetAnalysis,
    down: PriceTargetAnalysis,
    volatility: float | None,
    sentiment: SentimentSnapshot | None,
) -> RiskLevel:
    """리스크 포인트 합산으로 종합 리스크 결정"""
    up_risk = 2 if up.expected_days > 365 else 1 if up.expected_days > 180 else 0
    down_risk = 2 if down.expected_days < 30 else 1 if down.expected_days < 90 else 0

    volatility_risk = 0
    if volatility is not None:
        volatility_risk = 2 if volatility > 0.8 else 1 if volatility > 0.6 else 0

    sentiment_risk = 0
    if sentiment is not None:
        sentiment_risk = 2 if sentiment.value > 75 else 1 if sentiment.value > 60 else 0

    total = up_risk + down_risk + volatility_risk + sentiment_risk
    if total >= 6:
        return RiskLevel.EXTREME
    if total >= 4:
        return RiskLevel.HIGH
    if total <= 1:
        return RiskLevel.LOW
    return RiskLevel.MODERATE


def analyze_price_band_commitment(
    snapshot: MarketSnapshot,
    series: HistoricalSeries | None,
    amount: float,
    up_target: float,
    down_target: float,
    sentiment: SentimentSnapshot | None = None,
    *,
    token_symbol: str = "",
) -> PriceBandAnalysis:
    """
    "가격이 X 또는 Y에 도달할 때까지 락업" 요청 분석

    Raises:
        ValidationError: 가격 밴드가 현재가를 감싸지 않는 경우
    """
    current_price = snapshot.current_price
    validate_price_band(current_price, up_target, down_target)

    up = analyze_price_target(
        current_price, up_target, TargetDirection.UP,
        series, sentiment, snapshot.price_change_30d,
    )
    down = analyze_price_target(
        current_price, down_target, TargetDirection.DOWN,
        series, sentiment, snapshot.price_change_30d,
    )

    up_return = (up_target - current_price) / current_price * 100
    down_return = (down_target - current_price) / current_price * 100
    weighted_average = (up_return * up.probability + down_return * down.probability) / 100

    volatility = summarize(series).volatility if has_history(series) else None
    overall_risk = _overall_risk(up, down, volatility, sentiment)

    insights: list[str] = []
    recommendations: list[str] = []

    if up.probability > 0.7:
        insights.append(
            f"High probability ({up.probability * 100:.1f}%) of reaching up target "
            f"in {up.expected_days} days"
        )
    elif up.probability < 0.3:
        insights.append(
            f"Low probability ({up.probability * 100:.1f}%) of reaching up target "
            "- consider adjusting target"
        )
        recommendations.append("Consider lowering the up target for higher probability of success")

    if down.probability > 0.7:
        insights.append(
            f"High probability ({down.probability * 100:.1f}%) of reaching down target "
            f"in {down.expected_days} days"
        )
    elif down.probability < 0.3:
        insights.append(
            f"Low probability ({down.probability * 100:.1f}%) of reaching down target "
            "- good downside protection"
        )

    if up.expected_days > 365:
        insights.append("Up target may take over a year to reach - consider shorter-term strategy")
        recommendations.append("Consider a shorter-term commitment or lower up target")

    if down.expected_days < 30:
        insights.append("Down target could be reached quickly - high risk of early exit")
        recommendations.append("Consider setting a lower down target for better protection")

    if sentiment is not None:
        if sentiment.value <= 25:
            insights.append("Extreme fear sentiment - excellent timing for price-based commitments")
            recommendations.append("Consider increasing the amount due to favorable market conditions")
        elif sentiment.value >= 75:
            insights.append("Extreme greed sentiment - high risk of market correction")
            recommendations.append("Consider waiting for better market conditions or reducing amount")

    if abs(up_return) > 100:
        insights.append("Large potential gains but also high volatility risk")
        recommendations.append("Consider implementing stop-loss mechanisms")

    if abs(down_return) > 50:
        insights.append("Significant downside risk - ensure this represents acceptable loss")
        recommendations.append("Consider reducing the commitment amount")

    return PriceBandAnalysis(
        amount=amount,
        token_symbol=token_symbol or snapshot.symbol,
        current_price=current_price,
        up_target=up_target,
        down_target=down_target,
        up_analysis=up,
        down_analysis=down,
        overall_risk=overall_risk,
        expected_return=BandReturns(
            up_scenario=up_return,
            down_scenario=down_return,
            weighted_average=weighted_average,
            best_case=max(up_return, down_return),
            worst_case=min(up_return, down_return),
        ),
        insights=tuple(insights),
        recommendations=tuple(recommendations),
        time_to_targets=TimeToTargets(
            up_target=up.expected_days,
            down_target=down.expected_days,
            average_time=(up.expected_days + down.expected_days) / 2,
        ),
    )
