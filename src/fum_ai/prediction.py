"""휴리스틱 가격 예측 및 기대 수익 계산"""

from fum_ai.models import (
    MS_PER_DAY,
    ExpectedReturn,
    HistoricalSeries,
    MarketSnapshot,
    PricePrediction,
    SentimentSnapshot,
)
from fum_ai.stats import has_history, summarize

# 예측 체크포인트 (일, 라벨)
HORIZON_LADDER = [
    (7, "1 week"),
    (30, "1 month"),
    (90, "3 months"),
    (180, "6 months"),
    (365, "1 year"),
]

FALLBACK_ANNUAL_GROWTH = 0.15
FALLBACK_CONFIDENCE = 0.25
MAX_LOSS_PERCENTAGE = 0.4
MAX_GAIN_MULTIPLIER = 2.0
LIMITED_DATA_FACTOR = "Limited historical data available for prediction"


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def prediction_horizons(duration_days: float) -> list[tuple[float, str]]:
    """커밋먼트 기간에 해당하는 예측 호라이즌 목록"""
    horizons = [(days, label) for days, label in HORIZON_LADDER if days <= duration_days]

    if duration_days > 365:
        horizons.append((duration_days, f"{round(duration_days / 30)} months"))
    elif not horizons:
        # 1주 미만 락업은 만기 시점 하나만 예측
        horizons.append((duration_days, f"{duration_days:g} days"))

    return horizons


def _sentiment_multiplier(sentiment: SentimentSnapshot | None) -> tuple[float, str | None]:
    """Fear & Greed 구간별 기대 수익 가중치"""
    if sentiment is None:
        return 1.0, None
    if sentiment.value <= 25:
        return 1.2, "Extreme fear sentiment suggests strong recovery potential"
    if sentiment.value <= 45:
        return 1.1, "Fear sentiment indicates potential recovery"
    if sentiment.value >= 75:
        return 0.6, "Extreme greed suggests potential market correction"
    if sentiment.value >= 60:
        return 0.8, "Greed sentiment suggests potential pullback"
    return 1.0, None


def _fallback_multiplier(snapshot: MarketSnapshot) -> tuple[float, list[str]]:
    """히스토리 없을 때 30일 추세/시가총액 기반 가중치"""
    factors = []
    multiplier = 1.0

    if snapshot.price_change_30d > 20:
        multiplier = 0.7
        factors.append("Recent strong gains suggest potential pullback")
    elif snapshot.price_change_30d < -20:
        multiplier = 1.1
        factors.append("Recent losses suggest potential recovery")

    if snapshot.market_cap > 10_000_000_000:
        multiplier *= 0.9
        factors.append("Large market cap suggests slower growth")
    elif snapshot.market_cap < 100_000_000:
        multiplier *= 1.2
        factors.append("Small market cap suggests higher growth potential")

    return multiplier, factors


def generate_price_predictions(
    snapshot: MarketSnapshot,
    series: HistoricalSeries | None,
    duration_days: float,
    sentiment: SentimentSnapshot | None = None,
    current_price: float | None = None,
    as_of_ms: int = 0,
) -> list[PricePrediction]:
    """
    호라이즌별 가격 예측 생성

    Args:
        snapshot: 토큰 시장 스냅샷
        series: 히스토리 시계열 (없으면 추세 기반 fallback)
        duration_days: 커밋먼트 기간 (일)
        sentiment: Fear & Greed Index
        current_price: 기준 가격 (기본: snapshot.current_price)
        as_of_ms: 기준 시각 (target_timestamp_ms 계산용)

    Returns:
        호라이즌 오름차순 PricePrediction 목록
    """
    price = snapshot.current_price if current_price is None else current_price
    predictions = []

    history = has_history(series)
    stats = summarize(series) if history else None

    for horizon, label in prediction_horizons(duration_days):
        factors: list[str] = []

        if stats is not None:
            expected_return = stats.average_annual_return * (horizon / 365)

            sentiment_multiplier, sentiment_factor = _sentiment_multiplier(sentiment)
            if sentiment_factor:
                factors.append(sentiment_factor)

            predicted_price = price * (1 + expected_return * sentiment_multiplier)
            confidence = _clamp(
                0.4
                + (0.2 if horizon < 30 else 0)
                + (0.1 if stats.volatility < 0.5 else -0.1)
                + (0.1 if stats.points > 100 else -0.1)
                + (0.1 if sentiment is not None else 0),
                0.1,
                0.8,
            )

            factors.append(f"Historical volatility: {stats.volatility * 100:.1f}%")
            factors.append(f"Average annual return: {stats.average_annual_return * 100:.1f}%")
            factors.append(f"Expected return for {label}: {expected_return * 100:.1f}%")
        else:
            multiplier, trend_factors = _fallback_multiplier(snapshot)
            factors.extend(trend_factors)

            predicted_price = price * (1 + (horizon / 365) * FALLBACK_ANNUAL_GROWTH * multiplier)
            confidence = FALLBACK_CONFIDENCE
            factors.append(LIMITED_DATA_FACTOR)

        price_change = predicted_price - price
        predictions.append(
            PricePrediction(
                horizon_days=horizon,
                target_timestamp_ms=int(as_of_ms + horizon * MS_PER_DAY),
                predicted_price=predicted_price,
                confidence=confidence,
                price_change=price_change,
                price_change_percent=(price_change / price * 100) if price else 0.0,
                factors=tuple(factors),
                label=label,
            )
        )

    return predictions


def duration_unit_for(duration_days: float) -> str:
    """기간 단위 라벨"""
    if duration_days >= 365:
        return "years"
    if duration_days >= 30:
        return "months"
    return "days"


def calculate_expected_return(
    amount: float,
    current_price: float,
    predictions: list[PricePrediction],
    duration_days: float,
) -> ExpectedReturn:
    """
    만기 시점 예측으로 기대 수익 계산

    best case는 initial + expected_return * 2, worst case는 initial * 0.6으로 제한
    (장기/저신뢰 예측이 비현실적인 범위를 만들지 않도록)
    """
    if not predictions:
        raise ValueError("predictions가 비어 있습니다.")

    end = next(
        (p for p in predictions if abs(p.horizon_days - duration_days) < 7),
        predictions[-1],
    )

    initial_investment = amount * current_price
    predicted_value = amount * end.predicted_price
    expected_return = predicted_value - initial_investment

    confidence_range = (1 - end.confidence) * 1.5
    best_case = predicted_value * (1 + confidence_range)
    worst_case = predicted_value * (1 - confidence_range)

    worst_case = max(worst_case, initial_investment * (1 - MAX_LOSS_PERCENTAGE))
    best_case = min(best_case, initial_investment + expected_return * MAX_GAIN_MULTIPLIER)

    return ExpectedReturn(
        horizon_days=duration_days,
        duration_unit=duration_unit_for(duration_days),
        initial_investment=initial_investment,
        predicted_value=predicted_value,
        expected_return=expected_return,
        expected_return_percent=(
            expected_return / initial_investment * 100 if initial_investment else 0.0
        ),
        best_case=best_case,
        worst_case=worst_case,
        confidence=end.confidence,
    )
