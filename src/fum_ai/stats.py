"""가격 시계열 통계 (변동성, 최대 낙폭, 연평균 수익률)"""

from dataclasses import dataclass

import numpy as np

from fum_ai.models import MS_PER_DAY, HistoricalSeries

DEFAULT_ANNUAL_RETURN = 0.1
MIN_ANNUAL_RETURN = -0.5
MAX_ANNUAL_RETURN = 2.0


def _valid_points(series: HistoricalSeries | None) -> HistoricalSeries:
    """가격이 0 이하인 포인트 제외"""
    if not series:
        return []
    return [point for point in series if point[1] > 0]


def has_history(series: HistoricalSeries | None) -> bool:
    """통계 계산이 가능한 시계열인지 (유효 가격 2개 이상)"""
    return len(_valid_points(series)) > 1


def _prices(series: HistoricalSeries) -> np.ndarray:
    return np.array([point[1] for point in series], dtype=float)


def calculate_volatility(series: HistoricalSeries | None) -> float:
    """
    연율화 변동성

    단순 수익률의 모집단 표준편차 * sqrt(365).
    스무딩/이상치 제거 없음 (단일 급등락에 민감하며 하위 임계값이 이에 맞춰져 있음)
    """
    if not has_history(series):
        return 0.0

    prices = _prices(_valid_points(series))
    returns = np.diff(prices) / prices[:-1]
    return float(np.std(returns) * np.sqrt(365))


def calculate_max_drawdown(series: HistoricalSeries | None) -> float:
    """최대 낙폭 (고점 대비 하락 비율, 0~1)"""
    if not has_history(series):
        return 0.0

    prices = _prices(_valid_points(series))
    peaks = np.maximum.accumulate(prices)
    drawdowns = (peaks - prices) / peaks
    return float(max(drawdowns.max(), 0.0))


def calculate_average_annual_return(series: HistoricalSeries | None) -> float:
    """
    연평균 수익률 (시작~끝 단순 수익률을 연율화)

    데이터 부족 또는 경과 시간 0 이하이면 기본값 0.1.
    가격이 0 이하인 포인트는 무시
    결과는 [-0.5, 2.0] 범위로 제한
    """
    if not has_history(series):
        return DEFAULT_ANNUAL_RETURN

    points = _valid_points(series)
    first_ts, first_price = points[0]
    last_ts, last_price = points[-1]
    days_elapsed = (last_ts - first_ts) / MS_PER_DAY

    if days_elapsed <= 0:
        return DEFAULT_ANNUAL_RETURN

    total_return = (last_price - first_price) / first_price
    annual_return = total_return * (365 / days_elapsed)
    return float(max(MIN_ANNUAL_RETURN, min(MAX_ANNUAL_RETURN, annual_return)))


@dataclass(frozen=True)
class SeriesStats:
    """시계열 요약 통계"""
    volatility: float
    max_drawdown: float
    average_annual_return: float
    points: int


def summarize(series: HistoricalSeries | None) -> SeriesStats:
    """변동성/낙폭/연수익률 일괄 계산"""
    return SeriesStats(
        volatility=calculate_volatility(series),
        max_drawdown=calculate_max_drawdown(series),
        average_annual_return=calculate_average_annual_return(series),
        points=len(_valid_points(series)),
    )
