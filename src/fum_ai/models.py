"""커밋먼트 분석 데이터 클래스 및 예외"""

from dataclasses import asdict, dataclass, field
from enum import Enum


# 히스토리 시계열: [(timestamp_ms, price_usd), ...] (시간 오름차순)
HistoricalSeries = list[tuple[int, float]]

MS_PER_DAY = 1000 * 60 * 60 * 24


class Recommendation(Enum):
    """추천 등급"""
    HIGHLY_RECOMMENDED = "HIGHLY_RECOMMENDED"
    RECOMMENDED = "RECOMMENDED"
    NEUTRAL = "NEUTRAL"
    CAUTION = "CAUTION"
    NOT_RECOMMENDED = "NOT_RECOMMENDED"


class RiskLevel(Enum):
    """리스크 등급"""
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    EXTREME = "EXTREME"


class TargetDirection(Enum):
    """가격 타겟 방향"""
    UP = "UP"
    DOWN = "DOWN"


class ValidationError(ValueError):
    """잘못된 커밋먼트 요청 (예: 가격 밴드 순서 위반)"""


class TokenNotFoundError(LookupError):
    """심볼을 코인 ID로 변환할 수 없음"""

    def __init__(self, symbol: str, suggestions: list[tuple[str, str]] | None = None):
        super().__init__(f"Token not found: {symbol}")
        self.symbol = symbol
        self.suggestions = suggestions or []


def _to_primitive(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _to_primitive(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_primitive(v) for v in value]
    return value


class _Serializable:
    def to_dict(self) -> dict:
        """JSON 직렬화 가능한 dict로 변환"""
        return _to_primitive(asdict(self))


# ============================================================
# 요청
# ============================================================


@dataclass(frozen=True)
class DurationCommitment(_Serializable):
    """기간 기반 락업 요청"""
    amount: float
    token_symbol: str
    duration_days: float
    duration_value: float | None = None
    duration_unit: str = "days"


@dataclass(frozen=True)
class PriceBandCommitment(_Serializable):
    """가격 밴드 기반 락업 요청 (상단/하단 타겟 도달 시 해제)"""
    amount: float
    token_symbol: str
    up_target: float
    down_target: float


CommitmentRequest = DurationCommitment | PriceBandCommitment


# ============================================================
# 시장 데이터
# ============================================================


def _usd(value) -> float:
    """CoinGecko의 {"usd": x} 또는 스칼라 값을 float로"""
    if isinstance(value, dict):
        value = value.get("usd")
    return float(value or 0)


@dataclass(frozen=True)
class MarketSnapshot(_Serializable):
    """토큰 시장 스냅샷 (누락 필드는 0)"""
    current_price: float = 0.0
    price_change_24h: float = 0.0
    price_change_7d: float = 0.0
    price_change_30d: float = 0.0
    market_cap: float = 0.0
    volume_24h: float = 0.0
    ath_change_percentage: float = 0.0
    symbol: str = ""
    name: str = ""

    @classmethod
    def from_coingecko(cls, payload: dict) -> "MarketSnapshot":
        """
        CoinGecko 응답을 스냅샷으로 변환

        /coins/{id} 응답(market_data 중첩)과 /coins/markets 응답(평면)을 모두 지원
        """
        market = payload.get("market_data") or payload
        return cls(
            current_price=_usd(market.get("current_price")),
            price_change_24h=_usd(market.get("price_change_percentage_24h")),
            price_change_7d=_usd(market.get("price_change_percentage_7d")),
            price_change_30d=_usd(market.get("price_change_percentage_30d")),
            market_cap=_usd(market.get("market_cap")),
            volume_24h=_usd(market.get("total_volume") or market.get("volume_24h")),
            ath_change_percentage=_usd(market.get("ath_change_percentage")),
            symbol=(payload.get("symbol") or "").upper(),
            name=payload.get("name") or "",
        )


@dataclass(frozen=True)
class SentimentSnapshot(_Serializable):
    """Fear & Greed Index"""
    value: int
    classification: str
    timestamp_ms: int = 0


@dataclass(frozen=True)
class MarketOverview(_Serializable):
    """전체 시장 현황"""
    btc: float
    eth: float
    sol: float
    btc_change_24h: float
    eth_change_24h: float
    sol_change_24h: float
    sentiment: str
    volatility: str
    fear_greed_index: int
    market_cap_change_24h: float
    is_fallback: bool = False


# ============================================================
# 분석 결과
# ============================================================


@dataclass(frozen=True)
class PricePrediction(_Serializable):
    """단일 호라이즌 가격 예측"""
    horizon_days: float
    target_timestamp_ms: int
    predicted_price: float
    confidence: float
    price_change: float
    price_change_percent: float
    factors: tuple[str, ...] = ()
    label: str = ""


@dataclass(frozen=True)
class ExpectedReturn(_Serializable):
    """기대 수익 (best/worst 케이스 포함)"""
    horizon_days: float
    duration_unit: str
    initial_investment: float
    predicted_value: float
    expected_return: float
    expected_return_percent: float
    best_case: float
    worst_case: float
    confidence: float


@dataclass(frozen=True)
class ScoreResult(_Serializable):
    """커밋먼트 점수"""
    score: int
    recommendation: Recommendation
    risk_level: RiskLevel
    factors: tuple[str, ...] = ()
    behavioral_insights: tuple[str, ...] = ()
    market_conditions: tuple[str, ...] = ()
    suggested_optimizations: tuple[str, ...] = ()
    fear_greed_insights: tuple[str, ...] = ()


@dataclass(frozen=True)
class CommitmentAnalysis(ScoreResult):
    """기간 기반 커밋먼트 분석 결과 (점수 + 예측 + 기대 수익)"""
    expected_return: ExpectedReturn | None = None
    predictions: tuple[PricePrediction, ...] = ()


@dataclass(frozen=True)
class PriceTargetAnalysis(_Serializable):
    """단일 가격 타겟 도달 분석"""
    target_price: float
    direction: TargetDirection
    expected_days: int
    confidence: float
    probability: float
    risk_factors: tuple[str, ...] = ()
    market_conditions: tuple[str, ...] = ()


@dataclass(frozen=True)
class BandReturns(_Serializable):
    """가격 밴드 시나리오별 수익률 (%)"""
    up_scenario: float
    down_scenario: float
    weighted_average: float
    best_case: float
    worst_case: float


@dataclass(frozen=True)
class TimeToTargets(_Serializable):
    """타겟 도달 예상 기간 (일)"""
    up_target: int
    down_target: int
    average_time: float


@dataclass(frozen=True)
class PriceBandAnalysis(_Serializable):
    """가격 밴드 커밋먼트 분석 결과"""
    amount: float
    token_symbol: str
    current_price: float
    up_target: float
    down_target: float
    up_analysis: PriceTargetAnalysis
    down_analysis: PriceTargetAnalysis
    overall_risk: RiskLevel
    expected_return: BandReturns
    insights: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    time_to_targets: TimeToTargets = field(default_factory=lambda: TimeToTargets(0, 0, 0.0))


# ============================================================
# 지갑 분석
# ============================================================


class WalletRiskProfile(Enum):
    """지갑 리스크 프로필"""
    LOW_RISK = "LOW_RISK"
    MODERATE_RISK = "MODERATE_RISK"
    HIGH_RISK = "HIGH_RISK"
    EXTREME_RISK = "EXTREME_RISK"


class RiskTolerance(Enum):
    """거래 성향 기반 리스크 허용도"""
    CONSERVATIVE = "CONSERVATIVE"
    MODERATE = "MODERATE"
    AGGRESSIVE = "AGGRESSIVE"
    EXTREME = "EXTREME"


class MarketSentiment(Enum):
    """시장 심리 방향"""
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"


class TrendDirection(Enum):
    """시장 추세 방향"""
    UPWARD = "UPWARD"
    DOWNWARD = "DOWNWARD"
    SIDEWAYS = "SIDEWAYS"


def _pick(data: dict, *keys, default=None):
    """snake_case / camelCase 키 중 먼저 있는 값"""
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class WalletTransaction(_Serializable):
    """지갑 트랜잭션 (네이티브 코인 또는 토큰 전송)"""
    hash: str
    timestamp_ms: int
    from_address: str
    to_address: str
    value: str = "0"
    chain: str = "ETH"
    token_address: str | None = None
    token_symbol: str | None = None
    token_decimals: int | None = None
    is_error: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "WalletTransaction":
        """인덱서 레코드 → WalletTransaction (timestamp 는 ms)"""
        decimals = _pick(data, "token_decimals", "tokenDecimals")
        return cls(
            hash=data.get("hash", ""),
            timestamp_ms=int(_pick(data, "timestamp_ms", "timestamp", default=0)),
            from_address=_pick(data, "from_address", "from", default=""),
            to_address=_pick(data, "to_address", "to", default=""),
            value=str(_pick(data, "value", default="0")),
            chain=str(_pick(data, "chain", default="ETH")).upper(),
            token_address=_pick(data, "token_address", "tokenAddress"),
            token_symbol=_pick(data, "token_symbol", "tokenSymbol"),
            token_decimals=int(decimals) if decimals is not None else None,
            is_error=bool(_pick(data, "is_error", "isError", default=False)),
        )


@dataclass(frozen=True)
class TokenBalance(_Serializable):
    """지갑 토큰 잔고"""
    token_address: str
    token_symbol: str = ""
    chain: str = "ETH"
    token_name: str = ""
    token_decimals: int = 18
    balance: str = "0"
    value_usd: float | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "TokenBalance":
        """인덱서 레코드 → TokenBalance"""
        return cls(
            token_address=_pick(data, "token_address", "tokenAddress", default=""),
            token_symbol=_pick(data, "token_symbol", "tokenSymbol", default=""),
            chain=str(_pick(data, "chain", default="ETH")).upper(),
            token_name=_pick(data, "token_name", "tokenName", default=""),
            token_decimals=int(_pick(data, "token_decimals", "tokenDecimals", default=18)),
            balance=str(_pick(data, "balance", default="0")),
            value_usd=_pick(data, "value_usd", "value"),
        )


@dataclass(frozen=True)
class TradingMetrics(_Serializable):
    """거래 이력 행동 지표"""
    total_trades: int
    average_hold_time: float
    trade_frequency: float
    volatility_tolerance: float
    diversification_score: float
    emotional_trading_indicators: tuple[str, ...]
    profit_loss_ratio: float
    max_drawdown: float
    sharpe_ratio: float
    win_rate: float
    average_trade_size: float
    largest_trade: float
    smallest_trade: float
    eth_activity: float
    avax_activity: float


@dataclass(frozen=True)
class WalletMarketAnalysis(_Serializable):
    """지갑 분석용 시장 판단"""
    sentiment: MarketSentiment
    trend_direction: TrendDirection
    recommendation: str


@dataclass(frozen=True)
class WalletAnalysis(_Serializable):
    """지갑 거래 이력 리스크 분석 결과"""
    wallet_address: str | None
    risk_score: float
    confidence_percentage: float
    risk_profile: WalletRiskProfile
    risk_tolerance: RiskTolerance
    market_analysis: WalletMarketAnalysis
    metrics: TradingMetrics
    recommendations: tuple[str, ...] = ()
