"""메시지 → 커밋먼트 분석 → 응답 오케스트레이션"""

from dataclasses import dataclass, field

from fum_ai.analyzer import CommitmentAnalyzer
from fum_ai.data_sources import LedgerDataSource, MarketDataSource
from fum_ai.formatter import (
    format_commitment_response,
    format_general_analysis,
    format_price_band_response,
    format_token_not_found,
    format_wallet_analysis,
)
from fum_ai.insight import FALLBACK_OVERVIEW
from fum_ai.log import get_logger
from fum_ai.models import (
    CommitmentAnalysis,
    DurationCommitment,
    MarketOverview,
    MarketSnapshot,
    PriceBandAnalysis,
    PriceBandCommitment,
    SentimentSnapshot,
    TokenNotFoundError,
    ValidationError,
    WalletAnalysis,
)
from fum_ai.parser import extract_wallet_address, is_wallet_request, parse_commitment_request
from fum_ai.targets import analyze_price_band_commitment
from fum_ai.wallet import WalletAnalyzer

ACTION_NAME = "FUM_ANALYZE_COMMITMENT"
WALLET_ACTION_NAME = "FUM_ANALYZE_WALLET"
ERROR_TEXT = "I encountered an error while analyzing your request. Please try again."
WALLET_ERROR_TEXT = (
    "I encountered an error while analyzing your wallet. Please try again or provide "
    "more specific information about your trading history."
)
WALLET_UNAVAILABLE_TEXT = (
    "Wallet analysis is not available right now because no transaction data source "
    "is configured."
)

logger = get_logger("advisor")


@dataclass
class AdvisorResponse:
    """채팅 응답 (텍스트 + 메타데이터)"""
    text: str
    success: bool = True
    action: str = ACTION_NAME
    thought: str = ""
    metadata: dict = field(default_factory=dict)


class CommitmentAdvisor:
    """
    커밋먼트 분석 어드바이저

    사용 예:
        advisor = CommitmentAdvisor(CoinGeckoMarketSource())
        response = advisor.handle_message("I want to lock 10 ETH for 3 months")
        print(response.text)
    """

    def __init__(
        self,
        source: MarketDataSource,
        analyzer: CommitmentAnalyzer | None = None,
        history_days: int = 365,
        ledger: LedgerDataSource | None = None,
    ):
        self.source = source
        self.analyzer = analyzer or CommitmentAnalyzer()
        self.history_days = history_days
        self.wallet_analyzer = WalletAnalyzer(ledger) if ledger is not None else None

    # ------------------------------------------------------------
    # 데이터 수집
    # ------------------------------------------------------------

    def _snapshot(self, symbol: str) -> MarketSnapshot:
        snapshot = self.source.get_snapshot(symbol)
        if snapshot is None:
            suggest = getattr(self.source, "suggest_tokens", None)
            raise TokenNotFoundError(symbol, suggest(symbol) if suggest else [])
        return snapshot

    def _sentiment(self) -> SentimentSnapshot | None:
        sentiment = self.source.get_sentiment()
        if sentiment is None:
            logger.info("Fear & Greed Index 없음 - 센티먼트 규칙 생략")
        return sentiment

    # ------------------------------------------------------------
    # 분석
    # ------------------------------------------------------------

    def analyze_duration(
        self,
        request: DurationCommitment,
        sentiment: SentimentSnapshot | None = None,
    ) -> tuple[CommitmentAnalysis, MarketSnapshot]:
        """기간 기반 커밋먼트 분석"""
        snapshot = self._snapshot(request.token_symbol)
        days = int(max(self.history_days, request.duration_days))
        series = self.source.get_historical_series(request.token_symbol, days)
        if not series:
            logger.info("%s 히스토리 없음 - 저신뢰 예측 사용", request.token_symbol)

        analysis = self.analyzer.score_duration_commitment(
            snapshot, series, request.amount, request.duration_days, sentiment
        )
        return analysis, snapshot

    def analyze_price_band(
        self,
        request: PriceBandCommitment,
        sentiment: SentimentSnapshot | None = None,
    ) -> PriceBandAnalysis:
        """가격 밴드 커밋먼트 분석 (밴드 위반 시 ValidationError)"""
        snapshot = self._snapshot(request.token_symbol)
        series = self.source.get_historical_series(request.token_symbol, self.history_days)

        return analyze_price_band_commitment(
            snapshot,
            series,
            request.amount,
            request.up_target,
            request.down_target,
            sentiment,
            token_symbol=request.token_symbol,
        )

    def analyze_wallet(self, wallet_address: str | None) -> tuple[WalletAnalysis, MarketOverview]:
        """지갑 거래 이력 분석 (ledger 미설정 시 RuntimeError)"""
        if self.wallet_analyzer is None:
            raise RuntimeError("No LedgerDataSource configured")
        overview = self.market_overview()
        market = None if overview.is_fallback else overview
        return self.wallet_analyzer.analyze(wallet_address, market), overview

    def market_overview(self) -> MarketOverview:
        """시장 현황 (조회 실패 시 fallback)"""
        get_overview = getattr(self.source, "get_market_overview", None)
        if get_overview is None:
            return FALLBACK_OVERVIEW
        try:
            return get_overview()
        except Exception as e:
            logger.warning("시장 현황 조회 실패, fallback 사용: %s", e)
            return FALLBACK_OVERVIEW

    # ------------------------------------------------------------
    # 메시지 처리
    # ------------------------------------------------------------

    def handle_message(self, text: str) -> AdvisorResponse:
        """사용자 메시지 처리"""
        request = parse_commitment_request(text)
        if request is None and is_wallet_request(text):
            return self.handle_wallet_message(text)

        try:
            if request is None:
                overview = self.market_overview()
                return AdvisorResponse(
                    text=format_general_analysis(overview),
                    thought=f'Provided general market analysis for user query: "{text}"',
                    metadata={
                        "analysisType": "general",
                        "fearGreedIndex": overview.fear_greed_index,
                        "marketData": overview.to_dict(),
                    },
                )

            sentiment = self._sentiment()

            if isinstance(request, PriceBandCommitment):
                return self._respond_price_band(request, sentiment)
            return self._respond_duration(request, sentiment)

        except TokenNotFoundError as e:
            common = getattr(self.source, "resolver", None)
            common_symbols = common.common_symbols() if common is not None else []
            return AdvisorResponse(
                text=format_token_not_found(e.symbol, e.suggestions, common_symbols),
                success=False,
                thought=f"Token {e.symbol} not found in CoinGecko database",
            )
        except ValidationError as e:
            return AdvisorResponse(
                text=f"{e}. Please adjust your price targets so that the up target is above "
                     "and the down target is below the current price.",
                success=False,
                thought=f"Invalid price band: {e}",
            )
        except Exception as e:
            logger.exception("커밋먼트 분석 오류")
            return AdvisorResponse(text=ERROR_TEXT, success=False, thought=f"Error: {e}")

    def _respond_duration(
        self,
        request: DurationCommitment,
        sentiment: SentimentSnapshot | None,
    ) -> AdvisorResponse:
        analysis, snapshot = self.analyze_duration(request, sentiment)
        return AdvisorResponse(
            text=format_commitment_response(analysis, request, snapshot, sentiment),
            thought=(
                f"Analyzed commitment: {request.amount:g} {request.token_symbol} for "
                f"{request.duration_days:g} days with market data and Fear & Greed Index"
            ),
            metadata={
                "amount": request.amount,
                "token": request.token_symbol,
                "durationInDays": request.duration_days,
                "unit": request.duration_unit,
                "score": analysis.score,
                "recommendation": analysis.recommendation.value,
                "riskLevel": analysis.risk_level.value,
                "fearGreedIndex": sentiment.value if sentiment else None,
                "fearGreedData": sentiment.to_dict() if sentiment else None,
                "analysis": analysis.to_dict(),
            },
        )

    def _respond_price_band(
        self,
        request: PriceBandCommitment,
        sentiment: SentimentSnapshot | None,
    ) -> AdvisorResponse:
        analysis = self.analyze_price_band(request, sentiment)
        return AdvisorResponse(
            text=format_price_band_response(analysis, sentiment),
            thought=(
                f"Analyzed price-based commitment: {request.amount:g} {request.token_symbol} "
                f"until price reaches ${request.up_target:g} or ${request.down_target:g}"
            ),
            metadata={
                "amount": request.amount,
                "token": request.token_symbol,
                "upTarget": request.up_target,
                "downTarget": request.down_target,
                "fearGreedIndex": sentiment.value if sentiment else None,
                "fearGreedData": sentiment.to_dict() if sentiment else None,
                "analysis": analysis.to_dict(),
            },
        )

    def handle_wallet_message(self, text: str, wallet_address: str | None = None) -> AdvisorResponse:
        """지갑 분석 요청 처리 (주소 미지정 시 메시지에서 추출)"""
        wallet_address = wallet_address or extract_wallet_address(text)
        if self.wallet_analyzer is None:
            return AdvisorResponse(
                text=WALLET_UNAVAILABLE_TEXT,
                success=False,
                action=WALLET_ACTION_NAME,
                thought="Wallet analysis requested without a ledger data source",
            )

        try:
            analysis, overview = self.analyze_wallet(wallet_address)
        except Exception as e:
            logger.exception("지갑 분석 오류")
            return AdvisorResponse(
                text=WALLET_ERROR_TEXT,
                success=False,
                action=WALLET_ACTION_NAME,
                thought=f"Wallet analysis failed: {e}",
            )

        return AdvisorResponse(
            text=format_wallet_analysis(analysis, overview),
            action=WALLET_ACTION_NAME,
            thought=(
                f"Analyzed wallet trading history for {wallet_address or 'user'} "
                "with comprehensive risk assessment and market analysis"
            ),
            metadata={
                "walletAddress": wallet_address,
                "analysis": analysis.to_dict(),
                "marketData": overview.to_dict(),
            },
        )
