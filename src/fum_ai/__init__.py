"""
FUM AI Advisor
행동 재무 기반 암호화폐 커밋먼트(락업) 분석 서비스
"""

from fum_ai.advisor import AdvisorResponse, CommitmentAdvisor
from fum_ai.analyzer import CommitmentAnalyzer, score_duration_commitment
from fum_ai.client import CoinGeckoClient
from fum_ai.config import Settings
from fum_ai.data_sources import (
    AlternativeMeClient,
    CoinGeckoMarketSource,
    LedgerDataSource,
    MarketDataSource,
    TokenResolver,
)
from fum_ai.log import set_level
from fum_ai.models import (
    CommitmentAnalysis,
    DurationCommitment,
    MarketSnapshot,
    PriceBandAnalysis,
    PriceBandCommitment,
    Recommendation,
    RiskLevel,
    SentimentSnapshot,
    TargetDirection,
    TokenBalance,
    TokenNotFoundError,
    ValidationError,
    WalletAnalysis,
    WalletTransaction,
)
from fum_ai.targets import analyze_price_band_commitment, analyze_price_target
from fum_ai.wallet import TradingAnalyzer, WalletAnalyzer

__version__ = "0.1.0"
__all__ = [
    "FumAdvisorService",
    "AdvisorResponse",
    "CommitmentAdvisor",
    "CommitmentAnalyzer",
    "score_duration_commitment",
    "analyze_price_band_commitment",
    "analyze_price_target",
    "Settings",
    # 데이터 소스
    "AlternativeMeClient",
    "CoinGeckoClient",
    "CoinGeckoMarketSource",
    "LedgerDataSource",
    "MarketDataSource",
    "TokenResolver",
    # 지갑 분석
    "TradingAnalyzer",
    "WalletAnalyzer",
    "WalletAnalysis",
    "WalletTransaction",
    "TokenBalance",
    # 모델
    "CommitmentAnalysis",
    "DurationCommitment",
    "MarketSnapshot",
    "PriceBandAnalysis",
    "PriceBandCommitment",
    "Recommendation",
    "RiskLevel",
    "SentimentSnapshot",
    "TargetDirection",
    "TokenNotFoundError",
    "ValidationError",
]


class FumAdvisorService:
    """통합 커밋먼트 어드바이저 서비스"""

    def __init__(
        self,
        settings: Settings | None = None,
        source: MarketDataSource | None = None,
        ledger: LedgerDataSource | None = None,
    ):
        self.settings = settings or Settings.from_env()
        set_level(self.settings.log_level)

        if source is None:
            coingecko = CoinGeckoClient(
                api_key=self.settings.coingecko_api_key,
                timeout=self.settings.http_timeout,
            )
            source = CoinGeckoMarketSource(
                coingecko=coingecko,
                alternative_me=AlternativeMeClient(timeout=self.settings.http_timeout),
                resolver=TokenResolver(coingecko, cache_size=self.settings.token_cache_size),
            )

        self.source = source
        self.advisor = CommitmentAdvisor(
            source, history_days=self.settings.history_days, ledger=ledger
        )

    def ask(self, text: str) -> AdvisorResponse:
        """자유 텍스트 메시지 분석"""
        return self.advisor.handle_message(text)

    def analyze_duration(self, amount: float, token_symbol: str, duration_days: float) -> dict:
        """기간 기반 커밋먼트 분석 (dict)"""
        request = DurationCommitment(amount, token_symbol.upper(), duration_days)
        analysis, _ = self.advisor.analyze_duration(request, self.source.get_sentiment())
        return analysis.to_dict()

    def analyze_price_band(
        self, amount: float, token_symbol: str, up_target: float, down_target: float
    ) -> dict:
        """가격 밴드 커밋먼트 분석 (dict)"""
        request = PriceBandCommitment(amount, token_symbol.upper(), up_target, down_target)
        analysis = self.advisor.analyze_price_band(request, self.source.get_sentiment())
        return analysis.to_dict()

    def analyze_wallet(self, wallet_address: str | None) -> dict:
        """지갑 거래 이력 리스크 분석 (dict, ledger 필요)"""
        analysis, _ = self.advisor.analyze_wallet(wallet_address)
        return analysis.to_dict()

    def market(self) -> dict:
        """시장 현황 + 행동 가이드"""
        from fum_ai.insight import MarketInsightAnalyzer

        overview = self.advisor.market_overview()
        return {
            "overview": overview.to_dict(),
            "behavioral_context": MarketInsightAnalyzer.behavioral_context(overview),
        }
