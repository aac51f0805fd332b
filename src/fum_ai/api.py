"""FastAPI 서버"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from fum_ai.models import TokenNotFoundError, ValidationError

# 전역 서비스 인스턴스
_service = None


def get_service():
    """서비스 인스턴스 반환 (lazy initialization)"""
    global _service
    if _service is None:
        from fum_ai import FumAdvisorService

        _service = FumAdvisorService()
    return _service


def set_service(service) -> None:
    """서비스 인스턴스 교체 (테스트용)"""
    global _service
    _service = service


# ============================================================
# Pydantic Models
# ============================================================


class MessageRequest(BaseModel):
    text: str = ""


class DurationCommitmentRequest(BaseModel):
    amount: float = Field(..., gt=0, description="락업 수량")
    token_symbol: str = Field(..., min_length=1, description="토큰 심볼 (예: ETH)")
    duration_days: float = Field(..., gt=0, description="락업 기간 (일)")


class PriceBandCommitmentRequest(BaseModel):
    amount: float = Field(..., gt=0, description="락업 수량")
    token_symbol: str = Field(..., min_length=1, description="토큰 심볼 (예: ETH)")
    up_target: float = Field(..., gt=0, description="상단 타겟 가격")
    down_target: float = Field(..., ge=0, description="하단 타겟 가격")


class WalletAnalysisRequest(BaseModel):
    text: str = ""
    wallet_address: str | None = Field(None, pattern=r"^0x[a-fA-F0-9]{40}$", description="지갑 주소")


class HealthResponse(BaseModel):
    status: str
    version: str


# ============================================================
# Lifespan
# ============================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 시작/종료 관리"""
    print("🚀 FUM AI Advisor API 서버 시작")
    yield
    print("👋 서버 종료")


# ============================================================
# App
# ============================================================

app = FastAPI(
    title="FUM AI Advisor API",
    description="행동 재무 기반 암호화폐 커밋먼트 분석 서비스",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================
# Endpoints
# ============================================================


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """서비스 상태 확인"""
    from fum_ai import __version__

    return HealthResponse(status="healthy", version=__version__)


@app.post("/api/message", tags=["Chat"])
def post_message(request: MessageRequest):
    """
    자유 텍스트 메시지 분석

    - "Lock 10 ETH for 3 months" → 기간 기반 분석
    - "Lock 3 ETH until price reaches 3000 or 2000" → 가격 밴드 분석
    - "Analyze my wallet 0x..." → 지갑 거래 이력 분석 (ledger 설정 시)
    - 그 외 → 시장 현황 안내
    """
    if not request.text.strip():
        return JSONResponse(status_code=400, content={"success": False, "error": "Text is required"})

    service = get_service()
    response = service.ask(request.text)
    meta = response.metadata

    return {
        "success": response.success,
        "data": {
            "response": response.text,
            "action": response.action,
            "analysis": meta.get("analysis"),
            "amount": meta.get("amount"),
            "tokenSymbol": meta.get("token"),
            "duration": meta.get("durationInDays"),
            "unit": meta.get("unit", "days"),
            "upTarget": meta.get("upTarget"),
            "downTarget": meta.get("downTarget"),
            "fearAndGreed": meta.get("fearGreedData"),
        },
    }


@app.post("/analyze/commitment", tags=["Analysis"])
def analyze_commitment(request: DurationCommitmentRequest):
    """기간 기반 커밋먼트 분석"""
    service = get_service()
    try:
        return service.analyze_duration(request.amount, request.token_symbol, request.duration_days)
    except TokenNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"{e.symbol} not found")


@app.post("/analyze/price-band", tags=["Analysis"])
def analyze_price_band(request: PriceBandCommitmentRequest):
    """가격 밴드 커밋먼트 분석"""
    service = get_service()
    try:
        return service.analyze_price_band(
            request.amount, request.token_symbol, request.up_target, request.down_target
        )
    except TokenNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"{e.symbol} not found")
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))


@app.get("/market", tags=["Insights"])
def get_market():
    """시장 현황 + 행동 가이드"""
    service = get_service()
    return service.market()


@app.post("/api/wallet-analysis", tags=["Chat"])
def post_wallet_analysis(request: WalletAnalysisRequest):
    """지갑 거래 이력 리스크 분석 ("analyze my wallet 0x...")"""
    if not request.text.strip():
        return JSONResponse(status_code=400, content={"success": False, "error": "Text is required"})

    service = get_service()
    response = service.advisor.handle_wallet_message(request.text, request.wallet_address)
    analysis = response.metadata.get("analysis") or {}

    return {
        "success": response.success,
        "data": {
            "response": response.text,
            "action": response.action,
            "walletAddress": response.metadata.get("walletAddress"),
            "riskScore": analysis.get("risk_score"),
            "confidencePercentage": analysis.get("confidence_percentage"),
            "riskProfile": analysis.get("risk_profile"),
            "riskTolerance": analysis.get("risk_tolerance"),
            "marketAnalysis": analysis.get("market_analysis"),
            "userTradingFactors": analysis.get("metrics"),
            "recommendations": analysis.get("recommendations"),
        },
    }
