"""사용자 메시지 → 커밋먼트 요청 / 지갑 분석 요청 파싱 (정규식)"""

import re

from fum_ai.models import CommitmentRequest, DurationCommitment, PriceBandCommitment

SUPPORTED_TOKENS = [
    "ETH", "BTC", "USDC", "SOL", "AVAX", "ADA", "DOT", "MATIC", "LINK", "UNI",
    "LTC", "BCH", "XRP", "DOGE", "SHIB", "TRX", "ATOM", "ETC", "BNB", "USDT",
]

_TOKEN = "(" + "|".join(SUPPORTED_TOKENS) + r")\b"
_NUMBER = r"(\d+\.?\d*)"

AMOUNT_PATTERN = re.compile(_NUMBER + r"\s*" + _TOKEN, re.IGNORECASE)
DURATION_PATTERN = re.compile(r"(\d+)\s*(days?|weeks?|months?|years?)\b", re.IGNORECASE)

# "lock 3 ETH until either the price goes up to $3000 or goes down to $2000" 등
PRICE_BAND_PATTERNS = [
    re.compile(
        r"lock\s+" + _NUMBER + r"\s+" + _TOKEN
        + r"\s+until\s+(?:either\s+)?(?:the\s+)?price\s+(?:goes\s+)?(?:up\s+)?to\s+\$?" + _NUMBER
        + r"\s+(?:or|and)\s+(?:price\s+)?(?:goes\s+)?(?:down\s+)?to\s+\$?" + _NUMBER,
        re.IGNORECASE,
    ),
    re.compile(
        r"lock\s+" + _NUMBER + r"\s+" + _TOKEN
        + r"\s+until\s+(?:the\s+)?price\s+(?:reaches|hits)?\s*\$?" + _NUMBER
        + r"\s+or\s+\$?" + _NUMBER,
        re.IGNORECASE,
    ),
    re.compile(
        r"lock\s+" + _NUMBER + r"\s+" + _TOKEN
        + r"\s+(?:until|till)\s+\$?" + _NUMBER + r"\s+or\s+\$?" + _NUMBER,
        re.IGNORECASE,
    ),
]

UNIT_DAYS = {"day": 1, "week": 7, "month": 30, "year": 365}

WALLET_PATTERNS = [
    re.compile(r"analyze\s+(?:my\s+)?(?:wallet|trading\s+history|portfolio)", re.IGNORECASE),
    re.compile(r"risk\s+(?:assessment|analysis|score)", re.IGNORECASE),
    re.compile(r"trading\s+(?:pattern|behavior|history)", re.IGNORECASE),
    re.compile(r"portfolio\s+(?:analysis|review)", re.IGNORECASE),
    re.compile(r"wallet\s+(?:analysis|review)", re.IGNORECASE),
]
WALLET_ADDRESS_PATTERN = re.compile(r"0x[a-fA-F0-9]{40}")


def duration_to_days(value: int, unit: str) -> int:
    """기간 단위를 일수로 변환 (월=30일, 년=365일)"""
    return value * UNIT_DAYS[unit.lower().rstrip("s")]


def parse_price_band(text: str) -> PriceBandCommitment | None:
    """가격 밴드 락업 요청 파싱"""
    for pattern in PRICE_BAND_PATTERNS:
        match = pattern.search(text)
        if match:
            amount, token, up, down = match.groups()
            return PriceBandCommitment(
                amount=float(amount),
                token_symbol=token.upper(),
                up_target=float(up),
                down_target=float(down),
            )
    return None


def parse_duration(text: str) -> DurationCommitment | None:
    """기간 락업 요청 파싱 ("lock 10 ETH for 3 months")"""
    amount_match = AMOUNT_PATTERN.search(text)
    duration_match = DURATION_PATTERN.search(text)
    if not amount_match or not duration_match:
        return None

    value = int(duration_match.group(1))
    unit = duration_match.group(2).lower()
    return DurationCommitment(
        amount=float(amount_match.group(1)),
        token_symbol=amount_match.group(2).upper(),
        duration_days=duration_to_days(value, unit),
        duration_value=value,
        duration_unit=unit,
    )


def parse_commitment_request(text: str) -> CommitmentRequest | None:
    """
    메시지에서 커밋먼트 요청 추출

    가격 밴드 패턴을 먼저 확인하고, 없으면 수량+기간 패턴.
    둘 다 없으면 None (일반 시장 분석 경로)
    """
    if not text:
        return None
    return parse_price_band(text) or parse_duration(text)


def is_wallet_request(text: str) -> bool:
    """지갑/거래 이력 분석 요청인지 ("analyze my wallet", "risk score" 등)"""
    return bool(text) and any(pattern.search(text) for pattern in WALLET_PATTERNS)


def extract_wallet_address(text: str) -> str | None:
    """메시지의 첫 번째 0x 주소"""
    match = WALLET_ADDRESS_PATTERN.search(text or "")
    return match.group(0) if match else None
