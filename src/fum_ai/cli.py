"""CLI 명령어"""

import argparse
import json
import sys


def _service():
    from fum_ai import FumAdvisorService

    return FumAdvisorService()


def ask(text: str):
    """자유 텍스트 메시지 분석"""
    service = _service()
    response = service.ask(text)
    print(response.text)
    if not response.success:
        sys.exit(1)


def lock(amount: float, symbol: str, days: float, as_json: bool = False):
    """기간 기반 커밋먼트 분석"""
    from fum_ai.models import DurationCommitment, TokenNotFoundError
    from fum_ai.formatter import format_commitment_response

    service = _service()
    request = DurationCommitment(amount, symbol.upper(), days)

    try:
        sentiment = service.source.get_sentiment()
        analysis, snapshot = service.advisor.analyze_duration(request, sentiment)
    except TokenNotFoundError as e:
        print(f"❌ {e}")
        sys.exit(1)

    if as_json:
        print(json.dumps(analysis.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(format_commitment_response(analysis, request, snapshot, sentiment))


def band(amount: float, symbol: str, up: float, down: float, as_json: bool = False):
    """가격 밴드 커밋먼트 분석"""
    from fum_ai.models import PriceBandCommitment, TokenNotFoundError, ValidationError
    from fum_ai.formatter import format_price_band_response

    service = _service()
    request = PriceBandCommitment(amount, symbol.upper(), up, down)

    try:
        sentiment = service.source.get_sentiment()
        analysis = service.advisor.analyze_price_band(request, sentiment)
    except (TokenNotFoundError, ValidationError) as e:
        print(f"❌ {e}")
        sys.exit(1)

    if as_json:
        print(json.dumps(analysis.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(format_price_band_response(analysis, sentiment))


def market():
    """시장 현황"""
    from fum_ai.formatter import format_general_analysis

    service = _service()
    print("🌍 시장 현황 조회 중...")
    print(format_general_analysis(service.advisor.market_overview()))


def serve(host: str, port: int):
    """API 서버 실행"""
    import uvicorn

    uvicorn.run("fum_ai.api:app", host=host, port=port)


def main():
    """메인 CLI 진입점"""
    parser = argparse.ArgumentParser(
        prog="fum-ai",
        description="행동 재무 기반 암호화폐 커밋먼트 분석",
    )
    subparsers = parser.add_subparsers(dest="command", help="명령어")

    # ask
    ask_parser = subparsers.add_parser("ask", help="자유 텍스트 메시지 분석")
    ask_parser.add_argument("text", help='메시지 (예: "Lock 10 ETH for 3 months")')

    # lock
    lock_parser = subparsers.add_parser("lock", help="기간 기반 커밋먼트 분석")
    lock_parser.add_argument("amount", type=float, help="락업 수량")
    lock_parser.add_argument("symbol", help="토큰 심볼 (예: ETH)")
    lock_parser.add_argument("days", type=float, help="락업 기간 (일)")
    lock_parser.add_argument("--json", action="store_true", help="JSON 출력")

    # band
    band_parser = subparsers.add_parser("band", help="가격 밴드 커밋먼트 분석")
    band_parser.add_argument("amount", type=float, help="락업 수량")
    band_parser.add_argument("symbol", help="토큰 심볼 (예: ETH)")
    band_parser.add_argument("up", type=float, help="상단 타겟 가격")
    band_parser.add_argument("down", type=float, help="하단 타겟 가격")
    band_parser.add_argument("--json", action="store_true", help="JSON 출력")

    # market
    subparsers.add_parser("market", help="시장 현황")

    # serve
    serve_parser = subparsers.add_parser("serve", help="API 서버 실행")
    serve_parser.add_argument("--host", default="127.0.0.1", help="호스트 (기본: 127.0.0.1)")
    serve_parser.add_argument("--port", "-p", type=int, default=8000, help="포트 (기본: 8000)")

    args = parser.parse_args()

    if args.command == "ask":
        ask(args.text)
    elif args.command == "lock":
        lock(args.amount, args.symbol, args.days, args.json)
    elif args.command == "band":
        band(args.amount, args.symbol, args.up, args.down, args.json)
    elif args.command == "market":
        market()
    elif args.command == "serve":
        serve(args.host, args.port)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
