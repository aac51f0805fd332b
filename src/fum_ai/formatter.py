"""분석 결과 → 채팅 응답 텍스트 (Markdown)"""

from datetime import datetime, timezone

from fum_ai.insight import MarketInsightAnalyzer
from fum_ai.models import (
    CommitmentAnalysis,
    DurationCommitment,
    MarketOverview,
    MarketSentiment,
    MarketSnapshot,
    PriceBandAnalysis,
    PricePrediction,
    Recommendation,
    RiskLevel,
    RiskTolerance,
    SentimentSnapshot,
    TrendDirection,
    WalletAnalysis,
    WalletRiskProfile,
)

RECOMMENDATION_HEADLINES = {
    Recommendation.HIGHLY_RECOMMENDED: ("🌟", "This is an excellent commitment strategy"),
    Recommendation.RECOMMENDED: ("✅", "This is a solid commitment"),
    Recommendation.NEUTRAL: ("✅", "This is a solid commitment"),
    Recommendation.CAUTION: ("⚠️", "I recommend reconsidering this commitment"),
    Recommendation.NOT_RECOMMENDED: ("❌", "I strongly advise against this commitment"),
}

COMMITMENT_RISK_EMOJI = {
    RiskLevel.EXTREME: "🔥",
    RiskLevel.HIGH: "⚠️",
    RiskLevel.MODERATE: "🟡",
    RiskLevel.LOW: "🟢",
}

BAND_RISK_EMOJI = {
    RiskLevel.EXTREME: "🔴",
    RiskLevel.HIGH: "🟠",
    RiskLevel.MODERATE: "🟡",
    RiskLevel.LOW: "🟢",
}

WALLET_RISK_EMOJI = {
    WalletRiskProfile.LOW_RISK: "🟢",
    WalletRiskProfile.MODERATE_RISK: "🟡",
    WalletRiskProfile.HIGH_RISK: "🟠",
    WalletRiskProfile.EXTREME_RISK: "🔴",
}

SENTIMENT_EMOJI = {
    MarketSentiment.BULLISH: "🐂",
    MarketSentiment.BEARISH: "🐻",
    MarketSentiment.NEUTRAL: "➡️",
}

TREND_EMOJI = {
    TrendDirection.UPWARD: "📈",
    TrendDirection.DOWNWARD: "📉",
    TrendDirection.SIDEWAYS: "➡️",
}

TOLERANCE_EMOJI = {
    RiskTolerance.CONSERVATIVE: "🛡️",
    RiskTolerance.MODERATE: "⚖️",
    RiskTolerance.AGGRESSIVE: "🚀",
    RiskTolerance.EXTREME: "💥",
}


def _currency(value: float) -> str:
    return f"{value:,.2f}"


def _pct(value: float) -> str:
    return f"{value:+.2f}%"


def _bullets(items) -> str:
    return "\n".join(f"• {item}" for item in items)


def _numbered(items) -> str:
    return "\n".join(f"{i}. {item}" for i, item in enumerate(items, 1))


def fear_greed_emoji(value: int) -> str:
    """Fear & Greed 구간 이모지"""
    if value <= 25:
        return "😱"
    if value <= 45:
        return "😨"
    if value <= 55:
        return "😐"
    if value <= 75:
        return "😏"
    return "🤪"


def confidence_emoji(confidence: float) -> str:
    """예측 신뢰도 이모지"""
    if confidence >= 0.7:
        return "🟢"
    if confidence >= 0.5:
        return "🟡"
    return "🔴"


def format_fear_greed(sentiment: SentimentSnapshot | None) -> str:
    if sentiment is None:
        return ""
    return (
        f"**Fear & Greed Index:** {sentiment.value} ({sentiment.classification}) "
        f"{fear_greed_emoji(sentiment.value)}"
    )


def format_prediction_line(prediction: PricePrediction) -> str:
    """예측 한 줄: • Jan 15, 2025: $3,150.00 (+5.00%) 🟡"""
    target = datetime.fromtimestamp(prediction.target_timestamp_ms / 1000, tz=timezone.utc)
    return (
        f"• {target:%b} {target.day}, {target.year}: ${_currency(prediction.predicted_price)} "
        f"({_pct(prediction.price_change_percent)}) {confidence_emoji(prediction.confidence)}"
    )


def _scenario_pct(value: float, initial: float) -> str:
    if not initial:
        return _pct(0)
    return _pct((value - initial) / initial * 100)


def format_commitment_response(
    analysis: CommitmentAnalysis,
    request: DurationCommitment,
    snapshot: MarketSnapshot,
    sentiment: SentimentSnapshot | None,
) -> str:
    """기간 기반 커밋먼트 분석 응답"""
    emoji, action = RECOMMENDATION_HEADLINES[analysis.recommendation]
    er = analysis.expected_return
    total_value = request.amount * snapshot.current_price
    duration_value = request.duration_value if request.duration_value is not None else request.duration_days

    sections = [
        f"{emoji} **Real-Time Commitment Analysis**",
        "\n".join([
            f"**Proposal:** Lock {request.amount:g} {request.token_symbol} for {duration_value:g} {request.duration_unit}",
            f"**Current Price:** ${_currency(snapshot.current_price)} ({_pct(snapshot.price_change_24h)} 24h)",
            f"**Total Value:** ${_currency(total_value)}",
            f"**Commitment Score:** {analysis.score}/100",
        ]),
    ]

    fear_greed = format_fear_greed(sentiment)
    if fear_greed:
        sections.append(fear_greed)

    sections.append("\n".join([
        "**Market Context:**",
        f"• 7-day change: {_pct(snapshot.price_change_7d)}",
        f"• 30-day change: {_pct(snapshot.price_change_30d)}",
        f"• Market Cap: ${_currency(snapshot.market_cap / 1_000_000)}M",
        f"• 24h Volume: ${_currency(snapshot.volume_24h / 1_000_000)}M",
    ]))

    if er is not None:
        sections.append("\n".join([
            "**📈 Expected Return Analysis:**",
            f"• **Initial Investment:** ${_currency(er.initial_investment)}",
            f"• **Predicted Value:** ${_currency(er.predicted_value)}",
            f"• **Expected Return:** ${_currency(er.expected_return)} ({_pct(er.expected_return_percent)})",
            f"• **Best Case:** ${_currency(er.best_case)} ({_scenario_pct(er.best_case, er.initial_investment)})",
            f"• **Worst Case:** ${_currency(er.worst_case)} ({_scenario_pct(er.worst_case, er.initial_investment)})",
            f"• **Confidence:** {er.confidence * 100:.2f}%",
        ]))

    sections.append(
        "**📊 Price Predictions:**\n"
        + "\n".join(format_prediction_line(p) for p in analysis.predictions)
    )
    sections.append("**Analysis:**\n" + _bullets(analysis.factors))
    sections.append(
        f"**Risk Level:** {analysis.risk_level.value} {COMMITMENT_RISK_EMOJI[analysis.risk_level]}"
    )
    sections.append("**Behavioral Insights:**\n" + _bullets(analysis.behavioral_insights))
    sections.append("**Market Conditions:**\n" + _bullets(analysis.market_conditions))
    sections.append(
        "**Fear & Greed Insights:**\n"
        + (_numbered(analysis.fear_greed_insights) or "• Market sentiment data unavailable")
    )
    sections.append(f"**Recommendation:** {action}")
    sections.append("**Suggested Optimizations:**\n" + _numbered(analysis.suggested_optimizations))
    sections.append(
        "Would you like me to help you optimize this commitment or proceed with the vault creation?"
    )

    return "\n\n".join(sections)


def _target_block(title: str, target: float, scenario: float, analysis) -> str:
    return "\n".join([
        title,
        f"• **Target Price:** ${_currency(target)} ({_pct(scenario)})",
        f"• **Expected Time:** {analysis.expected_days} days",
        f"• **Probability:** {analysis.probability * 100:.2f}%",
        f"• **Confidence:** {analysis.confidence * 100:.2f}%",
        f"• **Risk Factors:** {', '.join(analysis.risk_factors) or 'None identified'}",
        f"• **Market Conditions:** {', '.join(analysis.market_conditions) or 'Neutral'}",
    ])


def format_price_band_response(
    analysis: PriceBandAnalysis,
    sentiment: SentimentSnapshot | None,
) -> str:
    """가격 밴드 커밋먼트 분석 응답"""
    returns = analysis.expected_return
    times = analysis.time_to_targets
    up = analysis.up_analysis
    down = analysis.down_analysis

    sections = [
        "🎯 **Price-Based Commitment Analysis**",
        "\n".join([
            f"**Proposal:** Lock {analysis.amount:g} {analysis.token_symbol} until price reaches "
            f"${_currency(analysis.up_target)} or ${_currency(analysis.down_target)}",
            f"**Current Price:** ${_currency(analysis.current_price)}",
            f"**Total Value:** ${_currency(analysis.amount * analysis.current_price)}",
        ]),
    ]

    fear_greed = format_fear_greed(sentiment)
    if fear_greed:
        sections.append(fear_greed)

    sections.append(_target_block("**📈 Up Target Analysis:**", analysis.up_target, returns.up_scenario, up))
    sections.append(_target_block("**📉 Down Target Analysis:**", analysis.down_target, returns.down_scenario, down))
    sections.append("\n".join([
        "**⏱️ Time Analysis:**",
        f"• **Time to Up Target:** {times.up_target} days",
        f"• **Time to Down Target:** {times.down_target} days",
        f"• **Average Expected Duration:** {times.average_time:g} days",
    ]))
    sections.append("\n".join([
        "**💰 Expected Returns:**",
        f"• **Up Scenario:** {_pct(returns.up_scenario)}",
        f"• **Down Scenario:** {_pct(returns.down_scenario)}",
        f"• **Weighted Average:** {_pct(returns.weighted_average)}",
        f"• **Best Case:** {_pct(returns.best_case)}",
        f"• **Worst Case:** {_pct(returns.worst_case)}",
    ]))
    sections.append(
        f"**Risk Level:** {analysis.overall_risk.value} {BAND_RISK_EMOJI[analysis.overall_risk]}"
    )
    sections.append("**🔍 Key Insights:**\n" + _numbered(analysis.insights))
    sections.append("**💡 Recommendations:**\n" + _numbered(analysis.recommendations))
    sections.append(
        "**Summary:**\n"
        f"This price-based commitment strategy has a {up.probability * 100:.2f}% chance of reaching "
        f"the up target in {up.expected_days} days and a {down.probability * 100:.2f}% chance of "
        f"reaching the down target in {down.expected_days} days. The overall risk level is "
        f"{analysis.overall_risk.value.lower()}, with a weighted average expected return of "
        f"{_pct(returns.weighted_average)}."
    )
    sections.append(
        "Would you like me to help you optimize these targets or proceed with the vault creation?"
    )

    return "\n\n".join(sections)


def format_token_not_found(
    symbol: str,
    suggestions: list[tuple[str, str]],
    common_symbols: list[str],
) -> str:
    """토큰 조회 실패 응답 (추천 목록 포함)"""
    lines = [f'I couldn\'t find data for "{symbol}". ']
    if suggestions:
        lines[0] += "Did you mean one of these?"
        lines.extend(f"• {sym.upper()} ({name})" for sym, name in suggestions[:5])
    else:
        lines[0] += "Here are some popular tokens you can use:"
        lines.extend(f"• {sym.upper()}" for sym in common_symbols[:10])
    lines.append("")
    lines.append("Please try again with a valid token symbol.")
    return "\n".join(lines)


def format_market_context(overview: MarketOverview) -> str:
    """실시간 시장 상황 요약"""
    header = (
        "⚠️ **Market Data Unavailable** (showing fallback values)"
        if overview.is_fallback
        else "📊 **Real-Time Market Conditions**"
    )
    return "\n".join([
        header,
        "",
        f"**Prices:** BTC ${_currency(overview.btc)} ({_pct(overview.btc_change_24h)}), "
        f"ETH ${_currency(overview.eth)} ({_pct(overview.eth_change_24h)}), "
        f"SOL ${_currency(overview.sol)} ({_pct(overview.sol_change_24h)})",
        f"**Sentiment:** {overview.sentiment.capitalize()} (Fear & Greed: {overview.fear_greed_index})",
        f"**Volatility:** {overview.volatility.capitalize()} "
        f"(24h Market Change: {_pct(overview.market_cap_change_24h)})",
    ])


def format_general_analysis(overview: MarketOverview | None = None) -> str:
    """커밋먼트 제안이 없는 메시지에 대한 응답"""
    lines = ["Please provide a commitment proposal for analysis."]
    lines.append(
        'For example: "Lock 10 ETH for 3 months" or '
        '"Lock 3 ETH until the price goes up to $3000 or down to $2000".'
    )

    if overview is not None:
        lines.append("")
        lines.append(format_market_context(overview))
        context = MarketInsightAnalyzer.behavioral_context(overview)
        if context:
            lines.append("")
            lines.append(_bullets(context))

    return "\n".join(lines)


def hold_time_label(days: float) -> str:
    """평균 보유 기간 라벨"""
    if days < 1:
        return "Very short-term trading"
    if days < 7:
        return "Short-term trading"
    if days < 30:
        return "Medium-term trading"
    return "Long-term trading"


def trade_frequency_label(per_week: float) -> str:
    """주간 거래 빈도 라벨"""
    if per_week > 50:
        return "Very high frequency"
    if per_week > 20:
        return "High frequency"
    if per_week > 5:
        return "Moderate frequency"
    return "Low frequency"


def format_wallet_analysis(analysis: WalletAnalysis, overview: MarketOverview | None = None) -> str:
    """지갑 거래 이력 분석 리포트"""
    metrics = analysis.metrics
    market = analysis.market_analysis
    profile = analysis.risk_profile
    indicators = metrics.emotional_trading_indicators or ("No emotional trading patterns detected",)

    sections = [
        "# 📊 **Wallet Trading Analysis Report**",
        "\n".join([
            "## 🎯 **Risk Assessment**",
            f"**Risk Score:** {analysis.risk_score:.1f}/100",
            f"**Confidence Level:** {analysis.confidence_percentage:.1f}%",
            f"**Risk Profile:** {WALLET_RISK_EMOJI[profile]} {profile.value.replace('_', ' ')}",
            f"**Risk Tolerance:** {TOLERANCE_EMOJI[analysis.risk_tolerance]} "
            f"{analysis.risk_tolerance.value}",
        ]),
        "\n".join([
            "## 📈 **Current Market Analysis**",
            f"**Sentiment:** {SENTIMENT_EMOJI[market.sentiment]} {market.sentiment.value}",
            f"**Trend Direction:** {TREND_EMOJI[market.trend_direction]} {market.trend_direction.value}",
            f"**AI Recommendation:** {market.recommendation}",
        ]),
        "\n".join([
            "## 🔍 **Your Trading Factors**",
            f"• **Average Hold Time:** {metrics.average_hold_time:.1f} days "
            f"({hold_time_label(metrics.average_hold_time)})",
            f"• **Trade Frequency:** {metrics.trade_frequency:.1f} trades/week "
            f"({trade_frequency_label(metrics.trade_frequency)})",
            f"• **Volatility Tolerance:** {metrics.volatility_tolerance:.1f}/100",
            f"• **Diversification Score:** {metrics.diversification_score:.1f}/100",
            f"• **ETH Chain Activity:** {metrics.eth_activity:.1f}%",
            f"• **AVAX Chain Activity:** {metrics.avax_activity:.1f}%",
        ]),
        "**Emotional Trading Indicators:**\n" + _bullets(indicators),
        "## 💡 **Personalized Recommendations**\n" + "\n\n".join(analysis.recommendations),
        "\n".join([
            "## 🎯 **Next Steps**",
            "Based on your analysis, I recommend:",
            "1. **Review your risk management strategy** - Consider implementing the recommendations above",
            "2. **Set up commitment vaults** - Lock positions to prevent emotional trading",
            "3. **Monitor your progress** - Track improvements in your trading patterns",
            "4. **Regular rebalancing** - Maintain your target risk profile",
        ]),
        "*This analysis is based on behavioral patterns and market conditions. "
        "Always do your own research and consider consulting with a financial advisor.*",
    ]

    if overview is not None:
        sections.append(format_market_context(overview))

    return "\n\n".join(sections)
