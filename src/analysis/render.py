"""
Console rendering for probe results.

Each section is returned as a list of lines so callers decide where they
go (logger, stdout, a file).
"""

from typing import List

from src.amm import bps_to_percent, format_units
from .report import MarketSnapshot, SecurityReport

RULE = "=" * 60


def _banner(title: str) -> List[str]:
    return [RULE, title, RULE]


def render_market_state(market: MarketSnapshot) -> List[str]:
    base, quote = market.base_symbol, market.quote_symbol
    lines = _banner("📈 CURRENT MARKET STATE")
    lines += [
        f"{base} Reserve: {format_units(market.reserves.reserve_a)} {base}",
        f"{quote} Reserve: {format_units(market.reserves.reserve_b)} {quote}",
        f"Current Price: {format_units(market.spot_price)} {quote} per {base}",
    ]
    if market.contract_price is not None:
        lines.append(f"Contract Price: {format_units(market.contract_price)} {quote} per {base}")
    if market.block_number is not None:
        lines.append(f"Block: {market.block_number}")
    lines.append(RULE)
    return lines


def render_price_impact(report: SecurityReport) -> List[str]:
    base, quote_symbol = report.market.base_symbol, report.market.quote_symbol
    quote = report.quote
    lines = _banner(f"💥 PRICE IMPACT SIMULATION ({report.share_pct}% Pool Swap)")
    lines += [
        f"Swap Amount: {format_units(quote.amount_in)} {base}",
        f"Expected Output: {format_units(quote.amount_out)} {quote_symbol}",
        f"Price Before: {format_units(quote.spot_price_before)} {quote_symbol}",
        f"Price After: {format_units(quote.spot_price_after)} {quote_symbol}",
        f"Price Impact: {bps_to_percent(quote.price_impact_bps)} %",
        RULE,
    ]
    return lines


def render_findings(report: SecurityReport) -> List[str]:
    lines = _banner("⚠️  SECURITY FINDINGS")
    for i, finding in enumerate(report.findings, start=1):
        lines.append(f"{i}. {finding.title}")
        if finding.risk is None:
            lines.append(f"   Risk: {finding.risk_note}")
        else:
            lines.append(f"   Risk: {finding.risk.value} - {finding.risk_note}")
        lines += [f"   {detail}" for detail in finding.details]
        lines.append("")
    lines[-1] = RULE
    return lines


def render_recommendations(report: SecurityReport) -> List[str]:
    lines = _banner("🛡️  MITIGATION STRATEGIES")
    for i, recommendation in enumerate(report.recommendations, start=1):
        lines.append(f"{i}. {recommendation.title}")
        lines += [f"   - {point}" for point in recommendation.points]
        lines.append("")
    lines[-1] = RULE
    return lines


def render_report(report: SecurityReport) -> List[str]:
    """Render every section of a report in order."""
    return (
        render_market_state(report.market)
        + render_price_impact(report)
        + render_findings(report)
        + render_recommendations(report)
    )
