"""
Oracle manipulation security report.

Turns a pool snapshot and a simulated swap into findings and mitigation
strategies. Findings other than the price impact one describe properties
of spot-price oracles in general and do not depend on the numbers.
"""

import json
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from src.amm import ReservePair, SwapQuote, bps_to_percent, format_units, spot_price
from src.fork import FlashLoanFunding

logger = logging.getLogger(__name__)


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


IMPACT_RISK_NOTES = {
    RiskLevel.LOW: "Pool depth resists single-swap manipulation",
    RiskLevel.MEDIUM: "Significant price movement possible",
    RiskLevel.HIGH: "Pool price can be pushed far within one transaction",
}


@dataclass
class MarketSnapshot:
    """Pool state the report was derived from."""

    pair_address: str
    base_symbol: str
    quote_symbol: str
    reserves: ReservePair
    block_number: Optional[int] = None
    contract_price: Optional[int] = None

    @property
    def spot_price(self) -> int:
        return spot_price(self.reserves.reserve_a, self.reserves.reserve_b)


@dataclass
class Finding:
    title: str
    risk: Optional[RiskLevel]
    risk_note: str
    details: List[str] = field(default_factory=list)


@dataclass
class Recommendation:
    title: str
    points: List[str]


@dataclass
class SecurityReport:
    """Findings and mitigations for one probed pool."""

    market: MarketSnapshot
    quote: SwapQuote
    share_pct: int
    findings: List[Finding]
    recommendations: List[Recommendation]
    flash_loan: Optional[FlashLoanFunding] = None

    @property
    def highest_risk(self) -> Optional[RiskLevel]:
        order = [RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH]
        levels = [f.risk for f in self.findings if f.risk is not None]
        return max(levels, key=order.index) if levels else None

    def to_dict(self) -> Dict[str, Any]:
        """JSON serialisable view; integer amounts are kept as strings."""
        market = self.market
        data = {
            "pair": market.pair_address,
            "block_number": market.block_number,
            "base_symbol": market.base_symbol,
            "quote_symbol": market.quote_symbol,
            "reserves": {
                market.base_symbol: str(market.reserves.reserve_a),
                market.quote_symbol: str(market.reserves.reserve_b),
            },
            "spot_price": str(market.spot_price),
            "contract_price": str(market.contract_price) if market.contract_price is not None else None,
            "swap": {
                "share_pct": self.share_pct,
                "amount_in": str(self.quote.amount_in),
                "amount_out": str(self.quote.amount_out),
                "price_before": str(self.quote.spot_price_before),
                "price_after": str(self.quote.spot_price_after),
                "price_impact_bps": self.quote.price_impact_bps,
            },
            "findings": [
                {
                    "title": f.title,
                    "risk": f.risk.value if f.risk else None,
                    "risk_note": f.risk_note,
                    "details": f.details,
                }
                for f in self.findings
            ],
            "recommendations": [
                {"title": r.title, "points": r.points} for r in self.recommendations
            ],
            "highest_risk": self.highest_risk.value if self.highest_risk else None,
        }

        if self.flash_loan:
            data["flash_loan"] = {
                "token": self.flash_loan.token,
                "whale": self.flash_loan.whale,
                "recipient": self.flash_loan.recipient,
                "amount": str(self.flash_loan.amount),
                "recipient_balance": str(self.flash_loan.recipient_balance),
            }

        return data

    def write_json(self, path: Union[str, Path]) -> Path:
        """Write the report snapshot to disk, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Report written to {path}")
        return path


def classify_price_impact(
    impact_bps: int, medium_bps: int = 100, high_bps: int = 1000
) -> RiskLevel:
    """Bucket a price impact into a risk level."""
    if impact_bps >= high_bps:
        return RiskLevel.HIGH
    if impact_bps >= medium_bps:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


DEFAULT_RECOMMENDATIONS = [
    Recommendation("Use Chainlink Price Feeds", [
        "Decentralized oracle network",
        "Resistant to manipulation",
    ]),
    Recommendation("Implement TWAP (Time-Weighted Average Price)", [
        "Use longer time windows (30+ minutes)",
        "Reduces impact of temporary price spikes",
    ]),
    Recommendation("Multi-Source Price Validation", [
        "Combine Uniswap, Chainlink, and other sources",
        "Reject outliers beyond threshold",
    ]),
    Recommendation("Circuit Breakers", [
        "Halt operations on >X% price movement",
        "Implement cooldown periods",
    ]),
    Recommendation("Liquidity Depth Checks", [
        "Validate minimum liquidity requirements",
        "Monitor reserve ratios",
    ]),
]


def build_security_report(
    market: MarketSnapshot,
    quote: SwapQuote,
    share_pct: int,
    medium_bps: int = 100,
    high_bps: int = 1000,
    flash_loan: Optional[FlashLoanFunding] = None,
    lending_protocol: str = "Morpho",
    lending_address: Optional[str] = None
) -> SecurityReport:
    """
    Build the security report for a probed pool.

    Args:
        market: Pool snapshot
        quote: Simulated swap against the pool
        share_pct: Swap size as a percentage of the base reserve
        medium_bps: Impact at which risk becomes MEDIUM
        high_bps: Impact at which risk becomes HIGH
        flash_loan: Result of the flash loan funding check, None if it did not run
        lending_protocol: Name of the lending integration consuming the price
        lending_address: Contract address of that integration

    Returns:
        SecurityReport
    """
    impact_risk = classify_price_impact(quote.price_impact_bps, medium_bps, high_bps)

    if flash_loan:
        flash_finding = Finding(
            "Flash Loan Availability: YES",
            RiskLevel.HIGH,
            "Large liquidity pools available (Aave, dYdX)",
            [
                f"Moved {format_units(flash_loan.amount)} {market.quote_symbol} "
                f"from {flash_loan.whale} to {flash_loan.recipient}"
            ],
        )
    else:
        flash_finding = Finding(
            "Flash Loan Availability: NOT VERIFIED",
            None,
            "Funding check did not run on this fork",
        )

    lending_details = []
    if lending_address:
        lending_details.append(f"{lending_protocol} Address: {lending_address}")

    findings = [
        Finding(
            "Oracle Type: Uniswap V2 spot price",
            RiskLevel.HIGH,
            "Vulnerable to flash loan manipulation",
        ),
        flash_finding,
        Finding(
            f"Price Impact: {bps_to_percent(quote.price_impact_bps)}% for {share_pct}% swap",
            impact_risk,
            IMPACT_RISK_NOTES[impact_risk],
        ),
        Finding(
            f"{lending_protocol} Integration: Uses external price oracles",
            None,
            "Depends on oracle implementation",
            lending_details,
        ),
    ]

    logger.debug(f"Price impact {quote.price_impact_bps} bps classified as {impact_risk.value}")

    return SecurityReport(
        market=market,
        quote=quote,
        share_pct=share_pct,
        findings=findings,
        recommendations=[replace(r, points=list(r.points)) for r in DEFAULT_RECOMMENDATIONS],
        flash_loan=flash_loan,
    )
