"""
Tests for the oracle manipulation security report.
"""
import json

import pytest

from src.amm import ReservePair, quote_swap
from src.analysis import (
    DEFAULT_RECOMMENDATIONS,
    MarketSnapshot,
    RiskLevel,
    build_security_report,
    classify_price_impact,
    render_findings,
    render_market_state,
    render_recommendations,
    render_report,
)
from src.fork import FlashLoanFunding

S = 10**18
PAIR = "0x795065dCc9f64b5614C407a6EFDC400DA6221FB0"


@pytest.fixture
def market():
    return MarketSnapshot(
        pair_address=PAIR,
        base_symbol="SUSHI",
        quote_symbol="WETH",
        reserves=ReservePair(1_000_000 * S, 500 * S),
        block_number=18500000,
    )


@pytest.fixture
def ten_pct_quote(market):
    reserves = market.reserves
    return quote_swap(reserves.reserve_a, reserves.reserve_b, 100_000 * S)


@pytest.fixture
def report(market, ten_pct_quote):
    return build_security_report(market, ten_pct_quote, share_pct=10)


class TestClassifyPriceImpact:

    @pytest.mark.parametrize("bps,expected", [
        (0, RiskLevel.LOW),
        (99, RiskLevel.LOW),
        (100, RiskLevel.MEDIUM),
        (999, RiskLevel.MEDIUM),
        (1000, RiskLevel.HIGH),
        (1735, RiskLevel.HIGH),
    ])
    def test_default_thresholds(self, bps, expected):
        assert classify_price_impact(bps) == expected

    def test_custom_thresholds(self):
        assert classify_price_impact(1735, medium_bps=2000, high_bps=5000) == RiskLevel.LOW
        assert classify_price_impact(1735, medium_bps=500, high_bps=5000) == RiskLevel.MEDIUM


class TestBuildSecurityReport:

    def test_findings_in_order(self, report):
        titles = [f.title for f in report.findings]

        assert len(titles) == 4
        assert titles[0] == "Oracle Type: Uniswap V2 spot price"
        assert titles[1] == "Flash Loan Availability: NOT VERIFIED"
        assert titles[2] == "Price Impact: 17.35% for 10% swap"
        assert titles[3] == "Morpho Integration: Uses external price oracles"

    def test_price_impact_risk(self, report):
        assert report.findings[2].risk == RiskLevel.HIGH
        assert report.highest_risk == RiskLevel.HIGH

    def test_small_swap_is_low_risk(self, market):
        quote = quote_swap(market.reserves.reserve_a, market.reserves.reserve_b, 100 * S)
        report = build_security_report(market, quote, share_pct=1)

        assert report.findings[2].risk == RiskLevel.LOW

    def test_oracle_dependent_finding_has_no_level(self, report):
        assert report.findings[3].risk is None
        assert report.findings[3].risk_note == "Depends on oracle implementation"

    def test_recommendations(self, report):
        titles = [r.title for r in report.recommendations]
        assert titles == [
            "Use Chainlink Price Feeds",
            "Implement TWAP (Time-Weighted Average Price)",
            "Multi-Source Price Validation",
            "Circuit Breakers",
            "Liquidity Depth Checks",
        ]
        assert all(r.points for r in report.recommendations)

    def test_flash_loan_detail(self, market, ten_pct_quote):
        funding = FlashLoanFunding(
            token="0xWETH",
            whale="0xWHALE",
            recipient="0xMANIPULATOR",
            amount=10 * S,
            whale_balance=1_000 * S,
            recipient_balance=10 * S,
        )
        report = build_security_report(market, ten_pct_quote, 10, flash_loan=funding)

        assert report.findings[1].title == "Flash Loan Availability: YES"
        assert report.findings[1].risk == RiskLevel.HIGH
        assert report.findings[1].details == ["Moved 10 WETH from 0xWHALE to 0xMANIPULATOR"]
        assert report.to_dict()["flash_loan"]["amount"] == str(10 * S)

    def test_skipped_flash_loan_is_not_verified(self, report):
        finding = report.findings[1]

        assert finding.risk is None
        assert finding.risk_note == "Funding check did not run on this fork"
        assert finding.details == []

    def test_lending_address_detail(self, market, ten_pct_quote):
        morpho = "0x777777c9898D384F785Ee44Acfe945efDFf5f3E0"
        report = build_security_report(market, ten_pct_quote, 10, lending_address=morpho)

        assert report.findings[3].details == [f"Morpho Address: {morpho}"]

    def test_recommendations_are_copied_per_report(self, market, ten_pct_quote):
        first = build_security_report(market, ten_pct_quote, 10)
        first.recommendations[0].points.append("Pin the feed address")
        first.recommendations[1].title = "Edited"

        second = build_security_report(market, ten_pct_quote, 10)

        assert "Pin the feed address" not in DEFAULT_RECOMMENDATIONS[0].points
        assert "Pin the feed address" not in second.recommendations[0].points
        assert second.recommendations[1].title == "Implement TWAP (Time-Weighted Average Price)"


class TestReportSerialization:

    def test_to_dict(self, report):
        data = report.to_dict()

        assert data["pair"] == PAIR
        assert data["block_number"] == 18500000
        assert data["reserves"] == {"SUSHI": str(1_000_000 * S), "WETH": str(500 * S)}
        assert data["spot_price"] == str(5 * 10**14)
        assert data["contract_price"] is None
        assert data["swap"]["amount_out"] == "45454545454545454545"
        assert data["swap"]["price_after"] == "413223140495867"
        assert data["swap"]["price_impact_bps"] == 1735
        assert data["highest_risk"] == "HIGH"
        assert "flash_loan" not in data

    def test_write_json(self, report, tmp_path):
        path = report.write_json(tmp_path / "reports" / "sushi.json")

        assert path.exists()
        with open(path) as f:
            data = json.load(f)
        assert data["swap"]["price_impact_bps"] == 1735
        assert len(data["findings"]) == 4


class TestRendering:

    def test_market_state(self, market):
        lines = render_market_state(market)

        assert lines[0] == "=" * 60
        assert lines[1] == "📈 CURRENT MARKET STATE"
        assert "SUSHI Reserve: 1000000 SUSHI" in lines
        assert "WETH Reserve: 500 WETH" in lines
        assert "Current Price: 0.0005 WETH per SUSHI" in lines
        assert "Block: 18500000" in lines
        assert lines[-1] == "=" * 60

    def test_market_state_with_contract_price(self, market):
        market.contract_price = market.spot_price
        lines = render_market_state(market)
        assert "Contract Price: 0.0005 WETH per SUSHI" in lines

    def test_findings(self, report):
        lines = render_findings(report)

        assert "1. Oracle Type: Uniswap V2 spot price" in lines
        assert "   Risk: HIGH - Vulnerable to flash loan manipulation" in lines
        assert "3. Price Impact: 17.35% for 10% swap" in lines
        assert "2. Flash Loan Availability: NOT VERIFIED" in lines
        assert "   Risk: Depends on oracle implementation" in lines
        assert lines[-1] == "=" * 60

    def test_recommendations(self, report):
        lines = render_recommendations(report)

        assert "2. Implement TWAP (Time-Weighted Average Price)" in lines
        assert "   - Use longer time windows (30+ minutes)" in lines
        assert lines[-1] == "=" * 60

    def test_full_report(self, report):
        lines = render_report(report)

        assert "💥 PRICE IMPACT SIMULATION (10% Pool Swap)" in lines
        assert "Price Impact: 17.35 %" in lines
        assert lines.count("⚠️  SECURITY FINDINGS") == 1
        assert lines.count("🛡️  MITIGATION STRATEGIES") == 1
