"""
Oracle manipulation risk analysis.

Builds security findings from a simulated swap and renders them for the
console.
"""

from .render import (
    render_findings,
    render_market_state,
    render_price_impact,
    render_recommendations,
    render_report,
)
from .report import (
    DEFAULT_RECOMMENDATIONS,
    Finding,
    MarketSnapshot,
    Recommendation,
    RiskLevel,
    SecurityReport,
    build_security_report,
    classify_price_impact,
)

__all__ = [
    'RiskLevel',
    'MarketSnapshot',
    'Finding',
    'Recommendation',
    'SecurityReport',
    'DEFAULT_RECOMMENDATIONS',
    'build_security_report',
    'classify_price_impact',
    'render_market_state',
    'render_price_impact',
    'render_findings',
    'render_recommendations',
    'render_report'
]
