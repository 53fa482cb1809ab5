import os
import sys
from datetime import datetime

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..'))

from constants.constants import SCENARIOS
from services.projection_service import ProjectionService
from services.yfinance_service import YFinanceService
import util


def format_number(value, decimals=2):
    """Format large numbers for display."""
    if value is None:
        return "N/A"
    if abs(value) >= 1e9:
        return f"${value/1e9:.{decimals}f}B"
    elif abs(value) >= 1e6:
        return f"${value/1e6:.{decimals}f}M"
    return f"${value:.{decimals}f}"


def format_percentage(value, decimals=2):
    if value is None:
        return "N/A"
    return f"{value:.{decimals}f}%"


def print_section(title):
    print(f"\n{'='*60}")
    print(f"  {title}")
    print(f"{'='*60}")


def print_scenario(name, series):
    print(f"\n{name.upper()} CASE")
    print(f"{'Year':<6}{'Revenue':>14}{'Net Income':>14}{'EPS':>10}{'Low':>12}{'High':>12}")
    for year in range(len(series['revenue'])):
        print(
            f"{year + 1:<6}"
            f"{format_number(series['revenue'][year]):>14}"
            f"{format_number(series['net_income'][year]):>14}"
            f"{series['eps'][year]:>10.2f}"
            f"{series['share_price_low'][year]:>12.2f}"
            f"{series['share_price_high'][year]:>12.2f}"
        )


def main():
    if len(sys.argv) != 2:
        print("Usage: python scripts/run-projection.py <ticker>")
        print("Example: python scripts/run-projection.py AAPL")
        sys.exit(1)

    ticker = sys.argv[1].upper()
    errors = util.validate_ticker_symbol(ticker)
    if errors:
        print(f"❌ {'; '.join(errors)}")
        sys.exit(1)

    print(f"Running default projections for {ticker}...")
    print(f"Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    yfinance_service = YFinanceService()
    base_data = yfinance_service.fetch_dcf_base_data(ticker)
    if not base_data:
        print(f"❌ Failed to fetch base data for {ticker}")
        sys.exit(1)

    defaults = util.build_default_assumptions(base_data.get('earnings_growth'), base_data.get('current_pe'))
    scenario_inputs = {
        scenario: {field: defaults[field][scenario] for field in defaults}
        for scenario in SCENARIOS
    }

    service = ProjectionService(yfinance_service=yfinance_service)
    result = service.calculate_financial_projections(
        ticker,
        scenario_inputs,
        revenue=base_data.get('revenue'),
        net_income=base_data.get('net_income'),
        shares_outstanding=base_data.get('shares_outstanding'),
        current_stock_price=base_data.get('price'),
        current_eps=base_data.get('eps')
    )
    if not result.get('success'):
        print(f"❌ {result.get('error')}")
        sys.exit(1)

    print_section("BASE DATA")
    for key, value in result['base_data'].items():
        print(f"{key:<25}: {value}")

    print_section("PROJECTIONS")
    for scenario in SCENARIOS:
        print_scenario(scenario, result['projections'][scenario])

    print_section("SUMMARY")
    for scenario in SCENARIOS:
        cagr = result['summary']['cagr_percent'][scenario]
        print(
            f"{scenario:<5} CAGR: low {format_percentage(cagr['low'])}, "
            f"high {format_percentage(cagr['high'])}"
        )


if __name__ == "__main__":
    main()
