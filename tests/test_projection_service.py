"""Tests for services.projection_service."""

from dataclasses import replace
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from services.models import CompanyFinancials, ScenarioAssumptions
from services.models.dcf_models import DCFData
from services.exceptions import RecordNotFoundError
from services.projection_service import ProjectionService, project

# ---------------------------------------------------------------------------
# project()
# ---------------------------------------------------------------------------


def test_year_one_carries_base_financials(reference_financials, reference_scenarios):
    result = project(reference_financials, reference_scenarios)

    for scenario in ('bear', 'base', 'bull'):
        series = result.series[scenario]
        assert series.revenue_by_year[0] == reference_financials.revenue
        assert series.net_income_by_year[0] == reference_financials.net_income


def test_compounds_each_year_at_scenario_rate(reference_financials, reference_scenarios):
    result = project(reference_financials, reference_scenarios)

    for scenario, assumptions in reference_scenarios.items():
        series = result.series[scenario]
        assert len(series.revenue_by_year) == 5
        for year in range(1, 5):
            expected_revenue = series.revenue_by_year[year - 1] * (1 + assumptions.revenue_growth_rate)
            expected_income = series.net_income_by_year[year - 1] * (1 + assumptions.net_income_growth_rate)
            assert series.revenue_by_year[year] == pytest.approx(expected_revenue, rel=Decimal('1e-8'))
            assert series.net_income_by_year[year] == pytest.approx(expected_income, rel=Decimal('1e-8'))


def test_price_band_ordering_with_positive_eps(reference_financials, reference_scenarios):
    result = project(reference_financials, reference_scenarios)

    for series in result.series.values():
        for low, high in zip(series.share_price_low_by_year, series.share_price_high_by_year):
            assert high >= low


def test_inverted_pe_band_is_not_rejected(reference_financials):
    inverted = ScenarioAssumptions(Decimal('0.1'), Decimal('0.1'), Decimal('30'), Decimal('20'))
    result = project(reference_financials, {'bear': inverted, 'base': inverted, 'bull': inverted})

    assert result.base.share_price_high_by_year[0] < result.base.share_price_low_by_year[0]


def test_zero_shares_outstanding_uses_default(reference_financials, reference_scenarios):
    financials = replace(reference_financials, shares_outstanding=0)

    result = project(financials, reference_scenarios)

    assert result.base.eps_by_year[0] == financials.net_income / 50_000_000


def test_current_eps_seed_wins_over_derived_value(reference_scenarios):
    financials = CompanyFinancials(
        revenue=Decimal('1000'),
        net_income=Decimal('300'),
        stock_price=Decimal('50'),
        shares_outstanding=100,
        current_eps=Decimal('5.00'),
    )

    result = project(financials, reference_scenarios)

    for series in result.series.values():
        assert series.eps_by_year[0] == Decimal('5.00')


def test_non_positive_current_eps_falls_back_to_derived(reference_scenarios):
    financials = CompanyFinancials(
        revenue=Decimal('1000'),
        net_income=Decimal('300'),
        stock_price=Decimal('50'),
        shares_outstanding=100,
        current_eps=Decimal('-1'),
    )

    result = project(financials, reference_scenarios)

    assert result.base.eps_by_year[0] == Decimal('3')


def test_eps_compounds_at_net_income_rate(reference_financials, reference_scenarios):
    result = project(reference_financials, reference_scenarios)

    eps = result.base.eps_by_year
    for year in range(1, 5):
        assert eps[year] == pytest.approx(eps[year - 1] * Decimal('1.18'), rel=Decimal('1e-12'))


def test_zero_price_gives_null_cagr_and_full_series(reference_financials, reference_scenarios):
    financials = replace(reference_financials, stock_price=Decimal('0'))

    result = project(financials, reference_scenarios)

    for scenario in ('bear', 'base', 'bull'):
        assert result.cagr_low[scenario] is None
        assert result.cagr_high[scenario] is None
        series = result.series[scenario]
        assert len(series.revenue_by_year) == 5
        assert len(series.net_income_by_year) == 5
        assert len(series.eps_by_year) == 5
        assert len(series.share_price_low_by_year) == 5
        assert len(series.share_price_high_by_year) == 5


def test_negative_projected_price_only_nulls_that_scenario(reference_financials, reference_scenarios):
    scenarios = dict(reference_scenarios)
    scenarios['bear'] = ScenarioAssumptions(Decimal('0.05'), Decimal('0.10'), Decimal('-5'), Decimal('18'))

    result = project(reference_financials, scenarios)

    assert result.cagr_low['bear'] is None
    assert result.cagr_high['bear'] is not None
    assert result.cagr_low['base'] is not None


def test_reference_company_base_case(reference_financials, reference_scenarios):
    result = project(reference_financials, reference_scenarios)

    eps = result.base.eps_by_year
    assert eps[0] == Decimal('8.185')
    assert float(eps[4]) == pytest.approx(8.185 * 1.18 ** 4, rel=1e-9)
    assert float(result.base.share_price_high_by_year[4]) == pytest.approx(380.8535, abs=1e-3)
    assert float(result.cagr_high['base']) == pytest.approx(0.0878, abs=5e-4)


def test_identical_inputs_give_identical_outputs(reference_financials, reference_scenarios):
    first = project(reference_financials, reference_scenarios)
    second = project(reference_financials, reference_scenarios)

    assert first.series == second.series
    assert first.cagr_low == second.cagr_low
    assert first.cagr_high == second.cagr_high


def test_case_prices_use_final_year(reference_financials, reference_scenarios):
    result = project(reference_financials, reference_scenarios)

    prices = result.case_prices()

    assert prices['base_case_low_price'] == result.base.share_price_low_by_year[-1]
    assert prices['base_case_high_price'] == result.base.share_price_high_by_year[-1]
    assert prices['base_case_avg_price'] == (prices['base_case_low_price'] + prices['base_case_high_price']) / 2
    assert len(prices) == 9


def test_to_dict_renders_floats_and_null_cagr(reference_financials, reference_scenarios):
    result = project(replace(reference_financials, stock_price=Decimal('0')), reference_scenarios)

    rendered = result.to_dict()

    assert set(rendered) == {'bear', 'base', 'bull', 'cagr_low', 'cagr_high', 'timestamp'}
    assert isinstance(rendered['base']['eps'][0], float)
    assert rendered['cagr_high'] == {'bear': None, 'base': None, 'bull': None}


# ---------------------------------------------------------------------------
# ProjectionService
# ---------------------------------------------------------------------------


def _service(base_data=None, dcf_service=None):
    yfinance_service = MagicMock()
    yfinance_service.fetch_dcf_base_data.return_value = base_data
    return ProjectionService(yfinance_service=yfinance_service, dcf_service=dcf_service or MagicMock()), yfinance_service


def test_service_uses_supplied_figures_without_fetching(scenario_inputs):
    service, yfinance_service = _service()

    result = service.calculate_financial_projections(
        'aapl', scenario_inputs,
        revenue=40195000000, net_income=7873970000,
        shares_outstanding=962000000, current_stock_price=250.0
    )

    assert result['success'] is True
    assert result['ticker'] == 'AAPL'
    yfinance_service.fetch_dcf_base_data.assert_not_called()
    assert result['projections']['base']['eps'][0] == pytest.approx(8.185)
    assert result['summary']['projection_years'] == 5
    assert result['summary']['cagr_percent']['base']['high'] == pytest.approx(8.78, abs=0.05)


def test_service_summary_rounds_percentages(scenario_inputs):
    service, _ = _service()

    result = service.calculate_financial_projections(
        'AAPL', scenario_inputs,
        revenue=40195000000, net_income=7873970000,
        shares_outstanding=962000000, current_stock_price=250.0
    )

    summary = result['summary']
    for scenario in ('bear', 'base', 'bull'):
        for value in (*summary['upside_potential'][scenario].values(), *summary['cagr_percent'][scenario].values()):
            assert value == round(value, 2)
    assert summary['upside_potential']['base']['high_estimate'] == pytest.approx(52.34, abs=0.01)


def test_service_fetches_missing_figures(scenario_inputs):
    service, yfinance_service = _service({
        'ticker': 'MSFT', 'price': 400.0, 'revenue': 200e9, 'net_income': 70e9,
        'eps': 9.5, 'shares_outstanding': 7_400_000_000,
    })

    result = service.calculate_financial_projections('MSFT', scenario_inputs)

    assert result['success'] is True
    yfinance_service.fetch_dcf_base_data.assert_called_once_with('MSFT')
    assert result['base_data']['current_stock_price'] == 400.0
    assert result['projections']['bull']['eps'][0] == pytest.approx(9.5)


def test_service_reports_missing_base_data(scenario_inputs):
    service, _ = _service(None)

    result = service.calculate_financial_projections('ZZZZ', scenario_inputs)

    assert result['success'] is False
    assert result['error'] == 'Failed to fetch base financial data for ZZZZ'


def test_service_missing_price_yields_null_upside(scenario_inputs):
    service, _ = _service({'revenue': 1000.0, 'net_income': 100.0, 'price': None})

    result = service.calculate_financial_projections('ABC', scenario_inputs)

    assert result['success'] is True
    assert result['projections']['cagr_low']['base'] is None
    assert result['summary']['upside_potential']['base'] == {'low_estimate': None, 'high_estimate': None}


def test_service_rejects_incomplete_scenarios(scenario_inputs):
    service, _ = _service()
    del scenario_inputs['bull']
    del scenario_inputs['base']['pe_high']

    result = service.calculate_financial_projections('AAPL', scenario_inputs, revenue=1, net_income=1, current_stock_price=1)

    assert result['success'] is False
    assert result['error'] == 'Validation failed'
    assert "Scenario base: Missing required field 'pe_high'" in result['details']
    assert 'Scenario bull: Missing scenario' in result['details']


def test_saved_projection_reads_dcf_store():
    dcf_service = MagicMock()
    dcf_service.get.return_value = DCFData(
        symbol='AAPL',
        stock_price=Decimal('250'),
        revenue=Decimal('40195000000'),
        net_income=Decimal('7873970000'),
        shares_outstanding=962000000,
        revenue_growth={'bear': Decimal('0.05'), 'base': Decimal('0.1'), 'bull': Decimal('0.15')},
        net_income_growth={'bear': Decimal('0.1'), 'base': Decimal('0.18'), 'bull': Decimal('0.25')},
        pe_low={'bear': Decimal('15'), 'base': Decimal('20'), 'bull': Decimal('25')},
        pe_high={'bear': Decimal('18'), 'base': Decimal('24'), 'bull': Decimal('30')},
        timestamp='2020-01-01T00:00:00Z',
        id=7,
    )
    service, _ = _service(dcf_service=dcf_service)

    result = service.calculate_saved_projections(symbol='aapl')

    dcf_service.get.assert_called_once_with(symbol='aapl', id=None)
    assert result['dcf_id'] == 7
    assert result['stale'] is True
    assert result['projections']['base']['share_price_high'][4] == pytest.approx(380.8535, abs=1e-3)


def test_saved_projection_propagates_not_found():
    dcf_service = MagicMock()
    dcf_service.get.side_effect = RecordNotFoundError('No DCF data found')
    service, _ = _service(dcf_service=dcf_service)

    with pytest.raises(RecordNotFoundError):
        service.calculate_saved_projections(symbol='NONE')


def test_default_inputs_center_on_fetched_figures():
    service, _ = _service({
        'price': 100.0, 'revenue': 5e9, 'net_income': 1e9, 'eps': 4.0,
        'shares_outstanding': 250_000_000, 'current_pe': 25.0, 'earnings_growth': 0.1,
    })

    defaults = service.get_default_inputs('nvda')

    assert defaults['symbol'] == 'NVDA'
    assert defaults['revenueGrowth'] == {'bear': 0.03, 'base': 0.04, 'bull': 0.12}
    assert defaults['netIncomeGrowth'] == pytest.approx({'bear': 0.075, 'base': 0.1, 'bull': 0.125})
    assert defaults['peLow'] == pytest.approx({'bear': 22.5, 'base': 25.0, 'bull': 27.5})
    assert defaults['peHigh'] == pytest.approx({'bear': 20.0, 'base': 25.0, 'bull': 30.0})


def test_default_inputs_none_without_base_data():
    service, _ = _service(None)

    assert service.get_default_inputs('NONE') is None
