"""Shared fixtures; the environment is pinned before any project module is imported."""

import os

os.environ.setdefault('ENVIRONMENT', 'local')
os.environ.setdefault('SESSION_SECRET', 'test-session-secret')
os.environ.setdefault('DASHBOARD_USERNAME', 'analyst')
os.environ.setdefault('FINNHUB_API_KEY', 'test-finnhub-key')

from decimal import Decimal

import pytest

from services.models import CompanyFinancials, ScenarioAssumptions


class FakeDatabase:
    """Records every statement and replays queued result sets in order."""

    def __init__(self, results=None):
        self.results = list(results or [])
        self.calls = []

    def queue(self, *results):
        self.results.extend(results)

    def query(self, sql, params=None):
        self.calls.append((' '.join(sql.split()), params))
        if not self.results:
            return []
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    @property
    def last_sql(self):
        return self.calls[-1][0]

    @property
    def last_params(self):
        return self.calls[-1][1]


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def reference_financials():
    return CompanyFinancials(
        revenue=Decimal('40195000000'),
        net_income=Decimal('7873970000'),
        stock_price=Decimal('250.00'),
        shares_outstanding=962_000_000,
    )


@pytest.fixture
def reference_scenarios():
    return {
        'bear': ScenarioAssumptions(Decimal('0.05'), Decimal('0.10'), Decimal('15.0'), Decimal('18.0')),
        'base': ScenarioAssumptions(Decimal('0.10'), Decimal('0.18'), Decimal('20.0'), Decimal('24.0')),
        'bull': ScenarioAssumptions(Decimal('0.15'), Decimal('0.25'), Decimal('25.0'), Decimal('30.0')),
    }


@pytest.fixture
def scenario_inputs():
    return {
        'bear': {'revenue_growth': 0.05, 'net_income_growth': 0.10, 'pe_low': 15, 'pe_high': 18},
        'base': {'revenue_growth': 0.10, 'net_income_growth': 0.18, 'pe_low': 20, 'pe_high': 24},
        'bull': {'revenue_growth': 0.15, 'net_income_growth': 0.25, 'pe_low': 25, 'pe_high': 30},
    }
