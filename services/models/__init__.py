"""Models for projection and persistence services."""

from .projection_models import (
    CompanyFinancials,
    ScenarioAssumptions,
    ProjectionSeries,
    ProjectionResult
)
from .dcf_models import DCFData

__all__ = [
    'CompanyFinancials',
    'ScenarioAssumptions',
    'ProjectionSeries',
    'ProjectionResult',
    'DCFData'
]
