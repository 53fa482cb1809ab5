"""Data validation utilities for DCF payloads."""

import logging
from decimal import Decimal
from typing import Any, List, Dict, Optional
from constants.constants import SCENARIOS
from ..models.dcf_models import DCFData
import util

logger = logging.getLogger(__name__)

SCENARIO_FIELDS = {
    'revenueGrowth': 'revenue_growth',
    'netIncomeGrowth': 'net_income_growth',
    'peLow': 'pe_low',
    'peHigh': 'pe_high',
}


class DataValidator:
    """Validates and converts DCF payloads coming from the dashboard."""

    @staticmethod
    def is_valid_data(data: Any) -> bool:
        """
        Check if data is present and not empty.

        Args:
            data: Data to validate

        Returns:
            True if data is valid, False otherwise
        """
        if data is None:
            return False
        if isinstance(data, (list, dict, str)):
            return len(data) > 0
        return True

    @staticmethod
    def validate_dcf_payload(payload: Optional[Dict[str, Any]]) -> List[str]:
        """
        Validate a camelCase DCF payload.

        Missing numbers are not errors (they default on save); values that
        are present must be numeric.

        Args:
            payload: DCF payload dictionary

        Returns:
            List of error messages, empty when valid
        """
        if not DataValidator.is_valid_data(payload):
            return ['DCF payload is empty']

        errors = []
        if not payload.get('symbol'):
            errors.append('Symbol is required')

        for field in ['stockPrice', 'revenue', 'netIncome', 'sharesOutstanding', 'currentEps']:
            value = payload.get(field)
            if value is not None and util.to_decimal(value) is None:
                errors.append(f"{field} must be a number")

        for field in SCENARIO_FIELDS:
            values = payload.get(field)
            if values is None:
                continue
            if not isinstance(values, dict):
                errors.append(f"{field} must be an object with bear, base and bull")
                continue
            for scenario in SCENARIOS:
                value = values.get(scenario)
                if value is not None and util.to_decimal(value) is None:
                    errors.append(f"{field}.{scenario} must be a number")

        if errors:
            logger.warning(f"Invalid DCF payload for {payload.get('symbol')}: {errors}")
        return errors

    @staticmethod
    def convert_to_dcf_data(payload: Dict[str, Any]) -> DCFData:
        """
        Convert a camelCase DCF payload to a DCFData object.

        Args:
            payload: Validated DCF payload dictionary

        Returns:
            DCFData object
        """
        scenario_values = {}
        for field, attribute in SCENARIO_FIELDS.items():
            values = payload.get(field) or {}
            scenario_values[attribute] = {
                scenario: DataValidator._safe_decimal(values.get(scenario)) or Decimal('0')
                for scenario in SCENARIOS
            }

        shares = DataValidator._safe_decimal(payload.get('sharesOutstanding'))

        return DCFData(
            symbol=(payload.get('symbol') or '').upper(),
            stock_price=DataValidator._safe_decimal(payload.get('stockPrice')) or Decimal('0'),
            revenue=DataValidator._safe_decimal(payload.get('revenue')) or Decimal('0'),
            net_income=DataValidator._safe_decimal(payload.get('netIncome')) or Decimal('0'),
            shares_outstanding=int(shares) if shares is not None else None,
            current_eps=DataValidator._safe_decimal(payload.get('currentEps')),
            timestamp=payload.get('timestamp'),
            **scenario_values
        )

    @staticmethod
    def _safe_decimal(value: Any) -> Optional[Decimal]:
        """Safely convert value to Decimal."""
        return util.to_decimal(value)
