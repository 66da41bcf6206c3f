# school/utils/financial.py
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
import logging

from school.constants.financial import INSTALLMENT_FIELDS, ZERO

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


class FinancialCalculator:
    """Money helpers for tuition amounts"""

    DECIMAL_PLACES = 2
    ROUNDING = ROUND_HALF_UP
    CURRENCY_SYMBOLS = ('CDF', 'FC', 'USD', '$')

    @staticmethod
    def safe_decimal(value, default=ZERO):
        """
        Convert any value to a 2-place Decimal.
        Returns default on None or anything unparsable.
        """
        if value is None or isinstance(value, bool):
            return default

        try:
            if isinstance(value, Decimal):
                result = value
            elif isinstance(value, (int, float)):
                result = Decimal(str(value))
            elif isinstance(value, str):
                cleaned = value.strip().replace(',', '').replace(' ', '')
                for symbol in FinancialCalculator.CURRENCY_SYMBOLS:
                    cleaned = cleaned.replace(symbol, '')
                if not cleaned:
                    return default
                result = Decimal(cleaned)
            else:
                return default
            if not result.is_finite():
                return default
            return result.quantize(CENT, rounding=FinancialCalculator.ROUNDING)
        except (InvalidOperation, ValueError, TypeError) as e:
            logger.warning(f"Failed to convert value to Decimal: {value}, error: {e}")
            return default

    @staticmethod
    def round_money(value):
        return Decimal(value).quantize(CENT, rounding=FinancialCalculator.ROUNDING)

    @staticmethod
    def derive_installments(field, value):
        """
        Recompute the three installment amounts after one of them changed.

        Returns a dict with annual_amount, quarterly_amount and monthly_amount.
        """
        if field not in INSTALLMENT_FIELDS:
            raise ValueError(f"Unknown installment field: {field}")

        amount = FinancialCalculator.safe_decimal(value)
        round_money = FinancialCalculator.round_money

        if field == 'annual_amount':
            return {
                'annual_amount': amount,
                'quarterly_amount': round_money(amount / 4),
                'monthly_amount': round_money(amount / 12),
            }
        if field == 'quarterly_amount':
            return {
                'annual_amount': round_money(amount * 4),
                'quarterly_amount': amount,
                'monthly_amount': round_money(amount / 3),
            }
        return {
            'annual_amount': round_money(amount * 12),
            'quarterly_amount': round_money(amount * 3),
            'monthly_amount': amount,
        }

    @staticmethod
    def format_amount(amount, currency=''):
        """Format an amount for display, e.g. '12,500.00 CDF'"""
        formatted = f"{FinancialCalculator.safe_decimal(amount):,.2f}"
        return f"{formatted} {currency}".strip()
