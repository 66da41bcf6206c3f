# school/services/payment_allocator.py
"""
Monthly tuition ledger.

Spreads the total of a student's recorded payments over the ten school
months in order, classifies each month against today's date and rolls the
result up into term and year figures. Nothing here touches the database;
PaymentStatusService persists what it needs from the returned ledger.
"""
from datetime import datetime
import logging

from django.utils import timezone

from school.constants.financial import (
    MONTH_STATUS_CURRENT,
    MONTH_STATUS_DISPLAY,
    MONTH_STATUS_FUTURE,
    MONTH_STATUS_PAID,
    MONTH_STATUS_PARTIAL,
    MONTH_STATUS_UNPAID,
    SCHOOL_MONTHS,
    SCHOOL_MONTH_COUNT,
    SCHOOL_TERMS,
    ZERO,
)
from school.utils.financial import FinancialCalculator
from school.utils.validation import validate_due_dates

logger = logging.getLogger(__name__)


def _payment_amount(payment):
    if isinstance(payment, dict):
        return FinancialCalculator.safe_decimal(payment.get('amount'))
    return FinancialCalculator.safe_decimal(getattr(payment, 'amount', None))


class AllocationContext:
    """
    Fixed inputs of one allocation: the monthly amount, the due-date
    schedule, the reference day and the term layout.

    initialize() validates the schedule once; the context can then be reused
    for any number of allocations without carrying results between them.
    Without an explicit reference day, resolve_today() reads the local date
    again at every allocation.
    """

    def __init__(self, monthly_amount, due_dates, today=None, terms=SCHOOL_TERMS):
        self.monthly_amount = FinancialCalculator.safe_decimal(monthly_amount)
        self.raw_due_dates = due_dates
        self.reference_day = today
        self.today = None
        self.terms = terms
        self.due_dates = []
        self.initialized = False

    def initialize(self):
        if self.initialized:
            return self

        self.due_dates = validate_due_dates(self.raw_due_dates)

        covered = sorted(index for _, months in self.terms for index in months)
        if covered != list(range(SCHOOL_MONTH_COUNT)):
            raise ValueError("Terms must partition the school months exactly once")

        self.initialized = True
        return self

    def resolve_today(self):
        today = self.reference_day or timezone.localdate()
        if isinstance(today, datetime):
            today = today.date()
        self.today = today
        return today

    def is_current_month(self, due_date):
        return (due_date.year, due_date.month) == (self.today.year, self.today.month)

    def classify(self, due_date, paid_amount):
        """Status of one month; the month containing today is always current"""
        if self.is_current_month(due_date):
            return MONTH_STATUS_CURRENT
        if due_date < self.today:
            if paid_amount >= self.monthly_amount:
                return MONTH_STATUS_PAID
            if paid_amount > 0:
                return MONTH_STATUS_PARTIAL
            return MONTH_STATUS_UNPAID
        return MONTH_STATUS_FUTURE


class PaymentAllocator:
    """Greedy left-to-right allocation of payments over school months"""

    def __init__(self, context):
        self.context = context

    def allocate(self, payments):
        """
        Build the ledger for the given payments, taken in the order supplied.

        Returns: {
            'months': [...10 month dicts...],
            'terms': [...term dicts...],
            'months_due_until_current': int,
            'remaining_until_current': Decimal,
            'total_paid': Decimal,
            'total_due': Decimal,
            'remaining_total': Decimal,
            'current_month_index': int or None,
        }
        """
        context = self.context.initialize()
        context.resolve_today()
        monthly_amount = context.monthly_amount

        total_paid = sum((_payment_amount(payment) for payment in payments or []), ZERO)
        remaining_paid = total_paid

        months = []
        current_month_index = None
        past_months = 0

        for index, (name, due_date) in enumerate(zip(SCHOOL_MONTHS, context.due_dates)):
            paid_amount = max(min(monthly_amount, remaining_paid), ZERO)
            remaining_paid -= paid_amount

            status = context.classify(due_date, paid_amount)
            if status == MONTH_STATUS_CURRENT:
                current_month_index = index
            elif status != MONTH_STATUS_FUTURE:
                past_months += 1

            months.append({
                'index': index,
                'month': name,
                'due_date': due_date,
                'status': status,
                'status_display': MONTH_STATUS_DISPLAY[status],
                'paid_amount': paid_amount,
                'remaining_amount': max(monthly_amount - paid_amount, ZERO),
            })

        if current_month_index is not None:
            months_due_until_current = current_month_index + 1
        else:
            months_due_until_current = past_months

        terms = []
        for term_name, indexes in context.terms:
            total_due = monthly_amount * len(indexes)
            term_paid = sum((months[i]['paid_amount'] for i in indexes), ZERO)
            terms.append({
                'name': term_name,
                'months': [SCHOOL_MONTHS[i] for i in indexes],
                'total_due': total_due,
                'total_paid': term_paid,
                'total_remaining': total_due - term_paid,
            })

        total_due = monthly_amount * SCHOOL_MONTH_COUNT
        logger.debug(
            f"Allocated {total_paid} against {monthly_amount}/month, "
            f"{months_due_until_current} months due so far"
        )

        return {
            'months': months,
            'terms': terms,
            'months_due_until_current': months_due_until_current,
            'remaining_until_current': max(
                monthly_amount * months_due_until_current - total_paid, ZERO
            ),
            'total_paid': total_paid,
            'total_due': total_due,
            'remaining_total': max(total_due - total_paid, ZERO),
            'current_month_index': current_month_index,
        }


def allocate_payments(monthly_amount, payments, due_dates, today=None):
    """Allocate payments over the school year; see PaymentAllocator.allocate"""
    context = AllocationContext(monthly_amount, due_dates, today=today)
    return PaymentAllocator(context).allocate(payments)
