# school/constants/financial.py
"""
Financial constants for tuition tracking.
Kept apart from the models so services can import them without the ORM.
"""

from decimal import Decimal

# ========== SCHOOL MONTHS ==========
# A school year is ten months, September through June, in this fixed order.
SCHOOL_MONTHS = (
    'September', 'October', 'November', 'December',
    'January', 'February', 'March', 'April', 'May', 'June',
)

SCHOOL_MONTH_COUNT = len(SCHOOL_MONTHS)

# Calendar month number (1-12) of each school month
SCHOOL_MONTH_NUMBERS = (9, 10, 11, 12, 1, 2, 3, 4, 5, 6)

# ========== TERMS (TRIMESTERS) ==========
# Consecutive, non-overlapping groups of school month indexes (3 + 3 + 4).
SCHOOL_TERMS = (
    ('First Term', (0, 1, 2)),
    ('Second Term', (3, 4, 5)),
    ('Third Term', (6, 7, 8, 9)),
)

# ========== MONTH STATUS ==========
MONTH_STATUS_PAID = 'paid'
MONTH_STATUS_PARTIAL = 'partial'
MONTH_STATUS_UNPAID = 'unpaid'
MONTH_STATUS_CURRENT = 'current'
MONTH_STATUS_FUTURE = 'future'

MONTH_STATUS_CHOICES = [
    (MONTH_STATUS_PAID, 'Paid'),
    (MONTH_STATUS_PARTIAL, 'Partially Paid'),
    (MONTH_STATUS_UNPAID, 'Unpaid'),
    (MONTH_STATUS_CURRENT, 'Current Month'),
    (MONTH_STATUS_FUTURE, 'Not Yet Due'),
]

MONTH_STATUS_DISPLAY = dict(MONTH_STATUS_CHOICES)

# ========== PAYMENT METHODS ==========
PAYMENT_METHOD_CHOICES = [
    ('cash', 'Cash'),
    ('mobile_money', 'Mobile Money'),
    ('bank_transfer', 'Bank Transfer'),
    ('cheque', 'Cheque'),
    ('other', 'Other'),
]

PAYMENT_METHOD_DISPLAY = dict(PAYMENT_METHOD_CHOICES)

# ========== INSTALLMENT FIELDS ==========
# Editing any of these recomputes the other two.
INSTALLMENT_FIELDS = ('annual_amount', 'quarterly_amount', 'monthly_amount')

# ========== FINANCIAL SETTINGS ==========
DEFAULT_CURRENCY = 'CDF'
DEFAULT_DUE_DAY = 15
PAYMENT_REFERENCE_PREFIX = 'Ref'

ZERO = Decimal('0.00')

FINANCIAL_VALIDATION_RULES = {
    'max_amount_per_transaction': Decimal('100000000.00'),
    'min_amount_per_transaction': Decimal('0.01'),
    'min_due_day': 1,
    'max_due_day': 28,
}
