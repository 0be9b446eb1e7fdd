"""Global enums — values must match the remote API's JSON strings exactly."""

from enum import Enum


class TransactionType(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    TRANSFER = "transfer"
    COMMISSION = "commission"
    REFUND = "refund"
    FEE = "fee"
    LOAN_REPAYMENT = "loan_repayment"
    LOAN_DISBURSEMENT = "loan_disbursement"
    UNKNOWN = "unknown"


# Purely type-driven; the sign of the raw amount is never consulted.
DEBIT_TYPES: frozenset[TransactionType] = frozenset({
    TransactionType.WITHDRAWAL,
    TransactionType.TRANSFER,
    TransactionType.FEE,
    TransactionType.LOAN_REPAYMENT,
})


class Direction(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"


class TransactionStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


class DirectionFilter(str, Enum):
    ALL = "all"
    IN = "in"
    OUT = "out"


class TransactionCategory(str, Enum):
    """Semantic buckets for the category filter."""
    TOPUP = "topup"
    COMMISSION_PAYMENT = "commission_payment"
    COMMISSION_EARNED = "commission_earned"
    WITHDRAWAL = "withdrawal"
    FEE = "fee"
    LOAN = "loan"
    REFUND = "refund"
    TRANSFER = "transfer"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"


TERMINAL_PAYMENT_STATUSES: frozenset[PaymentStatus] = frozenset({
    PaymentStatus.COMPLETED,
    PaymentStatus.FAILED,
    PaymentStatus.CANCELLED,
})
