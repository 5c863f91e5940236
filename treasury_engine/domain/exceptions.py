"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidAmountError(DomainException):
    """Negative or non-integer cent amount, or a rate outside 0-100"""

    pass


class UnsupportedFrequencyError(DomainException):
    """Recurrence frequency outside the known set"""

    def __init__(self, frequency: object):
        super().__init__(f"Unsupported frequency: {frequency!r}")
        self.frequency = frequency


class UnsupportedPaymentPlanTypeError(DomainException):
    """Sales payment plan type outside the known set"""

    def __init__(self, payment_plan_type: object):
        super().__init__(f"Unsupported payment plan type: {payment_plan_type!r}")
        self.payment_plan_type = payment_plan_type


class UnreachableTargetError(DomainException):
    """No gross amount can produce the requested available amount"""

    pass


class InvalidDateRangeError(DomainException):
    """Query window ends before it starts"""

    pass
