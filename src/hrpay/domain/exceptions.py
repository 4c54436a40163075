class HRPayError(Exception):
    code = "HRPayError"
    retryable = False

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(HRPayError):
    """Requested resource does not exist."""
    code = "NotFound"


class ConflictError(HRPayError):
    """Operation conflicts with the current stored state."""
    code = "Conflict"


class ValidationError(HRPayError):
    """Missing or malformed input (e.g. empty nssf_number)."""
    code = "ValidationError"


class PeriodNotFound(NotFoundError):
    code = "PeriodNotFound"


class EmployeeNotFound(NotFoundError):
    code = "EmployeeNotFound"


class ContributionNotFound(NotFoundError):
    code = "ContributionNotFound"


class InvalidSalary(ValidationError):
    code = "InvalidSalary"


class InvalidPeriodState(ConflictError):
    code = "InvalidPeriodState"


class NoItemsToProcess(ConflictError):
    code = "NoItemsToProcess"


class InvalidStatusTransition(ConflictError):
    code = "InvalidStatusTransition"


class ContributionLocked(ConflictError):
    """Contribution has been paid and can no longer be edited."""
    code = "ContributionLocked"


class ConcurrentModification(ConflictError):
    """Stored status changed between read and write; re-fetch and retry."""
    code = "ConcurrentModification"
    retryable = True


class DuplicateItem(ConflictError):
    """A payroll item already exists for (period_id, employee_id).

    Raised by the store and absorbed by the generator as a no-op.
    """
    code = "DuplicateItem"
