"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidApplicantError(DomainException):
    """Applicant data violates an input invariant"""

    pass


class AIServiceError(DomainException):
    """AI assessment service failed or returned an unusable payload"""

    pass


class OrchestrationError(DomainException):
    """Assessment record could not be assembled"""

    pass


class InvalidDecisionError(DomainException):
    """Final decision cannot be applied to the record"""

    pass
