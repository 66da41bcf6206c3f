# school/exceptions.py
"""
Custom exception classes for the school ledger and report-card services.
The pure computations never raise these for well-typed input; the service
layer does.
"""

import logging

logger = logging.getLogger(__name__)


class SchoolManagementException(Exception):
    """Base exception for the school services"""

    def __init__(self, message=None, details=None, user=None):
        self.message = message or "An error occurred in the school management system"
        self.details = details
        self.user = user
        super().__init__(self.message)

        logger.error(
            f"{self.__class__.__name__}: {self.message} - "
            f"User: {getattr(user, 'username', user or 'Anonymous')}, "
            f"Details: {details}"
        )


class DataValidationError(SchoolManagementException):
    """Raised when input cannot be normalized into a usable shape"""

    def __init__(self, message="Data validation failed", validation_errors=None, **kwargs):
        self.validation_errors = validation_errors or {}
        super().__init__(message, **kwargs)


class FeeManagementException(SchoolManagementException):
    """Raised when fee settings or payment operations fail"""

    def __init__(self, message="Fee management operation failed", **kwargs):
        super().__init__(message, **kwargs)


class GradingSystemException(SchoolManagementException):
    """Raised when report-card operations fail"""

    def __init__(self, message="Grading system operation failed", **kwargs):
        super().__init__(message, **kwargs)


class BulletinVerificationError(GradingSystemException):
    """Raised when a verification code matches no published report card"""

    def __init__(self, message="Report card not found", verification_code=None, **kwargs):
        self.verification_code = verification_code
        super().__init__(message, **kwargs)

        logger.warning(
            f"BulletinVerificationError: {message} - "
            f"Code: {verification_code}"
        )
