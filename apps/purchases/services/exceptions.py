"""
Domain-specific exceptions for purchases app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class PurchasesServiceError(Exception):
    """Base exception for all purchases service errors."""
    pass


class PurchaseNotFoundError(PurchasesServiceError):
    """Raised when a purchase does not exist or is inaccessible."""
    pass


class MissingProofError(PurchasesServiceError):
    """Raised when a purchase is filed without proof photos."""
    pass


class DuplicateSubmissionError(PurchasesServiceError):
    """Raised when a submission key was already recorded."""

    def __init__(self, purchase):
        self.purchase = purchase
        super().__init__(
            f"This purchase was already recorded (submission {purchase.submission_key})"
        )
