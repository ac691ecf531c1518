"""
Purchases app services layer.

Recording a purchase is the one place the rotation advances.
"""

from .exceptions import (
    PurchasesServiceError,
    PurchaseNotFoundError,
    MissingProofError,
    DuplicateSubmissionError,
)

from .purchase_recording import (
    record_purchase,
)

from .queries import (
    get_visible_purchases,
    get_purchase_for_user,
)


__all__ = [
    # Exceptions
    'PurchasesServiceError',
    'PurchaseNotFoundError',
    'MissingProofError',
    'DuplicateSubmissionError',

    # Recording
    'record_purchase',

    # Queries
    'get_visible_purchases',
    'get_purchase_for_user',
]
