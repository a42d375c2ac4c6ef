"""Shared constants for the application."""

from civic_api.constants.categories import (
    VALID_CATEGORIES,
    CATEGORY_LABELS,
    normalize_category,
    validate_category,
)
from civic_api.constants.issues import (
    PRIORITIES,
    DEFAULT_PRIORITY,
    STATUS_PENDING,
    STATUS_IN_PROGRESS,
    STATUS_COMPLETED,
    STATUSES,
    ROLE_CITIZEN,
    ROLE_WORKER,
    ROLE_ADMIN,
    WORKER_AVAILABLE,
    WORKER_BUSY,
)

__all__ = [
    'VALID_CATEGORIES',
    'CATEGORY_LABELS',
    'normalize_category',
    'validate_category',
    'PRIORITIES',
    'DEFAULT_PRIORITY',
    'STATUS_PENDING',
    'STATUS_IN_PROGRESS',
    'STATUS_COMPLETED',
    'STATUSES',
    'ROLE_CITIZEN',
    'ROLE_WORKER',
    'ROLE_ADMIN',
    'WORKER_AVAILABLE',
    'WORKER_BUSY',
]
