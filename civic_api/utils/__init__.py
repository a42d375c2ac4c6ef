"""Shared utilities for the civic issue backend.

This package contains reusable utilities that are shared across
multiple route files to reduce code duplication.
"""

from civic_api.utils.auth import (
    token_required,
    role_required,
)
from civic_api.utils.user_helpers import get_display_name

__all__ = [
    'token_required',
    'role_required',
    'get_display_name',
]
