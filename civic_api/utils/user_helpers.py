"""Shared user-related helper functions."""


def get_display_name(user):
    """
    Get the best display name for a user.
    
    Priority:
    1. full_name (if available)
    2. local part of the email (if available)
    3. 'Someone' (fallback)
    """
    if not user:
        return 'Someone'
    if user.full_name:
        return user.full_name
    if user.email:
        return user.email.split('@')[0]
    return 'Someone'
