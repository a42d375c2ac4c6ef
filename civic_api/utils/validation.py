"""Report form validation and input sanitisation."""

import re
from math import isfinite

from civic_api.constants import PRIORITIES, validate_category
from civic_api.utils.geo import InvalidCoordinateError, parse_coordinate

TITLE_MIN, TITLE_MAX = 5, 100
DESCRIPTION_MIN, DESCRIPTION_MAX = 10, 500

_ANGLE_BRACKETS = re.compile(r'[<>]')


def sanitize_text(value):
    """Trim and strip angle brackets from free text."""
    if value is None:
        return None
    return _ANGLE_BRACKETS.sub('', str(value).strip())


def _check_length(value, field, min_len, max_len):
    if not isinstance(value, str):
        return f'{field} is required'
    text = sanitize_text(value)
    if not text:
        return f'{field} is required'
    if len(text) < min_len:
        return f'{field} must be at least {min_len} characters'
    if len(text) > max_len:
        return f'{field} cannot exceed {max_len} characters'
    return None


def validate_report(data):
    """Validate an issue report payload. Returns an error message or None."""
    if not isinstance(data, dict):
        return 'Request body must be a JSON object'
    
    error = _check_length(data.get('title'), 'Title', TITLE_MIN, TITLE_MAX)
    if error:
        return error
    
    error = _check_length(data.get('description'), 'Description', DESCRIPTION_MIN, DESCRIPTION_MAX)
    if error:
        return error
    
    category = data.get('category')
    if not category or not isinstance(category, str):
        return 'Please select a category'
    _, error = validate_category(category)
    if error:
        return error
    
    priority = data.get('priority')
    if priority is not None and str(priority).lower() not in PRIORITIES:
        return f"Invalid priority. Must be one of: {', '.join(PRIORITIES)}"
    
    try:
        parse_coordinate(data.get('latitude'), data.get('longitude'))
    except InvalidCoordinateError as e:
        return f'Location is required: {e}'
    
    gps_accuracy = data.get('gps_accuracy')
    if gps_accuracy is not None:
        if isinstance(gps_accuracy, bool) or not isinstance(gps_accuracy, (int, float)):
            return 'gps_accuracy must be a number of metres'
        if not isfinite(gps_accuracy) or gps_accuracy < 0:
            return 'gps_accuracy must be a non-negative finite number'
    
    return None
