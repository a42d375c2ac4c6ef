"""Issue category constants: the one place the backend defines them.

Must stay in sync with the category picker on the citizen report screen.
"""

# Valid category keys
VALID_CATEGORIES = {
    'road-issues',
    'water-supply',
    'electricity',
    'waste-management',
    'public-safety',
    'street-lighting',
    'drainage',
    'parks-recreation',
    'other',
}

# Display label -> key mapping
# The mobile app submits these labels verbatim
CATEGORY_LABELS = {
    'road issues': 'road-issues',
    'water supply': 'water-supply',
    'electricity': 'electricity',
    'waste management': 'waste-management',
    'public safety': 'public-safety',
    'street lighting': 'street-lighting',
    'drainage': 'drainage',
    'parks & recreation': 'parks-recreation',
    'other': 'other',
}


def normalize_category(category: str) -> str:
    """Normalize a category key.

    - Lowercases and strips whitespace
    - Converts display labels to their keys
    - Returns the key as-is if it's already valid or unknown
    """
    key = category.lower().strip()
    return CATEGORY_LABELS.get(key, key)


def validate_category(category: str) -> tuple[str, str | None]:
    """Validate and normalize a category.

    Returns:
        (normalized_key, error_message)
        error_message is None when valid.
    """
    normalized = normalize_category(category)
    if normalized not in VALID_CATEGORIES:
        return normalized, (
            f"Invalid category '{category}'. "
            f"Valid categories: {', '.join(sorted(VALID_CATEGORIES))}"
        )
    return normalized, None
