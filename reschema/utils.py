"""
Naming helpers.
"""

import re

# Words of a type or property name, splitting camelCase boundaries
_WORD_PATTERN = re.compile(r"[a-z]+|[A-Z][a-z]*|[0-9]+")


def snake_to_pascal_case(text: str) -> str:
    """Convert a type or property name to PascalCase.

    Separators (``_``, ``-``, ``/``, ``.`` and spaces) split words, as do
    camelCase boundaries.

    Examples:
        "first_name" -> "FirstName"
        "geo/point" -> "GeoPoint"
        "common.postalAddress" -> "CommonPostalAddress"
        "ABC" -> "Abc"

    Args:
        text: The name to convert

    Returns:
        PascalCase string
    """
    if not text:
        return ""
    words = _WORD_PATTERN.findall(re.sub(r"[_\-/.\s]+", " ", text))
    return "".join(word.capitalize() for word in words)
