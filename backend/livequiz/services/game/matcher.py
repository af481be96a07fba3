from typing import Any


def normalize(text: Any) -> str:
    """Trim surrounding whitespace and case-fold. Non-strings normalize to ''."""
    if not isinstance(text, str):
        return ''
    return text.strip().casefold()


def is_correct(submitted: Any, expected: Any) -> bool:
    """Exact match after normalization.

    A blank or missing expected answer never matches, so a malformed
    question is simply unwinnable.
    """
    answer = normalize(expected)
    if not answer:
        return False
    return normalize(submitted) == answer
