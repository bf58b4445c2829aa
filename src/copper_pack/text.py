"""Small string helpers for user-facing messages and lenient comparisons."""

import re

_VOWELS = "aeiou"


def human_readable_list(items: list[str], conjunction: str = "or") -> str:
    """
    Join items for a sentence: "A", "A or B", "A, B, or C".
    """
    items = [str(i) for i in items]
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f" {conjunction} ".join(items)
    return ", ".join(items[:-1]) + f", {conjunction} " + items[-1]


def add_indefinite_article(word: str) -> str:
    """Prefix "a" or "an" based on the first letter."""
    article = "an" if word and word[0].lower() in _VOWELS else "a"
    return f"{article} {word}"


def initial_capital(value: str) -> str:
    """Uppercase the first letter and lowercase the rest ("lOST" -> "Lost")."""
    value = value.strip()
    if not value:
        return value
    return value[0].upper() + value[1:].lower()


def strip_and_lowercase(value: str) -> str:
    """Comparison key ignoring whitespace, underscores, and case."""
    return re.sub(r"[\s_]", "", value or "").lower()
