"""
Validation Utilities
====================
Functions for validating input data.
"""
from typing import Dict, Tuple, Optional
from comment_translator.config import SUPPORTED_LANGUAGES


def validate_language(lang_code: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a target language code.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not lang_code:
        return False, "Language code is required"

    if lang_code not in SUPPORTED_LANGUAGES:
        supported = ', '.join(SUPPORTED_LANGUAGES.keys())
        return False, f"Unsupported language: {lang_code}. Supported: {supported}"

    return True, None


def validate_dictionary_entries(entries) -> Tuple[bool, Optional[str]]:
    """
    Validate a phrase -> replacement mapping submitted for merging.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(entries, dict) or not entries:
        return False, "entries must be a non-empty object"

    for phrase, replacement in entries.items():
        if not isinstance(phrase, str) or not phrase.split():
            return False, f"Invalid phrase: {phrase!r}"
        if not isinstance(replacement, str) or not replacement.strip():
            return False, f"Invalid replacement for {phrase!r}"

    return True, None


def normalize_entries(entries: Dict[str, str]) -> Dict[str, str]:
    """Collapse internal whitespace so keys match tokenized phrases."""
    return {' '.join(phrase.split()): replacement.strip() for phrase, replacement in entries.items()}
