"""
Comment Translator - Utility Functions
"""
from comment_translator.utils.text_processing import (
    clean_translation_response,
    parse_translation_list
)
from comment_translator.utils.validators import (
    validate_language,
    validate_dictionary_entries,
    normalize_entries
)
from comment_translator.utils.logging import (
    LogBuffer,
    AppLogger,
    get_logger,
    debug_print
)
from comment_translator.utils.debounce import Debouncer

__all__ = [
    "clean_translation_response",
    "parse_translation_list",
    "validate_language",
    "validate_dictionary_entries",
    "normalize_entries",
    "LogBuffer",
    "AppLogger",
    "get_logger",
    "debug_print",
    "Debouncer"
]
