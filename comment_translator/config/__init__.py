"""
Comment Translator - Configuration Module
"""
from comment_translator.config.settings import Config, config
from comment_translator.config.constants import (
    COMMENT_PATTERNS,
    SUPPORTED_LANGUAGES,
    SampleState
)

__all__ = [
    "Config",
    "config",
    "COMMENT_PATTERNS",
    "SUPPORTED_LANGUAGES",
    "SampleState"
]
