"""
Constants and Enums for Comment Translator
"""
from enum import Enum
from typing import Dict

# Target languages offered for translation, with their display names
SUPPORTED_LANGUAGES = {
    'en': 'English',
    'es': 'Spanish',
    'fr': 'French',
    'de': 'German',
    'it': 'Italian',
    'pt': 'Portuguese',
    'ru': 'Russian',
    'zh': 'Chinese',
    'ja': 'Japanese',
    'ko': 'Korean',
}


class SampleState(str, Enum):
    """Lifecycle of one sampled phrase within a cycle."""
    SAMPLED = "sampled"
    CACHE_HIT = "cache_hit"
    QUEUED = "queued"
    RESOLVED = "resolved"
    DISCARDED = "discarded"


# Group 1 captures a single-line comment body, group 2 a block comment body.
_C_STYLE = r'//(.*)|/\*([\s\S]*?)\*/'
_HASH_STYLE = r'#(.*)'

COMMENT_PATTERNS: Dict[str, str] = {
    'typescript': _C_STYLE,
    'typescriptreact': _C_STYLE,
    'javascript': _C_STYLE,
    'javascriptreact': _C_STYLE,
    'java': _C_STYLE,
    'c': _C_STYLE,
    'cpp': _C_STYLE,
    'csharp': _C_STYLE,
    'go': _C_STYLE,
    'rust': _C_STYLE,
    'swift': _C_STYLE,
    'kotlin': _C_STYLE,
    'python': r'#(.*)|"""([\s\S]*?)"""',
    'ruby': _HASH_STYLE,
    'shellscript': _HASH_STYLE,
    'yaml': _HASH_STYLE,
}
