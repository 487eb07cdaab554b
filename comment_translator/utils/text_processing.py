"""
Text Processing Utilities
=========================
Cleaning and structural parsing of chat-model responses.
"""
import re
import json
from typing import List, Optional

from comment_translator.utils.logging import debug_print

_REASONING_TAGS = ('think', 'thinking', 'reasoning', 'reflection')

_UNWANTED_PREFIXES = [
    r'^\s*Here is the translation:?\s*\n*',
    r"^\s*Here's the translation:?\s*\n*",
    r'^\s*Here are the translations:?\s*\n*',
    r'^\s*Translations?:?\s*\n*',
    r'^\s*Traducci[oó]n(?:es)?:?\s*\n*',
]


def clean_translation_response(response: str) -> str:
    """
    Strip reasoning blocks, chatty prefixes and markdown fences from a
    model response.

    Args:
        response: Raw message content from the chat endpoint

    Returns:
        The cleaned payload, possibly empty
    """
    if not response:
        return ""

    text = response.strip()

    for tag in _REASONING_TAGS:
        text = re.sub(rf'<{tag}>.*?</{tag}>', '', text, flags=re.DOTALL | re.IGNORECASE)
        # Unclosed tag when the model was cut off
        text = re.sub(rf'<{tag}>.*$', '', text, flags=re.DOTALL | re.IGNORECASE)
    text = text.strip()

    for pattern in _UNWANTED_PREFIXES:
        text = re.sub(pattern, '', text, flags=re.IGNORECASE)

    fenced = re.search(r'```[a-zA-Z]*\s*\n?(.*?)\n?\s*```', text, flags=re.DOTALL)
    if fenced:
        text = fenced.group(1)

    return text.strip()


def parse_translation_list(response: str, expected_count: int) -> Optional[List[str]]:
    """
    Parse a model response into exactly ``expected_count`` translations.

    Accepts a JSON array of strings, or an object holding one under a
    ``translations`` key. Anything else (wrong length, non-string or blank
    items, invalid JSON) yields None so the caller can drop the whole batch.
    """
    payload = clean_translation_response(response)
    if not payload:
        debug_print("[PARSE] Empty translation payload", 'WARNING', 'LLM')
        return None

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        debug_print(f"[PARSE] Invalid JSON: {e}", 'WARNING', 'LLM')
        return None

    if isinstance(data, dict):
        data = data.get('translations')

    if not isinstance(data, list):
        debug_print("[PARSE] Response is not a list", 'WARNING', 'LLM')
        return None

    if len(data) != expected_count:
        debug_print(
            f"[PARSE] Length mismatch: expected {expected_count}, got {len(data)}",
            'WARNING', 'LLM'
        )
        return None

    if not all(isinstance(item, str) and item.strip() for item in data):
        debug_print("[PARSE] Non-string or blank item in response", 'WARNING', 'LLM')
        return None

    return [item.strip() for item in data]
