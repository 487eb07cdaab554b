"""
Comment Extraction
==================
Finds comment bodies in source text and splits them into positioned words.
"""
import re
from functools import lru_cache
from typing import List, Optional, Pattern

from comment_translator.config.constants import COMMENT_PATTERNS
from comment_translator.models.phrase import Comment, Word

_WORD = re.compile(r'\S+')
_LEADING_STAR = re.compile(r'^\s*\*')


@lru_cache(maxsize=None)
def get_comment_pattern(language_id: str) -> Optional[Pattern]:
    """
    Compiled comment pattern for a programming language id.

    Group 1 captures single-line bodies and group 2, when present, block
    bodies. Returns None when the language is not supported.
    """
    source = COMMENT_PATTERNS.get(language_id)
    if source is None:
        return None
    return re.compile(source)


def supported_comment_languages() -> List[str]:
    return sorted(COMMENT_PATTERNS)


def _words_in(segment: str, offset: int) -> List[Word]:
    return [
        Word(m.group(), offset + m.start(), offset + m.end())
        for m in _WORD.finditer(segment)
    ]


def _block_words(body: str, offset: int) -> List[Word]:
    """Words of a block comment, ignoring the ``*`` gutter on each line."""
    words = []
    position = offset
    for line in body.split('\n'):
        gutter = _LEADING_STAR.match(line)
        skip = gutter.end() if gutter else 0
        words.extend(_words_in(line[skip:], position + skip))
        position += len(line) + 1
    return words


def extract_comments(text: str, pattern: Pattern, base_offset: int = 0) -> List[Comment]:
    """
    Extract every non-empty comment in ``text``.

    Args:
        text: Source text, typically the visible part of a document
        pattern: Result of ``get_comment_pattern``
        base_offset: Document offset of ``text[0]``; word offsets include it

    Returns:
        Comments in document order
    """
    comments = []
    has_block_group = pattern.groups >= 2

    for match in pattern.finditer(text):
        if match.group(1) is not None:
            words = _words_in(match.group(1), base_offset + match.start(1))
            block = False
        elif has_block_group and match.group(2) is not None:
            words = _block_words(match.group(2), base_offset + match.start(2))
            block = True
        else:
            continue

        if words:
            comments.append(Comment(words=words, block=block))

    return comments
