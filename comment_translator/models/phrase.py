"""
Phrase Data Models
==================
Transient structures for one document-update cycle.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from comment_translator.config.constants import SampleState


@dataclass(frozen=True)
class TextRange:
    """Half-open character range ``[start, end)`` in the document."""
    start: int
    end: int

    def to_dict(self) -> dict:
        return {'start': self.start, 'end': self.end}


@dataclass(frozen=True)
class Word:
    """A whitespace-delimited token with its document offsets."""
    text: str
    start: int
    end: int


@dataclass
class Comment:
    """The body of one comment, split into positioned words."""
    words: List[Word]
    block: bool = False

    @property
    def text(self) -> str:
        return ' '.join(w.text for w in self.words)


@dataclass
class SampledPhrase:
    """A run of contiguous words drawn from one comment."""
    words: List[Word]
    state: SampleState = SampleState.SAMPLED
    replacement: Optional[str] = None
    matched_length: int = 0

    @property
    def tokens(self) -> List[str]:
        return [w.text for w in self.words]

    @property
    def text(self) -> str:
        return ' '.join(self.tokens)

    def matched_range(self) -> TextRange:
        """Range covering only the words the replacement applies to."""
        length = self.matched_length or len(self.words)
        return TextRange(self.words[0].start, self.words[length - 1].end)


@dataclass
class Decoration:
    """An inline annotation for the rendering collaborator."""
    range: TextRange
    phrase: str
    replacement: str
    from_cache: bool = False

    @property
    def label(self) -> str:
        return f"[{self.phrase}] {self.replacement}"

    def to_dict(self) -> dict:
        return {
            'range': self.range.to_dict(),
            'phrase': self.phrase,
            'replacement': self.replacement,
            'from_cache': self.from_cache,
            'label': self.label,
        }


@dataclass
class CycleResult:
    """Outcome of one document-update cycle."""
    language_id: str
    target_lang: str
    decorations: List[Decoration] = field(default_factory=list)
    samples: List[SampledPhrase] = field(default_factory=list)
    warning: Optional[str] = None

    def count(self, state: SampleState) -> int:
        return sum(1 for s in self.samples if s.state == state)

    @property
    def cache_hits(self) -> int:
        return self.count(SampleState.CACHE_HIT)

    @property
    def cache_misses(self) -> int:
        return len(self.samples) - self.cache_hits

    def to_dict(self) -> dict:
        result = {
            'language_id': self.language_id,
            'target_lang': self.target_lang,
            'decorations': [d.to_dict() for d in self.decorations],
            'cache_hits': self.cache_hits,
            'resolved': self.count(SampleState.RESOLVED),
            'discarded': self.count(SampleState.DISCARDED),
        }
        if self.warning:
            result['warning'] = self.warning
        return result
