"""
Request/Response Schemas
========================
Validation schemas for API requests and responses.
"""
import threading
from dataclasses import dataclass, field
from typing import Optional, List

from comment_translator.config.constants import SUPPORTED_LANGUAGES


@dataclass
class AnnotateRequest:
    """Request schema for the annotate endpoint."""
    text: str
    language_id: str
    target_lang: str
    source_lang: str = "en"
    base_offset: int = 0

    @classmethod
    def from_json(cls, data: dict, default_target: str, default_source: str) -> 'AnnotateRequest':
        return cls(
            text=data.get('text', ''),
            language_id=data.get('language_id', ''),
            target_lang=data.get('target_lang') or default_target,
            source_lang=data.get('source_lang') or default_source,
            base_offset=data.get('base_offset', 0),
        )

    def validate(self) -> List[str]:
        """Validate the request and return list of errors."""
        errors = []
        if not isinstance(self.text, str):
            errors.append("text must be a string")
        if not self.language_id:
            errors.append("language_id is required")
        if self.target_lang not in SUPPORTED_LANGUAGES:
            errors.append(f"Unsupported target language: {self.target_lang}")
        if not isinstance(self.base_offset, int) or self.base_offset < 0:
            errors.append("base_offset must be a non-negative integer")
        return errors


@dataclass
class ModelInfo:
    """A model advertised by the chat endpoint."""
    name: str
    owned_by: Optional[str] = None

    def to_dict(self) -> dict:
        return {'name': self.name, 'owned_by': self.owned_by}


@dataclass
class HealthStatus:
    """Health check response."""
    status: str
    translator_connected: bool
    dictionary_connected: bool
    version: str

    def to_dict(self) -> dict:
        return {
            'status': self.status,
            'translator_connected': self.translator_connected,
            'dictionary_connected': self.dictionary_connected,
            'version': self.version,
        }


@dataclass
class MetricsData:
    """Counters across all cycles served by this process."""
    cycles: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    batches_sent: int = 0
    batches_discarded: int = 0
    phrases_translated: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, **increments: int) -> None:
        with self._lock:
            for name, amount in increments.items():
                setattr(self, name, getattr(self, name) + amount)

    def to_dict(self) -> dict:
        with self._lock:
            lookups = self.cache_hits + self.cache_misses
            return {
                'cycles': self.cycles,
                'cache_hits': self.cache_hits,
                'cache_misses': self.cache_misses,
                'batches_sent': self.batches_sent,
                'batches_discarded': self.batches_discarded,
                'phrases_translated': self.phrases_translated,
                'hit_rate': (self.cache_hits / lookups * 100) if lookups > 0 else 0,
            }
