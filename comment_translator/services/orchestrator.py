"""
Comment Translation Orchestrator
================================
Runs one document-update cycle:

1. hydrate a fresh phrase tree from the persisted dictionary
2. sample a short phrase from every comment
3. resolve samples the tree already knows
4. send the rest to the translator in one ordered batch
5. fold the results into the tree and the dictionary

The tree lives only for the cycle; the dictionary is the durable store.
"""
import sqlite3
from typing import Dict, List, Optional

from comment_translator.config import config
from comment_translator.config.constants import SampleState
from comment_translator.database.repositories import DictionaryRepository, get_dictionary_repository
from comment_translator.models.phrase import CycleResult, Decoration, SampledPhrase
from comment_translator.models.radix_tree import Match, PhraseRadixTree
from comment_translator.models.schemas import MetricsData
from comment_translator.services.batch_translator import BatchTranslator
from comment_translator.services.comment_extractor import extract_comments, get_comment_pattern
from comment_translator.services.sampler import PhraseSampler
from comment_translator.utils.logging import get_logger, debug_print


class CommentTranslator:
    """Bridges the phrase tree to the dictionary and the translator."""

    def __init__(
        self,
        dictionary: DictionaryRepository = None,
        translator: BatchTranslator = None,
        sampler: PhraseSampler = None,
        phrase_word_count: int = None,
        source_lang: str = None
    ):
        self.dictionary = dictionary or get_dictionary_repository()
        self.translator = translator or BatchTranslator()
        self.sampler = sampler or PhraseSampler()
        self.phrase_word_count = (
            phrase_word_count if phrase_word_count is not None else config.translation.phrase_word_count
        )
        self.source_lang = source_lang or config.translation.source_language
        self.metrics = MetricsData()
        self.logger = get_logger().translation_logger

    def build_tree(self, target_lang: str) -> PhraseRadixTree:
        """Hydrate a new tree from the stored dictionary for ``target_lang``."""
        return PhraseRadixTree.from_dict(self.dictionary.get(target_lang))

    def lookup(self, phrase: str, target_lang: str) -> Optional[Match]:
        """Longest stored match for ``phrase`` without translating anything."""
        return self.build_tree(target_lang).lookup(phrase)

    def process_document(
        self,
        text: str,
        language_id: str,
        target_lang: str = None,
        base_offset: int = 0,
        source_lang: str = None
    ) -> CycleResult:
        """
        Run one cycle over ``text``.

        Args:
            text: Document text (or its visible slice)
            language_id: Programming language id, selects the comment syntax
            target_lang: Language to translate into
            base_offset: Document offset of ``text[0]``
            source_lang: Language the comments are written in

        Returns:
            CycleResult with decorations for every resolved phrase. An
            unsupported language yields a result with ``warning`` set.
            If the dictionary cannot be read the cycle runs with an empty tree.
        """
        target_lang = target_lang or config.translation.default_target_language
        source_lang = source_lang or self.source_lang
        result = CycleResult(language_id=language_id, target_lang=target_lang)

        pattern = get_comment_pattern(language_id)
        if pattern is None:
            result.warning = f"No comment syntax available for the programming language {language_id}."
            self.logger.warning(result.warning)
            return result

        try:
            tree = self.build_tree(target_lang)
        except sqlite3.Error as e:
            self.logger.error(f"Failed to load {target_lang} dictionary: {e}")
            tree = PhraseRadixTree()
        queued: List[SampledPhrase] = []

        for comment in extract_comments(text, pattern, base_offset):
            words = self.sampler.sample(comment.words, self.phrase_word_count)
            if not words:
                continue
            sample = SampledPhrase(words=words)
            result.samples.append(sample)

            match = tree.find_longest_match(sample.tokens, 0)
            if match is not None:
                self._resolve(sample, match, SampleState.CACHE_HIT, result)
            else:
                sample.state = SampleState.QUEUED
                queued.append(sample)

        debug_print(
            f"[CYCLE] {language_id}->{target_lang}: {len(result.samples)} samples, "
            f"{result.cache_hits} hits, {len(queued)} queued",
            'INFO', 'CYCLE'
        )

        if queued:
            self._translate_queued(queued, tree, source_lang, target_lang, result)

        self.metrics.record(
            cycles=1,
            cache_hits=result.cache_hits,
            cache_misses=result.cache_misses,
        )
        return result

    def _translate_queued(
        self,
        queued: List[SampledPhrase],
        tree: PhraseRadixTree,
        source_lang: str,
        target_lang: str,
        result: CycleResult
    ) -> None:
        phrases = [sample.text for sample in queued]
        self.metrics.record(batches_sent=1)

        try:
            translations = self.translator.translate(phrases, source_lang, target_lang)
        except Exception as e:
            self.logger.error(f"Batch translator raised: {e}")
            translations = None

        if translations is None or len(translations) != len(queued):
            self.logger.warning(f"Discarding batch of {len(queued)} phrases for {target_lang}")
            for sample in queued:
                sample.state = SampleState.DISCARDED
            self.metrics.record(batches_discarded=1)
            return

        new_entries: Dict[str, str] = {}
        for sample, translation in zip(queued, translations):
            tree.insert(sample.text, translation)
            new_entries[sample.text] = translation
            self._resolve(sample, Match(len(sample.words), translation), SampleState.RESOLVED, result)

        self.metrics.record(phrases_translated=len(new_entries))

        try:
            self.dictionary.merge(target_lang, new_entries)
        except sqlite3.Error as e:
            self.logger.error(f"Failed to persist {len(new_entries)} translations: {e}")

    @staticmethod
    def _resolve(sample: SampledPhrase, match: Match, state: SampleState, result: CycleResult) -> None:
        sample.state = state
        sample.replacement = match.replacement
        sample.matched_length = match.length
        matched_words = sample.words[:match.length]
        result.decorations.append(Decoration(
            range=sample.matched_range(),
            phrase=' '.join(w.text for w in matched_words),
            replacement=match.replacement,
            from_cache=state == SampleState.CACHE_HIT,
        ))


_translator_instance: Optional[CommentTranslator] = None


def get_comment_translator() -> CommentTranslator:
    """Get or create the global orchestrator instance."""
    global _translator_instance
    if _translator_instance is None:
        _translator_instance = CommentTranslator()
    return _translator_instance
