"""
Batch Translator
================
Translates an ordered list of phrases in one chat request.
"""
import json
import time
from typing import Dict, List, Optional

from comment_translator.config import config
from comment_translator.services.llm_client import ChatClient, get_chat_client
from comment_translator.utils.logging import get_logger, debug_print
from comment_translator.utils.text_processing import parse_translation_list

SYSTEM_PROMPT = (
    "You are a professional translator. Provide accurate translations. "
    "You receive a JSON array of words or short phrases taken from source-code "
    "comments. Translate each element independently, keeping multi-word phrases "
    "together. Return ONLY a JSON array of strings with exactly the same number "
    "of elements, in the same order, with no explanations."
)


class BatchTranslator:
    """
    Translates phrase batches while preserving positional alignment.

    ``translate`` returns a list the same length as its input, or None. A
    retry always re-sends the entire batch so positions never drift.
    """

    def __init__(
        self,
        client: ChatClient = None,
        model: str = None,
        max_retries: int = None,
        retry_delay: float = None
    ):
        self.client = client or get_chat_client()
        self.model = model or config.translator.model
        self.max_retries = max_retries if max_retries is not None else config.translation.max_retries
        self.retry_delay = retry_delay if retry_delay is not None else config.translation.retry_delay
        self.logger = get_logger().translation_logger

    def build_messages(self, phrases: List[str], source_lang: str, target_lang: str) -> List[Dict[str, str]]:
        return [
            {'role': 'system', 'content': SYSTEM_PROMPT},
            {
                'role': 'user',
                'content': (
                    f"Translate the following from {source_lang} to {target_lang}:\n"
                    f"{json.dumps(phrases, ensure_ascii=False)}"
                ),
            },
        ]

    def translate(self, phrases: List[str], source_lang: str, target_lang: str) -> Optional[List[str]]:
        """
        Translate ``phrases`` from ``source_lang`` to ``target_lang``.

        Returns:
            Translations aligned with ``phrases``, or None if every attempt
            failed or came back malformed
        """
        if not phrases:
            return []

        messages = self.build_messages(phrases, source_lang, target_lang)

        for attempt in range(self.max_retries):
            debug_print(
                f"[BATCH] Attempt {attempt + 1}/{self.max_retries}: {len(phrases)} phrases {source_lang}->{target_lang}",
                'INFO', 'LLM'
            )
            response = self.client.chat(messages, model=self.model)

            if response.success:
                translations = parse_translation_list(response.text, len(phrases))
                if translations is not None:
                    return translations
                self.logger.warning(f"Malformed batch response: {response.text[:120]!r}")
            else:
                self.logger.error(f"Batch translation failed: {response.error}")

            if attempt < self.max_retries - 1:
                time.sleep(self.retry_delay * (attempt + 1))

        return None
