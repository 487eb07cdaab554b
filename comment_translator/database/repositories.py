"""
Database Repositories
=====================
Persisted phrase dictionary, one logical entry per target language.
"""
import sqlite3
import threading
from typing import Optional, List, Dict, Any

from comment_translator.config import config
from comment_translator.database.connection import Database, get_database
from comment_translator.utils.logging import get_logger, debug_print


class DictionaryRepository:
    """
    Phrase -> replacement mappings keyed by target language.

    ``merge`` is additive: keys already stored for the language and absent
    from the update are left alone. Merges are serialized by a process-wide
    lock and each runs in a single sqlite transaction, so two cycles
    finishing close together never lose each other's entries.
    """

    _write_lock = threading.Lock()

    def __init__(self, database: Database = None):
        self.db = database or get_database()
        self.db.initialize()
        self.logger = get_logger().db_logger

    def get(self, language: str) -> Dict[str, str]:
        """All stored translations for ``language``."""
        if not config.dictionary.enabled:
            return {}

        rows = self.db.query(
            "SELECT phrase, replacement FROM phrase_dictionary WHERE language = ?",
            (language,)
        )
        entries = {row['phrase']: row['replacement'] for row in rows}
        debug_print(f"[DICT LOAD] {language}: {len(entries)} phrases", 'DEBUG', 'DICT')
        return entries

    def merge(self, language: str, entries: Dict[str, str]) -> int:
        """
        Upsert ``entries`` for ``language``.

        Returns:
            Number of entries written
        """
        if not config.dictionary.enabled:
            debug_print("[DICT DISABLED] Skipping merge", 'DEBUG', 'DICT')
            return 0
        if not entries:
            return 0

        rows = [(language, phrase, replacement) for phrase, replacement in entries.items()]
        with self._write_lock:
            with self.db.transaction() as conn:
                conn.executemany("""
                    INSERT INTO phrase_dictionary (language, phrase, replacement)
                    VALUES (?, ?, ?)
                    ON CONFLICT(language, phrase) DO UPDATE SET
                        replacement = excluded.replacement,
                        updated_at = CURRENT_TIMESTAMP
                """, rows)

        self.logger.info(f"Merged {len(rows)} phrases into '{language}' dictionary")
        return len(rows)

    def clear(self, language: str = None) -> int:
        """Delete one language's entries, or everything when ``language`` is None."""
        with self._write_lock:
            with self.db.transaction() as conn:
                if language:
                    cursor = conn.execute(
                        "DELETE FROM phrase_dictionary WHERE language = ?",
                        (language,)
                    )
                else:
                    cursor = conn.execute("DELETE FROM phrase_dictionary")
                deleted = cursor.rowcount

        self.logger.info(f"Cleared {deleted} phrases ({language or 'all languages'})")
        return deleted

    def languages(self) -> List[str]:
        rows = self.db.query(
            "SELECT DISTINCT language FROM phrase_dictionary ORDER BY language"
        )
        return [row['language'] for row in rows]

    def get_stats(self) -> Dict[str, Any]:
        """Phrase counts per language."""
        try:
            rows = self.db.query("""
                SELECT language, COUNT(*) as count
                FROM phrase_dictionary
                GROUP BY language
            """)
        except sqlite3.Error:
            return {'total_entries': 0, 'by_language': {}}

        by_language = {row['language']: row['count'] for row in rows}
        return {
            'total_entries': sum(by_language.values()),
            'by_language': by_language,
        }


_dictionary_repo: Optional[DictionaryRepository] = None


def get_dictionary_repository() -> DictionaryRepository:
    """Get dictionary repository singleton."""
    global _dictionary_repo
    if _dictionary_repo is None:
        _dictionary_repo = DictionaryRepository()
    return _dictionary_repo
