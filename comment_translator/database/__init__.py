"""
Database Module
===============
SQLite connection manager and the persisted phrase dictionary.
"""
from comment_translator.database.connection import Database, get_database
from comment_translator.database.repositories import (
    DictionaryRepository,
    get_dictionary_repository
)

__all__ = [
    'Database',
    'get_database',
    'DictionaryRepository',
    'get_dictionary_repository'
]
