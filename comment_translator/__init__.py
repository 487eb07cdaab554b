"""
Comment Translator - learn a language from your code comments
=============================================================
Samples short phrases from source-code comments, translates them through a
chat-completions endpoint and remembers every translation in a per-language
dictionary, so repeated phrases resolve from a word-level radix tree instead
of another request.
"""

__version__ = "0.1.0"

from comment_translator.app import create_app, run_server

__all__ = ["create_app", "run_server", "__version__"]
