"""
Comment Translator - Services
"""
from comment_translator.services.llm_client import ChatClient
from comment_translator.services.batch_translator import BatchTranslator
from comment_translator.services.sampler import PhraseSampler
from comment_translator.services.orchestrator import CommentTranslator

__all__ = [
    "ChatClient",
    "BatchTranslator",
    "PhraseSampler",
    "CommentTranslator"
]
