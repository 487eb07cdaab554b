"""
Phrase Sampler
==============
Picks a random run of contiguous words from a comment.
"""
import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar('T')


class PhraseSampler:
    """Samples contiguous word runs using an injectable random source.

    ``rng`` only needs a ``randint(a, b)`` method, so tests can pass a stub
    that returns fixed indexes.
    """

    def __init__(self, rng: random.Random = None):
        self.rng = rng or random.Random()

    def sample(self, words: Sequence[T], count: int) -> Optional[List[T]]:
        """
        Up to ``count`` words starting at a uniformly random index.

        Runs that start near the end are shorter than ``count``. Returns None
        when ``count`` is below 1 or there are no words.
        """
        if count < 1 or not words:
            return None

        start = self.rng.randint(0, len(words) - 1)
        return list(words[start:start + count])
