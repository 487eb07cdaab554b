"""
Phrase Radix Tree
=================
A prefix tree whose edge labels are sequences of whole words. It stores
phrase -> replacement pairs and answers "what is the longest stored phrase
at the start of this word sequence?".

Storing "one cat" -> "un gato" and "one cat and two" -> "un gato y dos"
produces::

    root
    - [one cat]  (end, "un gato")
      - [and two]  (end, "un gato y dos")

Children are keyed by the first word of their label, and no two children of
a node share that first word. Insertion keeps this true by splitting labels
when a new phrase diverges from, or ends inside, an existing label.

The tree has no internal locking. Mutate and query one instance from a
single thread, or guard it externally.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, NamedTuple, Optional, Sequence, Tuple


@dataclass
class RadixNode:
    """A node in the phrase tree.

    ``phrase`` is the edge label from the parent, not the full phrase from
    the root. ``replacement`` is set exactly when ``is_end_of_word`` is.
    """
    phrase: List[str]
    replacement: Optional[str] = None
    is_end_of_word: bool = False
    children: Dict[str, 'RadixNode'] = field(default_factory=dict)

    def mark_end(self, replacement: str) -> None:
        self.is_end_of_word = True
        self.replacement = replacement

    def clear_end(self) -> None:
        self.is_end_of_word = False
        self.replacement = None


class Match(NamedTuple):
    """Longest-match result: how many words matched and their replacement."""
    length: int
    replacement: str


def common_prefix_length(a: Sequence[str], b: Sequence[str]) -> int:
    """
    Count the words ``a`` and ``b`` share from their beginning.

    >>> common_prefix_length(["one", "cat", "is"], ["one", "cat", "was"])
    2
    >>> common_prefix_length(["big", "cat"], ["small", "cat"])
    0
    """
    i = 0
    limit = min(len(a), len(b))
    while i < limit and a[i] == b[i]:
        i += 1
    return i


def tokenize_phrase(phrase: str) -> List[str]:
    """Split a phrase into words on any run of whitespace."""
    return phrase.split()


class PhraseRadixTree:
    """Word-level radix tree for phrase replacement lookups."""

    def __init__(self):
        self.root = RadixNode(phrase=[])
        self._size = 0

    def __len__(self) -> int:
        """Number of stored phrases."""
        return self._size

    def __contains__(self, phrase: str) -> bool:
        words = tokenize_phrase(phrase)
        if not words:
            return False
        match = self.find_longest_match(words, 0)
        return match is not None and match.length == len(words)

    # -- insertion ----------------------------------------------------------

    def insert(self, phrase: str, replacement: str) -> None:
        """
        Store ``phrase`` with ``replacement``, splitting nodes as needed.

        Re-inserting an existing phrase overwrites its replacement.

        Raises:
            ValueError: ``phrase`` has no words.
            TypeError: ``replacement`` is not a string.
        """
        if not isinstance(replacement, str):
            raise TypeError(f"replacement must be a str, got {type(replacement).__name__}")
        words = tokenize_phrase(phrase)
        if not words:
            raise ValueError("cannot insert an empty phrase")

        node = self.root
        remaining = words
        while remaining:
            # Only the child keyed by the first word can share a prefix.
            child = node.children.get(remaining[0])
            if child is None:
                node.children[remaining[0]] = RadixNode(
                    phrase=list(remaining),
                    replacement=replacement,
                    is_end_of_word=True,
                )
                self._size += 1
                return

            shared = common_prefix_length(child.phrase, remaining)

            if shared == len(child.phrase):
                # Whole label matched, keep walking.
                node = child
                remaining = remaining[shared:]
                continue

            if shared == len(remaining):
                # New phrase ends inside the label.
                self._split(child, shared)
                child.mark_end(replacement)
                self._size += 1
                return

            # Both sides continue past the shared prefix.
            self._split(child, shared)
            suffix = RadixNode(
                phrase=list(remaining[shared:]),
                replacement=replacement,
                is_end_of_word=True,
            )
            child.children[suffix.phrase[0]] = suffix
            self._size += 1
            return

        # Phrase ends exactly on an existing node.
        if not node.is_end_of_word:
            self._size += 1
        node.mark_end(replacement)

    @staticmethod
    def _split(node: RadixNode, at: int) -> None:
        """
        Cut ``node``'s label after ``at`` words.

        The tail moves into a new child that takes over the node's children
        and end marker; ``node`` keeps the head and that single child.
        """
        tail = RadixNode(
            phrase=node.phrase[at:],
            replacement=node.replacement,
            is_end_of_word=node.is_end_of_word,
            children=node.children,
        )
        node.phrase = node.phrase[:at]
        node.children = {tail.phrase[0]: tail}
        node.clear_end()

    # -- lookup -------------------------------------------------------------

    def find_longest_match(self, words: Sequence[str], start_index: int = 0) -> Optional[Match]:
        """
        Find the longest stored phrase that begins at ``words[start_index]``.

        Shorter stored phrases along the way remain candidates, so with
        "one cat" and "one cat and two" stored, ``["one", "cat", "is"]``
        still matches "one cat".

        Args:
            words: Tokenized input
            start_index: Position in ``words`` to start matching from

        Returns:
            ``Match(length, replacement)``, or None when nothing matches
        """
        if start_index < 0:
            raise ValueError("start_index must not be negative")

        best: Optional[Match] = None
        node = self.root
        index = start_index
        matched = 0

        while index < len(words):
            child = node.children.get(words[index])
            if child is None:
                break
            end = index + len(child.phrase)
            if end > len(words) or list(words[index:end]) != child.phrase:
                break
            index = end
            matched += len(child.phrase)
            node = child
            if node.is_end_of_word:
                best = Match(matched, node.replacement)

        return best

    def lookup(self, phrase: str) -> Optional[Match]:
        """Longest match for a whitespace-separated phrase."""
        return self.find_longest_match(tokenize_phrase(phrase), 0)

    # -- traversal ----------------------------------------------------------

    def walk(self) -> Iterator[Tuple[int, RadixNode]]:
        """Pre-order ``(depth, node)`` pairs, root first at depth 0."""
        stack = [(0, self.root)]
        while stack:
            depth, node = stack.pop()
            yield depth, node
            for child in reversed(list(node.children.values())):
                stack.append((depth + 1, child))

    def items(self) -> Iterator[Tuple[str, str]]:
        """Every stored ``(phrase, replacement)`` pair in pre-order."""
        stack = [([], self.root)]
        while stack:
            prefix, node = stack.pop()
            words = prefix + node.phrase
            if node.is_end_of_word:
                yield ' '.join(words), node.replacement
            for child in reversed(list(node.children.values())):
                stack.append((words, child))

    def dump(self) -> str:
        lines = []
        for depth, node in self.walk():
            indent = '  ' * depth
            lines.append(f"{indent}phrase: [{' '.join(node.phrase)}]")
            if node.is_end_of_word:
                lines.append(f"{indent}replacement: {node.replacement}")
        return '\n'.join(lines)

    def print_tree(self) -> None:
        print(self.dump())

    @classmethod
    def from_dict(cls, entries: Dict[str, str]) -> 'PhraseRadixTree':
        """Build a tree from a phrase -> replacement mapping, skipping blank phrases."""
        tree = cls()
        for phrase, replacement in entries.items():
            if tokenize_phrase(phrase):
                tree.insert(phrase, replacement)
        return tree
