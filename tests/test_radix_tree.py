"""
Unit Tests for the Phrase Radix Tree
====================================
Insertion, node splitting, longest-match search and traversal.
"""
import pytest
import sys
import os

os.environ.setdefault('VERBOSE_DEBUG', 'false')

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from comment_translator.models.radix_tree import (
    PhraseRadixTree,
    RadixNode,
    common_prefix_length
)


def assert_invariants(tree: PhraseRadixTree):
    """Structural checks that must hold after any sequence of inserts."""
    root = tree.root
    assert root.phrase == []
    assert root.is_end_of_word is False
    assert root.replacement is None

    for depth, node in tree.walk():
        if node is not root:
            assert node.phrase, "non-root label must not be empty"
        assert (node.replacement is not None) == node.is_end_of_word
        first_words = [child.phrase[0] for child in node.children.values()]
        assert len(first_words) == len(set(first_words)), "children share a first word"
        for key, child in node.children.items():
            assert key == child.phrase[0]


@pytest.fixture
def cat_tree():
    tree = PhraseRadixTree()
    tree.insert("one cat", "un gato")
    tree.insert("one cat and two", "un gato y dos")
    return tree


class TestCommonPrefix:
    """Test word-level common prefix length."""

    def test_two_shared_words(self):
        assert common_prefix_length(["one", "cat", "is"], ["one", "cat", "was"]) == 2

    def test_one_shared_word(self):
        assert common_prefix_length(["one", "cat"], ["one", "dog"]) == 1

    def test_shorter_second(self):
        assert common_prefix_length(["one", "cat", "is"], ["one", "cat"]) == 2

    def test_nothing_shared(self):
        assert common_prefix_length(["big", "cat"], ["small", "cat"]) == 0


class TestInsert:
    """Test insertion and node splitting."""

    def test_first_insert_creates_single_child(self):
        tree = PhraseRadixTree()
        tree.insert("one cat", "un gato")

        child = tree.root.children["one"]
        assert child.phrase == ["one", "cat"]
        assert child.is_end_of_word
        assert child.replacement == "un gato"
        assert len(tree) == 1

    def test_extension_reuses_existing_node(self, cat_tree):
        node = cat_tree.root.children["one"]
        assert node.phrase == ["one", "cat"]
        assert node.replacement == "un gato"
        assert list(node.children) == ["and"]
        assert node.children["and"].phrase == ["and", "two"]
        assert node.children["and"].replacement == "un gato y dos"
        assert_invariants(cat_tree)

    def test_shorter_phrase_splits_existing_label(self):
        tree = PhraseRadixTree()
        tree.insert("one cat and two", "un gato y dos")
        tree.insert("one cat", "un gato")

        head = tree.root.children["one"]
        assert head.phrase == ["one", "cat"]
        assert head.is_end_of_word
        assert head.replacement == "un gato"

        tail = head.children["and"]
        assert tail.phrase == ["and", "two"]
        assert tail.replacement == "un gato y dos"
        assert len(tree) == 2
        assert_invariants(tree)

    def test_partial_overlap_three_way_split(self):
        tree = PhraseRadixTree()
        tree.insert("big cat", "gato grande")
        tree.insert("big dog", "perro grande")

        shared = tree.root.children["big"]
        assert shared.phrase == ["big"]
        assert not shared.is_end_of_word
        assert shared.replacement is None
        assert set(shared.children) == {"cat", "dog"}
        assert shared.children["cat"].replacement == "gato grande"
        assert shared.children["dog"].replacement == "perro grande"

        assert tree.find_longest_match(["big", "cat"], 0) == (2, "gato grande")
        assert tree.find_longest_match(["big", "dog"], 0) == (2, "perro grande")
        assert tree.find_longest_match(["big"], 0) is None
        assert_invariants(tree)

    def test_split_keeps_grandchildren(self):
        tree = PhraseRadixTree()
        tree.insert("one cat", "un gato")
        tree.insert("one cat and two", "un gato y dos")
        tree.insert("one dog", "un perro")

        one = tree.root.children["one"]
        assert one.phrase == ["one"]
        cat = one.children["cat"]
        assert cat.phrase == ["cat"]
        assert cat.replacement == "un gato"
        assert cat.children["and"].replacement == "un gato y dos"
        assert tree.find_longest_match(["one", "cat", "and", "two"], 0) == (4, "un gato y dos")
        assert_invariants(tree)

    def test_marking_intermediate_node(self):
        tree = PhraseRadixTree()
        tree.insert("big cat", "gato grande")
        tree.insert("big dog", "perro grande")
        tree.insert("big", "grande")

        assert tree.root.children["big"].replacement == "grande"
        assert tree.find_longest_match(["big", "fish"], 0) == (1, "grande")
        assert len(tree) == 3
        assert_invariants(tree)

    def test_reinsert_overwrites_replacement(self):
        tree = PhraseRadixTree()
        tree.insert("one cat", "un gato")
        tree.insert("one cat", "una gata")

        ends = [node for _, node in tree.walk() if node.is_end_of_word]
        assert len(ends) == 1
        assert ends[0].replacement == "una gata"
        assert len(tree) == 1

    def test_whitespace_is_normalized(self):
        tree = PhraseRadixTree()
        tree.insert("  one \t cat\n", "un gato")
        assert tree.root.children["one"].phrase == ["one", "cat"]

    def test_empty_phrase_rejected(self):
        tree = PhraseRadixTree()
        with pytest.raises(ValueError):
            tree.insert("", "nada")
        with pytest.raises(ValueError):
            tree.insert("   \n\t", "nada")
        assert len(tree) == 0

    def test_non_string_replacement_rejected(self):
        tree = PhraseRadixTree()
        with pytest.raises(TypeError):
            tree.insert("one cat", None)

    def test_many_inserts_keep_invariants(self):
        phrases = [
            "the quick brown fox", "the quick", "the lazy dog", "the",
            "quick brown", "the quick brown", "a dog", "a dog barks loudly",
            "a cat", "the lazy cat sleeps", "the lazy",
        ]
        tree = PhraseRadixTree()
        for i, phrase in enumerate(phrases):
            tree.insert(phrase, f"r{i}")
            assert_invariants(tree)

        for i, phrase in enumerate(phrases):
            words = phrase.split()
            assert tree.find_longest_match(words, 0) == (len(words), f"r{i}")
        assert len(tree) == len(phrases)


class TestFindLongestMatch:
    """Test longest-prefix matching."""

    def test_longest_match_wins(self, cat_tree):
        words = ["one", "cat", "and", "two", "please"]
        assert cat_tree.find_longest_match(words, 0) == (4, "un gato y dos")

    def test_shorter_match_available(self, cat_tree):
        assert cat_tree.find_longest_match(["one", "cat", "is", "here"], 0) == (2, "un gato")

    def test_partial_label_does_not_match_deeper(self, cat_tree):
        # "and" alone is only half of the ["and", "two"] label
        assert cat_tree.find_longest_match(["one", "cat", "and"], 0) == (2, "un gato")

    def test_no_match(self, cat_tree):
        assert cat_tree.find_longest_match(["totally", "different", "words"], 0) is None

    def test_start_index(self, cat_tree):
        words = ["I", "have", "one", "cat", "and", "two"]
        assert cat_tree.find_longest_match(words, 0) is None
        assert cat_tree.find_longest_match(words, 2) == (4, "un gato y dos")

    def test_start_past_end(self, cat_tree):
        assert cat_tree.find_longest_match(["one", "cat"], 2) is None
        assert cat_tree.find_longest_match([], 0) is None

    def test_negative_start_rejected(self, cat_tree):
        with pytest.raises(ValueError):
            cat_tree.find_longest_match(["one"], -1)

    def test_input_shorter_than_label(self, cat_tree):
        assert cat_tree.find_longest_match(["one"], 0) is None

    def test_match_fields(self, cat_tree):
        match = cat_tree.find_longest_match(["one", "cat"], 0)
        assert match.length == 2
        assert match.replacement == "un gato"

    def test_lookup_and_contains(self, cat_tree):
        assert cat_tree.lookup("one cat and two dogs") == (4, "un gato y dos")
        assert "one cat" in cat_tree
        assert "one cat and" not in cat_tree
        assert "" not in cat_tree


class TestTraversal:
    """Test diagnostic traversal helpers."""

    def test_walk_is_preorder(self, cat_tree):
        labels = [(depth, node.phrase) for depth, node in cat_tree.walk()]
        assert labels == [
            (0, []),
            (1, ["one", "cat"]),
            (2, ["and", "two"]),
        ]

    def test_items_returns_full_phrases(self):
        tree = PhraseRadixTree()
        tree.insert("big cat", "gato grande")
        tree.insert("big dog", "perro grande")
        assert dict(tree.items()) == {
            "big cat": "gato grande",
            "big dog": "perro grande",
        }

    def test_dump(self, cat_tree):
        assert cat_tree.dump() == "\n".join([
            "phrase: []",
            "  phrase: [one cat]",
            "  replacement: un gato",
            "    phrase: [and two]",
            "    replacement: un gato y dos",
        ])

    def test_print_tree(self, cat_tree, capsys):
        cat_tree.print_tree()
        assert "replacement: un gato y dos" in capsys.readouterr().out


class TestFromDict:
    """Test hydration from a phrase mapping."""

    def test_order_does_not_matter(self):
        entries = {
            "one cat and two": "un gato y dos",
            "one cat": "un gato",
            "big dog": "perro grande",
        }
        forward = PhraseRadixTree.from_dict(entries)
        backward = PhraseRadixTree.from_dict(dict(reversed(list(entries.items()))))

        for query in (["one", "cat", "and", "two"], ["one", "cat", "is"], ["big", "dog"]):
            assert forward.find_longest_match(query, 0) == backward.find_longest_match(query, 0)
        assert_invariants(forward)
        assert_invariants(backward)

    def test_blank_keys_are_skipped(self):
        tree = PhraseRadixTree.from_dict({"  ": "x", "cat": "gato"})
        assert len(tree) == 1

    def test_radix_node_defaults(self):
        node = RadixNode(phrase=["x"])
        assert node.children == {}
        assert node.replacement is None
        assert not node.is_end_of_word


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
