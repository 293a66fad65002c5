import os
import sys

import pytest

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from huffman_core import (  # noqa: E402
    EmptyInputError,
    HuffmanError,
    HuffmanLogic,
    UnknownSymbolError,
)


@pytest.fixture
def logic():
    return HuffmanLogic()


def _assert_prefix_free(codes):
    words = list(codes.values())
    for i, a in enumerate(words):
        for j, b in enumerate(words):
            if i != j:
                assert not b.startswith(a), f"{a!r} is a prefix of {b!r}"


def test_count_frequencies_text(logic):
    assert logic.count_frequencies("aaaabbbccd") == {"a": 4, "b": 3, "c": 2, "d": 1}


def test_count_frequencies_is_in_canonical_order(logic):
    freqs = logic.count_frequencies(b"zyxzy\x00")
    assert list(freqs) == [0, ord("x"), ord("y"), ord("z")]
    assert freqs[0] == 1


def test_count_frequencies_rejects_empty_input(logic):
    with pytest.raises(EmptyInputError):
        logic.count_frequencies("")
    with pytest.raises(EmptyInputError):
        logic.count_frequencies(b"")


def test_build_tree_rejects_empty_table(logic):
    with pytest.raises(EmptyInputError):
        logic.build_tree({})


def test_build_tree_shape_for_known_table(logic):
    tree = logic.build_tree({"a": 4, "b": 3, "c": 2, "d": 1})
    # Leaves in canonical order, then internal nodes in merge order
    assert [n.symbol for n in tree.nodes[:4]] == ["a", "b", "c", "d"]
    assert len(tree) == 7
    assert tree.leaf_count == 4

    first, second, root = tree.nodes[4:]
    assert (first.weight, first.left, first.right) == (3, 3, 2)
    # Weight tie between leaf "b" and the first merge: the older node goes left
    assert (second.weight, second.left, second.right) == (6, 1, 4)
    assert (root.weight, root.left, root.right) == (10, 0, 5)
    assert tree.root == 6
    assert tree.root_node is root


def test_codes_for_known_table(logic):
    codes = logic.build_codes({"a": 4, "b": 3, "c": 2, "d": 1})
    assert codes == {"a": "0", "b": "10", "d": "110", "c": "111"}


def test_equal_weights_break_ties_by_symbol_order(logic):
    codes = logic.build_codes({"b": 1, "a": 1})
    assert codes == {"a": "0", "b": "1"}


def test_single_symbol_gets_one_bit_code(logic):
    tree = logic.build_tree({"a": 4})
    assert len(tree) == 1
    assert tree.root_node.is_leaf
    assert logic.generate_codes(tree) == {"a": "0"}


def test_zero_byte_is_a_leaf(logic):
    codes = logic.build_codes({0: 5, 1: 1, 2: 1})
    assert set(codes) == {0, 1, 2}
    assert all(codes.values())
    _assert_prefix_free(codes)


def test_build_is_deterministic(logic):
    freqs = {chr(c): (c * 7919) % 13 + 1 for c in range(32, 127)}
    reordered = dict(reversed(list(freqs.items())))
    assert logic.build_codes(freqs) == logic.build_codes(reordered)


def test_codes_prefix_free_over_full_byte_alphabet(logic):
    freqs = {b: (b % 17) + 1 for b in range(256)}
    codes = logic.build_codes(freqs)
    assert len(codes) == 256
    assert all(codes.values())
    _assert_prefix_free(codes)


def test_frequent_symbols_get_shorter_codes(logic):
    codes = logic.build_codes({"e": 100, "t": 50, "q": 1, "z": 1})
    assert len(codes["e"]) <= len(codes["t"]) <= len(codes["q"])


def test_deep_tree_does_not_recurse(logic):
    # Fibonacci weights produce a maximally skewed tree
    weights = [1, 1]
    while len(weights) < 90:
        weights.append(weights[-1] + weights[-2])
    freqs = {chr(0x4E00 + i): w for i, w in enumerate(weights)}
    codes = logic.build_codes(freqs)
    assert max(len(code) for code in codes.values()) == 89
    _assert_prefix_free(codes)


def test_error_hierarchy():
    assert issubclass(EmptyInputError, HuffmanError)
    assert issubclass(UnknownSymbolError, HuffmanError)
    assert issubclass(UnknownSymbolError, KeyError)
    assert "'x'" in str(UnknownSymbolError("x"))
