# filename: huffman_core.py

import heapq
from collections import Counter


class HuffmanError(Exception):
    """Base class for every failure raised by the codec."""


class EmptyInputError(HuffmanError):
    """Raised when there is nothing to compress."""


class FormatError(HuffmanError):
    """Raised when a container or its header cannot be parsed."""


class DecodeError(HuffmanError):
    """Raised when the packed bit stream does not decode cleanly."""


class UnknownSymbolError(HuffmanError, KeyError):
    """Raised when a symbol has no codeword in the code table."""

    def __str__(self):
        return f"no codeword for symbol {self.args[0]!r}"


class HuffmanNode:
    # Arena record: children are indices into HuffmanTree.nodes
    __slots__ = ("weight", "symbol", "is_leaf", "left", "right")

    def __init__(self, weight, symbol=None, is_leaf=False, left=None, right=None):
        self.weight = weight
        self.symbol = symbol
        self.is_leaf = is_leaf
        self.left = left
        self.right = right

    @classmethod
    def leaf(cls, symbol, weight):
        return cls(weight, symbol=symbol, is_leaf=True)

    @classmethod
    def internal(cls, weight, left, right):
        return cls(weight, left=left, right=right)

    def __repr__(self):
        if self.is_leaf:
            return f"HuffmanNode.leaf({self.symbol!r}, {self.weight})"
        return f"HuffmanNode.internal({self.weight}, {self.left}, {self.right})"


class HuffmanTree:
    """Prefix tree stored as a flat arena of nodes.

    A node's position in ``nodes`` doubles as its insertion index: leaves
    come first in canonical symbol order, then internal nodes in the order
    they were merged. ``root`` is the arena index of the root node.
    """

    def __init__(self, nodes, root):
        self.nodes = nodes
        self.root = root

    def __len__(self):
        return len(self.nodes)

    def __getitem__(self, index):
        return self.nodes[index]

    @property
    def root_node(self):
        return self.nodes[self.root]

    @property
    def leaf_count(self):
        return sum(1 for node in self.nodes if node.is_leaf)


def canonical_order(freqs):
    """Return the (symbol, count) pairs of ``freqs`` sorted by symbol value."""
    return sorted(freqs.items(), key=lambda item: item[0])


class HuffmanLogic:
    def count_frequencies(self, data):
        # Frequency analysis, one pass over the input
        freqs = Counter(data)
        if not freqs:
            raise EmptyInputError("cannot compress empty input")
        return dict(canonical_order(freqs))

    def build_tree(self, freqs):
        if not freqs:
            raise EmptyInputError("cannot build a tree from an empty frequency table")

        # Leaves enter the arena in canonical order
        nodes = [HuffmanNode.leaf(symbol, count) for symbol, count in canonical_order(freqs)]
        priority_queue = [(node.weight, index) for index, node in enumerate(nodes)]
        heapq.heapify(priority_queue)

        # Merge the two lightest nodes; ties go to the lower insertion index
        while len(priority_queue) > 1:
            left_weight, left = heapq.heappop(priority_queue)
            right_weight, right = heapq.heappop(priority_queue)
            merged = HuffmanNode.internal(left_weight + right_weight, left, right)
            nodes.append(merged)
            heapq.heappush(priority_queue, (merged.weight, len(nodes) - 1))

        _, root = priority_queue[0]
        return HuffmanTree(nodes, root)

    def generate_codes(self, tree):
        root = tree.root_node
        if root.is_leaf:
            # A lone symbol still needs a one-bit codeword
            return {root.symbol: "0"}

        codes = {}
        stack = [(tree.root, "")]
        while stack:
            index, prefix = stack.pop()
            node = tree[index]
            if node.is_leaf:
                codes[node.symbol] = prefix
                continue
            # Push right first so the left subtree is walked first
            stack.append((node.right, prefix + "1"))
            stack.append((node.left, prefix + "0"))
        return codes

    def build_codes(self, freqs):
        return self.generate_codes(self.build_tree(freqs))
