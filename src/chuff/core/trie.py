from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass
from typing import Union

from chuff.errors import EmptyInputError

# -------------------
# Nodi del trie
# -------------------


@dataclass(frozen=True, slots=True)
class Leaf:
    symbol: int


@dataclass(frozen=True, slots=True)
class Internal:
    left: "Node"
    right: "Node"


Node = Union[Leaf, Internal]

# Queue entries order by (freq, kind, tiebreak): leaves before internals on equal
# frequency, leaves by symbol value, internals by creation order.
_KIND_LEAF = 0
_KIND_INTERNAL = 1


def build_trie(freq: dict[int, int]) -> Node:
    """Build the optimal prefix-code tree for a frequency table.

    The two lowest entries are merged until one node is left; the first one
    popped becomes the left child. Ties are broken deterministically so the
    serialized trie is reproducible byte for byte.

    A table with a single symbol returns that symbol's Leaf as the root.
    """
    if not freq:
        raise EmptyInputError("impossibile costruire un trie da una tabella di frequenze vuota")

    heap: list[tuple[int, int, int, Node]] = []
    for sym, f in freq.items():
        if f <= 0:
            raise ValueError(f"frequenza non valida per simbolo {sym}: {f}")
        heap.append((f, _KIND_LEAF, sym, Leaf(sym)))
    heapq.heapify(heap)

    seq = itertools.count()
    while len(heap) > 1:
        f1, _, _, left = heapq.heappop(heap)
        f2, _, _, right = heapq.heappop(heap)
        heapq.heappush(heap, (f1 + f2, _KIND_INTERNAL, next(seq), Internal(left, right)))

    return heap[0][3]


def build_code_table(root: Node) -> dict[int, str]:
    """Map every leaf symbol to its root-to-leaf path ('0' left, '1' right)."""
    if isinstance(root, Leaf):
        # no path exists: the lone symbol gets "0" by convention
        return {root.symbol: "0"}

    codes: dict[int, str] = {}
    stack: list[tuple[Node, str]] = [(root, "")]
    while stack:
        node, path = stack.pop()
        if isinstance(node, Leaf):
            codes[node.symbol] = path
            continue
        stack.append((node.right, path + "1"))
        stack.append((node.left, path + "0"))
    return codes


def trie_depth(root: Node) -> int:
    """Length of the longest code in the tree (1 for a single-leaf root)."""
    if isinstance(root, Leaf):
        return 1
    best = 0
    stack: list[tuple[Node, int]] = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, Leaf):
            best = max(best, depth)
        else:
            stack.append((node.left, depth + 1))
            stack.append((node.right, depth + 1))
    return best
