"""Trie wire format.

Preorder, one flag byte per node:
  0x01 leaf     + symbol (u16 big endian)
  0x00 internal + left subtree + right subtree

Self-delimiting: no node count, no length prefix. Frequencies are not stored.
Both directions use an explicit stack, so skewed tries never hit the
recursion limit.
"""

from __future__ import annotations

import io
from collections.abc import Callable

from chuff.core.trie import Internal, Leaf, Node
from chuff.errors import MalformedTrieError

FLAG_INTERNAL = 0x00
FLAG_LEAF = 0x01

# 65536 distinct leaves at most -> 65535 internal nodes at most.
MAX_INTERNAL_NODES = 0xFFFF


def serialize_trie(root: Node) -> bytes:
    out = bytearray()
    stack: list[Node] = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, Leaf):
            out.append(FLAG_LEAF)
            out += node.symbol.to_bytes(2, "big")
        else:
            out.append(FLAG_INTERNAL)
            stack.append(node.right)
            stack.append(node.left)
    return bytes(out)


def read_trie(read: Callable[[int], bytes]) -> Node:
    """Read one trie from a read(n) callable (file.read, BytesIO.read, ...).

    Short reads mean the flag stream ended before the tree was complete.
    """
    # each open frame collects the children of one pending internal node
    pending: list[list[Node]] = []
    seen: set[int] = set()
    n_internal = 0

    while True:
        flag_b = read(1)
        if len(flag_b) != 1:
            raise MalformedTrieError("trie troncato (flag)")
        flag = flag_b[0]

        if flag == FLAG_INTERNAL:
            n_internal += 1
            if n_internal > MAX_INTERNAL_NODES:
                raise MalformedTrieError("trie con troppi nodi interni")
            pending.append([])
            continue

        if flag != FLAG_LEAF:
            raise MalformedTrieError(f"flag nodo non valido: 0x{flag:02x}")

        sym_b = read(2)
        if len(sym_b) != 2:
            raise MalformedTrieError("trie troncato (simbolo)")
        sym = int.from_bytes(sym_b, "big")
        if sym in seen:
            raise MalformedTrieError(f"simbolo duplicato nel trie: {sym}")
        seen.add(sym)

        node: Node = Leaf(sym)
        while pending:
            pending[-1].append(node)
            if len(pending[-1]) < 2:
                break
            left, right = pending.pop()
            node = Internal(left, right)
        else:
            return node


def deserialize_trie(data: bytes) -> Node:
    """Decode a serialized trie that must span the whole buffer."""
    buf = io.BytesIO(data)
    root = read_trie(buf.read)
    if buf.tell() != len(data):
        raise MalformedTrieError(f"byte in eccesso dopo il trie: {len(data) - buf.tell()}")
    return root
