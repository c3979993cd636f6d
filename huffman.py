import heapq
from collections import Counter
from typing import Dict, List, Optional, Tuple

LEAF_TAG = ord("L")  #: Serialized tag byte for a leaf node
INTERNAL_TAG = ord("I")  #: Serialized tag byte for an internal node
MAX_DEPTH = 255  #: Deepest leaf possible in a tree over 256 symbols


class MalformedTree(ValueError):
    """Raised when a serialized tree cannot be parsed."""


class MalformedEncoding(ValueError):
    """Raised when a bit-string does not correspond to the given tree."""


class ContractViolation(RuntimeError):
    """Raised on an internal invariant breach (a programming error)."""


class HuffmanNode:
    """Node of a binary Huffman tree.

    A node is either a leaf (``symbol`` set, no children) or an internal node
    (``symbol`` is ``None``, exactly two children). Nodes are not mutated
    after construction.

    :ivar symbol: Byte value (0-255) stored at a leaf; ``None`` for internal nodes.
    :type symbol: int | None
    :ivar freq: Frequency (weight) of the subtree rooted at this node.
    :type freq: int
    :ivar left: Left child node (reached with bit ``'0'``).
    :type left: HuffmanNode | None
    :ivar right: Right child node (reached with bit ``'1'``).
    :type right: HuffmanNode | None
    """

    __slots__ = ("symbol", "freq", "left", "right")

    def __init__(self, symbol=None, freq=0, left=None, right=None):
        """Create a Huffman node.

        :param symbol: Symbol value for leaf nodes; ``None`` for internal nodes.
        :type symbol: int | None
        :param int freq: Frequency (weight) associated with this node.
        :param left: Left child node, if any.
        :type left: HuffmanNode|None
        :param right: Right child node, if any.
        :type right: HuffmanNode|None
        :raises ValueError: If exactly one child is given, or a leaf
            has no symbol.
        """
        if (left is None) != (right is None):
            raise ValueError("Internal node needs exactly two children")
        if left is None and symbol is None:
            raise ValueError("Leaf node needs a symbol")
        self.symbol = None if left is not None else symbol
        self.freq = freq
        self.left = left
        self.right = right

    def is_leaf(self) -> bool:
        """Tell whether this node is a leaf.

        :returns: ``True`` if the node has no children.
        :rtype: bool
        """
        return self.left is None and self.right is None

    def __repr__(self):
        if self.is_leaf():
            return f"HuffmanNode(symbol={self.symbol!r}, freq={self.freq})"
        return f"HuffmanNode(freq={self.freq}, left={self.left!r}, right={self.right!r})"


def count_frequencies(data: bytes) -> Dict[int, int]:
    """Count how often every byte value occurs in ``data``.

    :param data: Input bytes.
    :type data: bytes
    :returns: Mapping from symbol to its count; unseen symbols are absent.
    :rtype: Dict[int, int]
    """
    return dict(Counter(data))


def _format_symbol(symbol: int) -> str:
    """Render a byte value the way a bytes literal shows it.

    :param symbol: Byte value (0-255).
    :type symbol: int
    :returns: The printable character, or its escape sequence.
    :rtype: str
    """
    text = repr(bytes([symbol]))[2:-1]
    return text if text != "\\\\" else "\\"


def format_frequencies(freqs: Dict[int, int]) -> List[str]:
    """Render a frequency table as ``"<symbol>: <count>"`` lines.

    Lines are ordered by symbol value; non-printable bytes are shown as
    escapes (``\\n``, ``\\x00``, ...).

    :param freqs: Mapping from symbol to count.
    :type freqs: Dict[int, int]
    :returns: One line per symbol.
    :rtype: List[str]
    """
    return [f"{_format_symbol(sym)}: {freqs[sym]}" for sym in sorted(freqs)]


def build_tree(freqs: Dict[int, int]) -> HuffmanNode:
    """Build a Huffman tree from a symbol frequency table.

    Heap entries are ordered by ``(freq, sequence)``. Leaves enter the heap
    in ascending symbol order and every merged node takes the next sequence
    number, so among equal frequencies the node that entered first is popped
    first. The first node popped becomes the left child.

    :param freqs: Mapping from symbol to observed frequency.
    :type freqs: Dict[int, int]
    :returns: Root of the tree. A single symbol yields a bare leaf.
    :rtype: HuffmanNode
    :raises ValueError: If ``freqs`` is empty.
    """
    if not freqs:
        raise ValueError("Cannot build a Huffman tree from zero symbols")

    if len(freqs) == 1:
        symbol, freq = next(iter(freqs.items()))
        return HuffmanNode(symbol=symbol, freq=freq)

    heap: List[Tuple[int, int, HuffmanNode]] = []
    for seq, symbol in enumerate(sorted(freqs)):
        heap.append((freqs[symbol], seq, HuffmanNode(symbol=symbol, freq=freqs[symbol])))
    heapq.heapify(heap)

    seq = len(heap)
    while len(heap) > 1:
        _, _, left = heapq.heappop(heap)
        _, _, right = heapq.heappop(heap)
        merged = HuffmanNode(freq=left.freq + right.freq, left=left, right=right)
        heapq.heappush(heap, (merged.freq, seq, merged))
        seq += 1

    return heap[0][2]


def generate_codes(root: Optional[HuffmanNode]) -> Dict[int, str]:
    """Derive the code table of a tree.

    Descending left appends ``'0'``, descending right appends ``'1'``. A
    leaf root maps its symbol to the empty string; :func:`encode_text`
    coerces that case to ``'0'``.

    :param root: Root of the tree, or ``None``.
    :type root: HuffmanNode | None
    :returns: Mapping from symbol to its bit-string code.
    :rtype: Dict[int, str]
    """
    codes: Dict[int, str] = {}
    _collect_codes(root, "", codes)
    return codes


def _collect_codes(node: Optional[HuffmanNode], path: str, codes: Dict[int, str]):
    """Record the code of every leaf below ``node`` into ``codes``.

    :param node: Current node, or ``None``.
    :type node: HuffmanNode | None
    :param path: Bits leading from the root to ``node``.
    :type path: str
    :param codes: Code table being filled in.
    :type codes: Dict[int, str]
    :returns: None
    :rtype: None
    """
    if node is None:
        return
    if node.is_leaf():
        codes[node.symbol] = path
    else:
        _collect_codes(node.left, path + "0", codes)
        _collect_codes(node.right, path + "1", codes)


def encode_text(data: bytes, codes: Dict[int, str]) -> str:
    """Encode ``data`` into a bit-string with the given code table.

    :param data: Bytes to encode.
    :type data: bytes
    :param codes: Code table from :func:`generate_codes`.
    :type codes: Dict[int, str]
    :returns: Concatenated codes in input order.
    :rtype: str
    :raises ContractViolation: If a symbol of ``data`` has no code.
    """
    if len(codes) == 1:
        codes = {sym: "0" for sym in codes}
    try:
        return "".join([codes[sym] for sym in data])
    except KeyError as e:
        raise ContractViolation(f"No code for symbol {e.args[0]}") from None


def decode_text(bits: str, root: Optional[HuffmanNode]) -> bytes:
    """Decode a bit-string by walking the tree from ``root``.

    :param bits: String of ``'0'``/``'1'`` characters.
    :type bits: str
    :param root: Root of the tree used for encoding.
    :type root: HuffmanNode | None
    :returns: The decoded bytes.
    :rtype: bytes
    :raises MalformedEncoding: If the bits contain anything but
        ``'0'``/``'1'``, or stop in the middle of a code.
    """
    if root is None:
        if bits:
            raise MalformedEncoding("Bits given for an empty tree")
        return b""

    if root.is_leaf():
        if bits.count("0") != len(bits):
            raise MalformedEncoding("Single-symbol stream must be all '0' bits")
        return bytes([root.symbol]) * len(bits)

    out = bytearray()
    node = root
    for pos, bit in enumerate(bits):
        if bit == "0":
            node = node.left
        elif bit == "1":
            node = node.right
        else:
            raise MalformedEncoding(f"Invalid bit {bit!r} at position {pos}")
        if node.is_leaf():
            out.append(node.symbol)
            node = root
    if node is not root:
        raise MalformedEncoding("Encoding ends in the middle of a code")
    return bytes(out)


def serialize_tree(root: Optional[HuffmanNode]) -> bytes:
    """Serialize a tree in preorder.

    A leaf is written as ``L`` followed by its symbol byte, an internal node
    as ``I`` followed by its left then right subtree. An empty tree is
    ``b""``.

    :param root: Root of the tree, or ``None``.
    :type root: HuffmanNode | None
    :returns: Serialized tree.
    :rtype: bytes
    """
    if root is None:
        return b""
    if root.is_leaf():
        return bytes([LEAF_TAG, root.symbol])
    return bytes([INTERNAL_TAG]) + serialize_tree(root.left) + serialize_tree(root.right)


def deserialize_tree(data: bytes) -> Optional[HuffmanNode]:
    """Rebuild a tree written by :func:`serialize_tree`.

    Deserialized nodes carry frequency ``0``.

    :param data: Serialized tree.
    :type data: bytes
    :returns: Root of the tree, or ``None`` for ``b""``.
    :rtype: HuffmanNode | None
    :raises MalformedTree: If ``data`` is truncated, holds an unknown tag
        byte, nests deeper than ``MAX_DEPTH`` or has bytes left over after
        the tree.
    """
    if not data:
        return None
    root, pos = _read_node(data, 0, 0)
    if pos != len(data):
        raise MalformedTree(f"{len(data) - pos} trailing byte(s) after tree")
    return root


def _read_node(data: bytes, pos: int, depth: int) -> Tuple[HuffmanNode, int]:
    """Parse one subtree starting at ``pos``.

    :param data: Serialized tree.
    :type data: bytes
    :param pos: Offset of the subtree's tag byte.
    :type pos: int
    :param depth: Depth of the subtree below the root.
    :type depth: int
    :returns: The subtree and the position just past it.
    :rtype: Tuple[HuffmanNode, int]
    :raises MalformedTree: If the subtree is truncated, nests deeper than
        ``MAX_DEPTH`` or holds an unknown tag byte.
    """
    if depth > MAX_DEPTH:
        raise MalformedTree(f"Tree nests deeper than {MAX_DEPTH} levels")
    if pos >= len(data):
        raise MalformedTree("Unexpected end of serialized tree")
    tag = data[pos]
    pos += 1
    if tag == LEAF_TAG:
        if pos >= len(data):
            raise MalformedTree("Leaf tag without a symbol")
        return HuffmanNode(symbol=data[pos]), pos + 1
    if tag == INTERNAL_TAG:
        left, pos = _read_node(data, pos, depth + 1)
        right, pos = _read_node(data, pos, depth + 1)
        return HuffmanNode(left=left, right=right), pos
    raise MalformedTree(f"Unknown tag byte 0x{tag:02x} at offset {pos - 1}")


def tree_equals(a: Optional[HuffmanNode], b: Optional[HuffmanNode],
                compare_freq: bool = False) -> bool:
    """Compare two trees structurally.

    :param a: First tree.
    :param b: Second tree.
    :param bool compare_freq: Also require equal frequencies on every node.
    :returns: ``True`` if both trees have the same shape and the same
        symbols at the same leaves.
    :rtype: bool
    """
    if a is None or b is None:
        return a is b
    if compare_freq and a.freq != b.freq:
        return False
    if a.is_leaf() or b.is_leaf():
        return a.is_leaf() and b.is_leaf() and a.symbol == b.symbol
    return (tree_equals(a.left, b.left, compare_freq)
            and tree_equals(a.right, b.right, compare_freq))
