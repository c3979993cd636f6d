from typing import NamedTuple, Optional, Tuple

import container
from huffman import (
    build_tree,
    count_frequencies,
    decode_text,
    deserialize_tree,
    encode_text,
    generate_codes,
    serialize_tree,
)


class CompressStats(NamedTuple):
    """Outcome of :meth:`HuffmanCoder.compress_file`.

    :ivar empty: ``True`` if the input had no bytes and nothing was written.
    :ivar input_size: Size of the input in bytes.
    :ivar bit_count: Number of payload bits produced.
    :ivar output_size: Size of the written file in bytes.
    """

    empty: bool
    input_size: int
    bit_count: int
    output_size: int


class HuffmanCoder:
    """Huffman compressor/decompressor for whole byte strings.

    Holds no state between calls; every call builds its own tree and code
    table.
    """

    def encode(self, data: bytes) -> Optional[Tuple[bytes, str]]:
        """Encode ``data`` into a serialized tree and a bit-string.

        :param data: Input bytes.
        :type data: bytes
        :returns: Tuple ``(tree, bits)``, or ``None`` for empty input
            (no tree is built).
        :rtype: Optional[Tuple[bytes, str]]
        """
        if not data:
            return None
        root = build_tree(count_frequencies(data))
        bits = encode_text(data, generate_codes(root))
        return serialize_tree(root), bits

    def decode(self, tree: bytes, bits: str) -> bytes:
        """Invert :meth:`encode`.

        :param tree: Serialized tree.
        :type tree: bytes
        :param bits: Encoded bit-string.
        :type bits: str
        :returns: The original bytes.
        :rtype: bytes
        :raises MalformedTree: If ``tree`` cannot be parsed.
        :raises MalformedEncoding: If ``bits`` does not match the tree.
        """
        return decode_text(bits, deserialize_tree(tree))

    def compress(self, data: bytes) -> Optional[bytes]:
        """Compress ``data`` into the packed file format.

        :returns: Packed bytes, or ``None`` for empty input.
        :rtype: Optional[bytes]
        """
        encoded = self.encode(data)
        if encoded is None:
            return None
        return container.pack(*encoded)

    def decompress(self, blob: bytes) -> bytes:
        """Decompress bytes produced by :meth:`compress`.

        :raises ValueError: If the file is corrupt (including
            ``MalformedTree`` and ``MalformedEncoding``).
        :raises EOFError: If the file is truncated.
        """
        tree, bits = container.unpack(blob)
        return self.decode(tree, bits)

    def compress_file(self, input_path: str, output_path: str) -> CompressStats:
        """Compress the file at ``input_path`` into ``output_path``.

        Empty input writes nothing and reports ``empty=True``.

        :raises OSError: If a file cannot be read or written.
        """
        data = _read_file(input_path)
        encoded = self.encode(data)
        if encoded is None:
            return CompressStats(True, 0, 0, 0)
        tree, bits = encoded
        blob = container.pack(tree, bits)
        with open(output_path, "wb") as out:
            out.write(blob)
        return CompressStats(False, len(data), len(bits), len(blob))

    def decompress_file(self, input_path: str, output_path: str) -> int:
        """Decompress ``input_path`` into ``output_path``.

        :returns: Number of bytes written.
        :rtype: int
        :raises OSError: If a file cannot be read or written.
        """
        data = self.decompress(_read_file(input_path))
        with open(output_path, "wb") as out:
            out.write(data)
        return len(data)


def _read_file(path: str) -> bytes:
    """Read a whole file in binary mode.

    :param path: File to read.
    :type path: str
    :returns: The file contents.
    :rtype: bytes
    :raises OSError: If the file cannot be opened or read.
    """
    with open(path, "rb") as f:
        return f.read()
