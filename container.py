import struct
from typing import Tuple

from bitops import BitReader, BitWriter

MAGIC = b"ZAP1"  #: Compressed file magic number
VERSION = 1  #: Current container version

_HEADER = struct.Struct(">4sBH")
BIT_COUNT_BITS = 64  #: Width of the payload bit-count field


def pack(tree: bytes, bits: str) -> bytes:
    """Pack a serialized tree and an encoded bit-string into one blob.

    Layout (big-endian):
    - Magic: 'ZAP1' (4 bytes)
    - Version: uint8
    - Tree length: uint16
    - Serialized tree bytes
    - Payload bit count: uint64
    - Payload bits packed MSB-first, last byte zero-padded

    :param tree: Serialized Huffman tree.
    :type tree: bytes
    :param bits: Encoded payload as ``'0'``/``'1'`` characters.
    :type bits: str
    :returns: The packed file contents.
    :rtype: bytes
    :raises ValueError: If the tree does not fit the length field or
        ``bits`` is not a bit-string.
    """
    if len(tree) > 0xFFFF:
        raise ValueError(f"Serialized tree too long: {len(tree)} bytes")
    writer = BitWriter()
    writer.write_bits(len(bits), BIT_COUNT_BITS)
    writer.write_bitstring(bits)
    return _HEADER.pack(MAGIC, VERSION, len(tree)) + tree + writer.flush()


def unpack(blob: bytes) -> Tuple[bytes, str]:
    """Recover the pair written by :func:`pack`.

    :param blob: Packed file contents.
    :type blob: bytes
    :returns: Tuple ``(tree, bits)``.
    :rtype: Tuple[bytes, str]
    :raises ValueError: If the magic, version or payload length is wrong.
    :raises EOFError: If the blob is truncated.
    """
    if len(blob) < _HEADER.size:
        raise EOFError("Truncated header")
    magic, version, tree_len = _HEADER.unpack_from(blob)
    if magic != MAGIC:
        raise ValueError("Invalid compressed file (bad magic)")
    if version != VERSION:
        raise ValueError(f"Unsupported version: {version}")

    pos = _HEADER.size
    tree = blob[pos:pos + tree_len]
    pos += tree_len
    if len(tree) != tree_len:
        raise EOFError("Truncated tree section")

    reader = BitReader(blob[pos:])
    bit_count = reader.read_bits(BIT_COUNT_BITS)
    expected = (bit_count + 7) // 8
    if reader.remaining_bytes() < expected:
        raise EOFError("Truncated payload")
    if reader.remaining_bytes() > expected:
        extra = reader.remaining_bytes() - expected
        raise ValueError(f"{extra} unexpected byte(s) after payload")
    return tree, reader.read_bitstring(bit_count)
