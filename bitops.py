class BitWriter:
    """Bit-packing writer.

    Accumulates bits MSB-first into bytes and buffers them until flushed.

    :ivar buffer: Internal byte buffer holding fully written bytes.
    :type buffer: bytearray
    :ivar bit_buffer: 8-bit scratch register for accumulating pending bits.
    :type bit_buffer: int
    :ivar bit_count: Number of valid bits currently stored in ``bit_buffer`` (0-7).
    :type bit_count: int
    """

    def __init__(self):
        """Initialize an empty bit writer.

        :returns: None
        :rtype: None
        """
        self.buffer = bytearray()
        self.bit_buffer = 0
        self.bit_count = 0

    def write_bits(self, value: int, nbits: int):
        """Write the lowest ``nbits`` of ``value``, MSB first.

        :param value: Integer whose bits will be written.
        :type value: int
        :param nbits: Number of bits from ``value`` to write.
        :type nbits: int
        :returns: None
        :rtype: None
        """
        for i in range(nbits - 1, -1, -1):
            self._push((value >> i) & 1)

    def write_bitstring(self, bits: str):
        """Write a string of ``'0'``/``'1'`` characters.

        Whole bytes are packed directly once the writer is byte-aligned.

        :param bits: Bits to write, in order.
        :type bits: str
        :returns: None
        :rtype: None
        :raises ValueError: If ``bits`` holds any other character.
        """
        if bits.count("0") + bits.count("1") != len(bits):
            raise ValueError("Bit-string may only contain '0' and '1'")
        pos = 0
        while self.bit_count and pos < len(bits):
            self._push(bits[pos] == "1")
            pos += 1
        full = pos + (len(bits) - pos) // 8 * 8
        for start in range(pos, full, 8):
            self.buffer.append(int(bits[start:start + 8], 2))
        for bit in bits[full:]:
            self._push(bit == "1")

    def _push(self, bit):
        """Append one bit, emitting a byte once eight are pending.

        :param bit: Bit value; anything truthy counts as ``1``.
        :returns: None
        :rtype: None
        """
        self.bit_buffer = (self.bit_buffer << 1) | int(bit)
        self.bit_count += 1
        if self.bit_count == 8:
            self.buffer.append(self.bit_buffer)
            self.bit_buffer = 0
            self.bit_count = 0

    def flush(self) -> bytes:
        """Flush remaining bits (if any) and return the full byte buffer.

        Any partial byte is padded with zeros on the right.

        :returns: The accumulated bytes written so far.
        :rtype: bytes
        """
        if self.bit_count > 0:
            self.bit_buffer <<= (8 - self.bit_count)
            self.buffer.append(self.bit_buffer)
            self.bit_buffer = 0
            self.bit_count = 0
        return bytes(self.buffer)


class BitReader:
    """Bit-packing reader.

    :ivar data: Input data to read bits from.
    :type data: bytes
    :ivar pos: Index of the next unread byte in ``data``.
    :type pos: int
    :ivar bit_buffer: Scratch register holding the current source byte.
    :type bit_buffer: int
    :ivar bit_count: Number of unread bits remaining in ``bit_buffer`` (0-8).
    :type bit_count: int
    """

    def __init__(self, data: bytes):
        """Create a bit reader over ``data``.

        :param data: Source data to read from.
        :type data: bytes
        :returns: None
        :rtype: None
        """
        self.data = data
        self.pos = 0
        self.bit_buffer = 0
        self.bit_count = 0

    def read_bits(self, nbits: int) -> int:
        """Read ``nbits`` bits and return them as an integer, MSB first.

        :param nbits: Number of bits to read.
        :type nbits: int
        :returns: The integer value composed of the next ``nbits`` bits.
        :rtype: int
        :raises EOFError: If the data ends before ``nbits`` bits were read.
        """
        result = 0
        for _ in range(nbits):
            result = (result << 1) | self._pull()
        return result

    def read_bitstring(self, nbits: int) -> str:
        """Read ``nbits`` bits as a string of ``'0'``/``'1'`` characters.

        :param nbits: Number of bits to read.
        :type nbits: int
        :returns: The bits, in stream order.
        :rtype: str
        :raises EOFError: If the data ends before ``nbits`` bits were read.
        """
        parts = []
        while nbits and self.bit_count:
            parts.append("1" if self._pull() else "0")
            nbits -= 1
        nbytes = nbits // 8
        if self.pos + nbytes > len(self.data):
            raise EOFError("Unexpected end of data")
        chunk = self.data[self.pos:self.pos + nbytes]
        self.pos += nbytes
        parts.append("".join(format(byte, "08b") for byte in chunk))
        for _ in range(nbits % 8):
            parts.append("1" if self._pull() else "0")
        return "".join(parts)

    def _pull(self) -> int:
        """Take the next bit, loading a new source byte when needed.

        :returns: The bit value, ``0`` or ``1``.
        :rtype: int
        :raises EOFError: If ``data`` is exhausted.
        """
        if self.bit_count == 0:
            if self.pos >= len(self.data):
                raise EOFError("Unexpected end of data")
            self.bit_buffer = self.data[self.pos]
            self.pos += 1
            self.bit_count = 8
        self.bit_count -= 1
        return (self.bit_buffer >> self.bit_count) & 1

    def remaining_bytes(self) -> int:
        """Count the bytes the reader has not started on yet.

        Bits still pending in ``bit_buffer`` are not included.

        :returns: Number of untouched bytes left in ``data``.
        :rtype: int
        """
        return len(self.data) - self.pos
