"""
consent_decoder.bits

Bit-addressed reads over the raw bytes of a decoded consent string.

Classes:
    - BitReader: immutable, MSB-first view over a byte sequence

Notes:
    - Offsets are absolute; bit 0 is the most significant bit of byte 0.
    - Reads past the end of the data yield unset bits instead of raising, since
      trailing padding bits are legitimately absent from short strings.
"""

LETTER_WIDTH = 6


class BitReader:
    """
    Read-only view over a byte sequence addressed by absolute bit position.
    """

    __slots__ = ("_data",)

    def __init__(self, data: bytes):
        self._data = bytes(data)

    def __len__(self) -> int:
        return len(self._data)

    @property
    def bit_length(self) -> int:
        """Number of bits actually available."""
        return len(self._data) * 8

    def get_bit(self, index: int) -> bool:
        """Return the bit at ``index``; ``False`` when it lies outside the data."""
        if index < 0:
            return False
        byte_index, bit_offset = divmod(index, 8)
        if byte_index >= len(self._data):
            return False
        return bool(self._data[byte_index] & (0x80 >> bit_offset))

    def get_uint(self, start: int, width: int) -> int:
        """
        Compose an unsigned integer from ``width`` bits starting at ``start``, MSB first.
        """
        val = 0
        for i in range(width):
            val = (val << 1) | self.get_bit(start + i)
        return val

    def get_letters(self, start: int, width: int) -> str:
        """
        Decode ``width // 6`` six-bit letters (0 -> 'A', 25 -> 'Z').

        Returns an empty string when ``width`` is not a multiple of six. Values
        above 25 are mapped the same way and are not validated.
        """
        if width % LETTER_WIDTH != 0:
            return ""
        return "".join(
            chr(self.get_uint(start + i * LETTER_WIDTH, LETTER_WIDTH) + ord("A"))
            for i in range(width // LETTER_WIDTH)
        )
