"""Character-encoding detection and decoding of GEDCOM byte streams.

A :class:`DecodingReader` detects the encoding of a seekable binary
stream from its byte-order mark and the ``HEAD.CHAR`` declaration, then
yields the content either as code points or re-encoded as UTF-8 bytes.
Invalid input is reported as a negative value; ``-1`` marks the end of
the stream.
"""

from __future__ import annotations

from collections import deque
from enum import Enum
from typing import BinaryIO

EOF = -1


class Codec(Enum):
    """Character encodings the reader knows about."""

    NONE = "Unknown"
    ANSEL = "ANSEL"
    UTF8 = "UTF-8"
    UTF16LE = "UTF-16 little-endian"
    UTF16BE = "UTF-16 big-endian"
    UTF32LE = "UTF-32 little-endian"
    UTF32BE = "UTF-32 big-endian"
    ASCII = "ASCII (note: incomplete implementation)"


class EncodingDetectionError(ValueError):
    """Raised when too little GEDCOM can be read to learn the encoding."""


# Code points of ANSEL bytes 0xA1 through 0xFF; negative means unmapped.
_ANSEL_SPECIAL = (
    0x141, 0xD8, 0x110, 0xDE, 0xC6, 0x152, 0x2B9,
    0xB7, 0x266D, 0xAE, 0xB1, 0x1A0, 0x1AF, 0x2BE, -0xAF,
    0x2BF, 0x142, 0xF8, 0x111, 0xFE, 0xE6, 0x153, 0x2BA,
    0x131, 0xA3, 0xF0, -0xBB, 0x1A1, 0x1B0, 0x25A1, 0x25A0,
    0xB0, 0x2113, 0x2117, 0xA9, 0x2667, 0xBF, 0xA1, 0xDF,
    0x20AC, -0xC9, -0xCA, -0xCB, -0xCC, 0x65, 0x6F, 0xDF,
    -0xD0, -0xD1, -0xD2, -0xD3, -0xD4, -0xD5, -0xD6, -0xD7,
    -0xD8, -0xD9, -0xDA, -0xDB, -0xDC, -0xDD, -0xDE, -0xDF,
    0x309, 0x300, 0x301, 0x302, 0x303, 0x304, 0x306, 0x307,
    0x308, 0x30C, 0x30A, 0xFE20, 0xFE21, 0x315, 0x30B, 0x310,
    0x327, 0x328, 0x323, 0x324, 0x325, 0x333, 0x332, 0x326,
    0x328, 0x32E, 0xFE22, 0xFE23, 0x338, -0xFD, 0x313, -0xFF,
)
_ANSEL_CENTER = 0xFC
_MAX_HIGH_MARKS = 15
_MAX_LOW_MARKS = 16

_SPACE = frozenset(b" \t\n\v\f\r")
_BLANK = frozenset(b" \t")
_NEWLINE = frozenset(b"\n\r")


def detect_bom(head: bytes) -> tuple[Codec, int]:
    """Guess the codec from the first four bytes; return it and the BOM length."""
    if len(head) < 4:
        raise EncodingDetectionError("empty file")
    b0, b1, b2, b3 = head[:4]
    if (b0, b1, b2) == (0xEF, 0xBB, 0xBF):
        return Codec.UTF8, 3
    if (b0, b1) == (0xFF, 0xFE):
        if b2 or b3:
            return Codec.UTF16LE, 2
        return Codec.UTF32LE, 4
    if (b0, b1) == (0xFE, 0xFF):
        return Codec.UTF16BE, 2
    if not b0 and not b1 and (b2, b3) == (0xFF, 0xFE):
        return Codec.UTF32BE, 4
    if b0 and not b1 and not b2 and not b3:
        return Codec.UTF32LE, 0
    if not b0 and not b1 and not b2 and b3:
        return Codec.UTF32BE, 0
    if b0 and not b1:
        return Codec.UTF16LE, 0
    if not b0 and b1:
        return Codec.UTF16BE, 0
    return Codec.NONE, 0


class DecodingReader:
    """Decodes a seekable GEDCOM byte stream in its detected encoding."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        stream.seek(0)
        self.codec, self._bom = detect_bom(stream.read(4))
        self._reset()
        declared = self._declared_encoding()
        name = declared.upper()
        if not declared:
            pass
        elif name == b"UTF-8":
            self.codec = Codec.UTF8
        elif name == b"ASCII":
            self.codec = Codec.ASCII
        elif name == b"ANSEL":
            self.codec = Codec.ANSEL
        elif name == b"UNICODE":
            if self.codec is Codec.NONE:
                self.codec = Codec.UTF8
        else:
            text = declared.decode("utf-8", "replace")
            raise EncodingDetectionError(f"Unexpected encoding {text}")
        if self.codec is Codec.NONE:
            self.codec = Codec.UTF8
        self._reset()

    def _reset(self) -> None:
        self._stream.seek(self._bom)
        self._high: deque[int] = deque()
        self._low: list[int] = []
        self._mid = 0
        self._pending: deque[int] = deque()

    def rewind(self) -> None:
        """Return to the first character after any byte-order mark."""
        self._reset()

    def _declared_encoding(self) -> bytes:
        """Scan HEAD for a level-1 CHAR line and return its payload."""
        # 0: before first '0'; 1: inside an ordinary line; 2: after a line
        # break; 3..9: partway through matching "1 CHAR ".
        step = 0
        while True:
            octet = self.next_utf8_byte()
            if octet == EOF:
                raise EncodingDetectionError(
                    "GEDCOM file ended while still inside HEAD"
                )
            if step == 0:
                if octet in _SPACE:
                    continue
                if octet == ord("0"):
                    step = 1
                    continue
                raise EncodingDetectionError(
                    f"GEDCOM file began with U+{octet:04X}, not with '0'"
                )
            if octet in _NEWLINE:
                step = 2
            elif step == 1:
                continue
            elif step == 2:
                if octet == ord("0"):
                    return b""
                step = 3 if octet == ord("1") else 1
            elif step == 3:
                step = 4 if octet in _BLANK else 1
            elif step == 4:
                if octet in _BLANK:
                    continue
                step = 5 if octet in b"cC" else 1
            elif step in (5, 6, 7):
                letter = "HAR"[step - 5]
                expected = (ord(letter), ord(letter.lower()))
                step = step + 1 if octet in expected else 1
            elif step == 8:
                step = 9 if octet in _BLANK else 1
            else:
                if octet in _BLANK:
                    continue
                value = bytearray()
                while len(value) < 255 and octet > 0x1F:
                    value.append(octet)
                    octet = self.next_utf8_byte()
                return bytes(value)

    def _read_byte(self) -> int:
        data = self._stream.read(1)
        return data[0] if data else EOF

    def _read_unit(self, size: int, little_endian: bool) -> int:
        data = self._stream.read(size)
        if len(data) < size:
            return EOF
        return int.from_bytes(data, "little" if little_endian else "big")

    def _next_ansel(self) -> int:
        if self._mid:
            codepoint, self._mid = self._mid, 0
            return codepoint
        if self._low:
            return self._low.pop()
        if self._high:
            return self._high.popleft()

        marks: list[int] = []
        while True:
            b = self._read_byte()
            if b < 0x80:
                base = b
                break
            if b < 0xA1:
                base = -b
                break
            special = _ANSEL_SPECIAL[b - 0xA1]
            if b < 0xE0 or special < 0:
                base = special
                break
            marks.append(b)

        # Marks are queued innermost first, the order nested decoding gives.
        for b in reversed(marks):
            mark = _ANSEL_SPECIAL[b - 0xA1]
            if b == _ANSEL_CENTER:
                self._mid = mark
            elif 0xF0 <= b <= 0xF9:
                if len(self._low) < _MAX_LOW_MARKS:
                    self._low.append(mark)
            elif len(self._high) < _MAX_HIGH_MARKS:
                self._high.append(mark)
        return base

    def _next_utf8(self) -> int:
        b = self._read_byte()
        if b < 0x80:
            return b
        if b < 0xC0 or b >= 0xF8:
            return -b
        more = 1 if b < 0xE0 else 2 if b < 0xF0 else 3
        codepoint = b & ((1 << (7 - more)) - 1)
        for _ in range(more):
            b = self._read_byte()
            if b == EOF:
                return EOF
            if b < 0x80 or b >= 0xC0:
                return -b
            codepoint = (codepoint << 6) | (b & 0x3F)
        if more >= 3 and codepoint < (1 << 12):
            return -codepoint
        if more >= 2 and codepoint < (1 << 7):
            return -codepoint
        return _checked(codepoint)

    def _next_utf16(self, little_endian: bool) -> int:
        first = self._read_unit(2, little_endian)
        if first < 0:
            return first
        if first < 0xD800 or first >= 0xE000:
            return first
        if first >= 0xDC00:
            return -first
        second = self._read_unit(2, little_endian)
        if second < 0:
            return second
        if second < 0xDC00 or second >= 0xE000:
            return -second
        return (((first & 0x3FF) << 10) | (second & 0x3FF)) + 0x10000

    def _next_utf32(self, little_endian: bool) -> int:
        codepoint = self._read_unit(4, little_endian)
        if codepoint < 0:
            return codepoint
        return _checked(codepoint)

    def next_codepoint(self) -> int:
        """Return the next code point, -1 at the end, or a negative error value."""
        codec = self.codec
        if codec is Codec.ANSEL:
            return self._next_ansel()
        if codec is Codec.UTF8:
            return self._next_utf8()
        if codec is Codec.UTF16LE:
            return self._next_utf16(True)
        if codec is Codec.UTF16BE:
            return self._next_utf16(False)
        if codec is Codec.UTF32LE:
            return self._next_utf32(True)
        if codec is Codec.UTF32BE:
            return self._next_utf32(False)
        return self._read_byte()

    def next_utf8_byte(self) -> int:
        """Return the next byte of the content re-encoded as UTF-8."""
        if self._pending:
            return self._pending.popleft()
        codepoint = self.next_codepoint()
        if codepoint < 0x80:
            return codepoint
        if codepoint < (1 << 11):
            lead, tail = 0xC0 | (codepoint >> 6), 1
        elif codepoint < (1 << 16):
            lead, tail = 0xE0 | (codepoint >> 12), 2
        elif codepoint < (1 << 21):
            lead, tail = 0xF0 | (codepoint >> 18), 3
        else:
            return -codepoint
        self._pending.extend(
            0x80 | ((codepoint >> (6 * shift)) & 0x3F)
            for shift in range(tail - 1, -1, -1)
        )
        return lead


def _checked(codepoint: int) -> int:
    """Reject values UTF-16 cannot represent."""
    if codepoint >= 0x110000 or 0xD800 <= codepoint < 0xE000:
        return -codepoint
    return codepoint