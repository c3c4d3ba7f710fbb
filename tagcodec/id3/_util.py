# Copyright (C) 2005  Michael Urman
#               2013  Christoph Reiter
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import re

from tagcodec._util import EmptyInputError, TagCodecError


class error(TagCodecError):
    pass


class ID3EmptyInputError(error, EmptyInputError):
    pass


class ID3SeekError(error, OSError):
    pass


class ID3ReadError(error, OSError):
    pass


class ID3WriteError(error, OSError):
    pass


class ID3MalformedHeaderError(error, ValueError):
    pass


class ID3NoHeaderError(ID3MalformedHeaderError):
    pass


class ID3UnsupportedVersionError(ID3MalformedHeaderError, NotImplementedError):
    pass


class ID3MalformedFrameError(error, ValueError):
    pass


class ID3TagNotFoundError(error, KeyError):
    pass


class ID3TagShapeError(error, ValueError):
    pass


class ID3UnsupportedEncodingError(error, ValueError):
    pass


class ID3OddLengthError(error, ValueError):
    pass


class ID3UnsupportedFieldError(error, NotImplementedError):
    pass


class ID3NumberError(error, ValueError):
    pass


class ID3ValueRangeError(error, ValueError):
    pass


class ID3UnknownGenreError(error, ValueError):
    pass


class ID3Warning(error, UserWarning):
    pass


class _BitPaddedMixin:

    @staticmethod
    def to_str(value: int, bits: int = 7, bigendian: bool = True,
               width: int = 4) -> bytes:
        if not 0 <= value < (1 << (bits * width)):
            raise ID3ValueRangeError(
                'Value %d out of range for %d %d-bit groups' %
                (value, width, bits))

        mask = (1 << bits) - 1
        bytes_ = bytearray(width)
        index = 0
        while value:
            bytes_[index] = value & mask
            value >>= bits
            index += 1

        if bigendian:
            bytes_.reverse()
        return bytes(bytes_)


class BitPaddedInt(int, _BitPaddedMixin):

    def __new__(cls, value: int | bytes, bits: int = 7,
                bigendian: bool = True) -> BitPaddedInt:

        mask = (1 << (bits)) - 1
        numeric_value = 0
        shift = 0

        if isinstance(value, int):
            if value < 0:
                raise ValueError
            while value:
                numeric_value += (value & mask) << shift
                value >>= 8
                shift += bits
        elif isinstance(value, bytes):
            if bigendian:
                value = bytes(reversed(value))
            for byte in bytearray(value):
                numeric_value += (byte & mask) << shift
                shift += bits
        else:
            raise TypeError

        return int.__new__(BitPaddedInt, numeric_value)


SYNCHSAFE_MAX = (1 << 28) - 1
"""Largest value a 4 byte synchsafe integer can hold"""


def decode_synchsafe(data: bytes) -> int:
    """Decodes a 4 byte synchsafe integer.

    The top bit of each byte is ignored, the remaining 7 bit groups are
    joined in big-endian order.
    """

    if len(data) != 4:
        raise ValueError("synchsafe integers are 4 bytes wide")
    return int(BitPaddedInt(data))


def encode_synchsafe(value: int) -> bytes:
    """Encodes an integer in [0, 2**28 - 1] as 4 synchsafe bytes.

    Raises:
        ID3ValueRangeError: if the value doesn't fit
    """

    return BitPaddedInt.to_str(value, bits=7, width=4)


def decode_plain(data: bytes) -> int:
    """Decodes an ordinary big-endian unsigned integer of any width"""

    return int(BitPaddedInt(data, bits=8))


def encode_plain(value: int, width: int) -> bytes:
    """Encodes an unsigned integer as `width` big-endian bytes.

    Raises:
        ID3ValueRangeError: if the value doesn't fit
    """

    return BitPaddedInt.to_str(value, bits=8, width=width)


def is_valid_frame_id(frame_id: str) -> bool:
    return frame_id.isalnum() and frame_id.isupper()


_DECIMAL = re.compile(r"\s*[+-]?[0-9]+\s*")


def parse_int(text: str, what: str) -> int:
    """Parses a decimal number made of ASCII digits.

    Raises:
        ID3NumberError
    """

    if _DECIMAL.fullmatch(text) is None:
        raise ID3NumberError(f"{what}: {text!r} is not a number")
    return int(text)
