# Copyright (C) 2005  Michael Urman
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import codecs
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Final, override

from ._util import (
    ID3OddLengthError,
    ID3TagShapeError,
    ID3UnsupportedEncodingError,
)

if TYPE_CHECKING:
    from ._frames import Frame


class PictureType(IntEnum):
    """Enumeration of image types defined by the ID3 standard for the APIC
    frame.
    """

    OTHER = 0
    """Other"""

    FILE_ICON = 1
    """32x32 pixels 'file icon' (PNG only)"""

    OTHER_FILE_ICON = 2
    """Other file icon"""

    COVER_FRONT = 3
    """Cover (front)"""

    COVER_BACK = 4
    """Cover (back)"""

    LEAFLET_PAGE = 5
    """Leaflet page"""

    MEDIA = 6
    """Media (e.g. label side of CD)"""

    LEAD_ARTIST = 7
    """Lead artist/lead performer/soloist"""

    ARTIST = 8
    """Artist/performer"""

    CONDUCTOR = 9
    """Conductor"""

    BAND = 10
    """Band/Orchestra"""

    COMPOSER = 11
    """Composer"""

    LYRICIST = 12
    """Lyricist/text writer"""

    RECORDING_LOCATION = 13
    """Recording Location"""

    DURING_RECORDING = 14
    """During recording"""

    DURING_PERFORMANCE = 15
    """During performance"""

    SCREEN_CAPTURE = 16
    """Movie/video screen capture"""

    FISH = 17
    """A bright coloured fish"""

    ILLUSTRATION = 18
    """Illustration"""

    BAND_LOGOTYPE = 19
    """Band/artist logotype"""

    PUBLISHER_LOGOTYPE = 20
    """Publisher/Studio logotype"""

    def _pprint(self) -> str:
        return self.name.lower().replace("_", " ")


class Encoding(IntEnum):
    """Text Encoding"""

    LATIN1 = 0
    """ISO-8859-1, read like UTF-8"""

    UTF16 = 1
    """UTF-16 with BOM"""

    UTF16BE = 2
    """UTF-16BE without BOM"""

    UTF8 = 3
    """UTF-8"""


_TERMINATORS: Final = {
    Encoding.LATIN1: b"\x00",
    Encoding.UTF16: b"\x00\x00",
    Encoding.UTF16BE: b"\x00\x00",
    Encoding.UTF8: b"\x00",
}


def encoding_for(tag: int) -> Encoding:
    """Maps the encoding byte of a frame to an :class:`Encoding`.

    Raises:
        ID3UnsupportedEncodingError
    """

    try:
        return Encoding(tag)
    except ValueError:
        raise ID3UnsupportedEncodingError(
            f"Invalid Encoding: {tag!r}") from None


def terminator(encoding: Encoding) -> bytes:
    return _TERMINATORS[encoding_for(encoding)]


def find_terminator(data: bytes, encoding: Encoding) -> int:
    """Returns the index of the first string terminator in data or -1.

    For UTF-16 only terminators starting at a code unit boundary count.
    """

    term = terminator(encoding)
    if len(term) == 1:
        return data.find(term)

    index = data.find(term)
    while index != -1 and index % 2:
        index = data.find(term, index + 1)
    return index


def decode_text(data: bytes, encoding: Encoding) -> str:
    """Decodes data in the given text encoding.

    Encoding 0 is read like UTF-8 and only falls back to ISO-8859-1 for
    bytes which aren't valid UTF-8. Encoding 1 honors a leading BOM
    and is little-endian without one.

    Raises:
        ID3UnsupportedEncodingError
        ID3OddLengthError: for UTF-16 data of odd length
        ID3TagShapeError: if the data can't be decoded
    """

    encoding = encoding_for(encoding)

    if encoding in (Encoding.LATIN1, Encoding.UTF8):
        codec = "utf-8"
    else:
        if len(data) % 2:
            raise ID3OddLengthError(
                f"UTF-16 text needs an even length, got {len(data)} bytes")
        if encoding == Encoding.UTF16BE:
            codec = "utf-16-be"
        elif data.startswith(codecs.BOM_UTF16_BE):
            codec = "utf-16-be"
            data = data[2:]
        elif data.startswith(codecs.BOM_UTF16_LE):
            codec = "utf-16-le"
            data = data[2:]
        else:
            # utf-16 is missing BOM, content is usually utf-16-le
            codec = "utf-16-le"

    try:
        return data.decode(codec)
    except UnicodeDecodeError as e:
        if encoding == Encoding.LATIN1:
            return data.decode("latin-1")
        raise ID3TagShapeError(e) from e


def encode_text(text: str, encoding: Encoding = Encoding.UTF8) -> bytes:
    """Encodes text for the given encoding (without terminator).

    UTF-16 gets a little-endian BOM. Encoding 0 is written as UTF-8.
    """

    encoding = encoding_for(encoding)
    if encoding == Encoding.UTF16:
        return codecs.BOM_UTF16_LE + text.encode("utf-16-le")
    elif encoding == Encoding.UTF16BE:
        return text.encode("utf-16-be")
    return text.encode("utf-8")


def read_text_value(value: bytes) -> str:
    """Decodes the raw value of a text frame: ``[encoding][text]``.

    Raises:
        ID3TagShapeError: if the value is shorter than two bytes
    """

    if len(value) < 2:
        raise ID3TagShapeError(f"text frame too short: {value!r}")
    return decode_text(value[1:], encoding_for(value[0]))


def write_text_value(text: str) -> bytes:
    """Encodes text as a raw text frame value.

    Values are always written with encoding 0, whatever the frame used
    before.
    """

    return bytes([Encoding.LATIN1]) + encode_text(text, Encoding.LATIN1)


class Spec[T]:

    handle_nodata: bool = False
    """If reading empty data is possible and writing it back will again
    result in no data.
    """

    name: str
    default: T

    def __init__(self, name: str, default: T):
        self.name = name
        self.default = default

    @override
    def __hash__(self) -> int:
        raise TypeError("Spec objects are unhashable")

    def read(self, frame: Frame, data: bytes) -> tuple[T, bytes]:
        """
        Returns:
            (value: object, left_data: bytes)
        Raises:
            tagcodec.id3.error
        """

        raise NotImplementedError

    def write(self, frame: Frame, value: T) -> bytes:
        """
        Returns:
            bytes: The serialized data
        """

        raise NotImplementedError

    def validate(self, frame: Frame, value: Any) -> T:
        """
        Returns:
            the validated value
        Raises:
            ValueError
            TypeError
        """

        raise NotImplementedError


class ByteSpec(Spec[int]):

    def __init__(self, name: str, default: int = 0):
        super().__init__(name, default)

    @override
    def read(self, frame: Frame, data: bytes) -> tuple[int, bytes]:
        if not data:
            raise ID3TagShapeError(f"{self.name}: no data left")
        return data[0], data[1:]

    @override
    def write(self, frame: Frame, value: int) -> bytes:
        return bytes([value])

    @override
    def validate(self, frame: Frame, value: int) -> int:
        if value is not None:
            bytes([value])
        return value


class PictureTypeSpec(ByteSpec):

    def __init__(self, name: str,
                 default: PictureType = PictureType.COVER_FRONT):
        super().__init__(name, default)

    @override
    def read(self, frame: Frame, data: bytes) -> tuple[int, bytes]:
        value, data = super().read(frame, data)
        try:
            return PictureType(value), data
        except ValueError:
            # out of range values are kept as plain integers
            return value, data

    @override
    def validate(self, frame: Frame, value: int) -> int:
        value = super().validate(frame, value)
        try:
            return PictureType(value)
        except ValueError:
            return value


class EncodingSpec(ByteSpec):

    def __init__(self, name: str, default: Encoding = Encoding.LATIN1):
        super().__init__(name, default)

    @override
    def read(self, frame: Frame, data: bytes) -> tuple[Encoding, bytes]:
        enc, data = super().read(frame, data)
        return encoding_for(enc), data

    @override
    def validate(self, frame: Frame, value: int) -> Encoding:
        if value is None:
            raise TypeError
        return encoding_for(value)


class StringSpec(Spec[str]):
    """A fixed size ASCII only payload."""

    len: int

    def __init__(self, name: str, length: int, default: str | None = None):
        if default is None:
            default = " " * length
        super().__init__(name, default)
        self.len = length

    @override
    def read(self, frame: Frame, data: bytes) -> tuple[str, bytes]:
        chunk = data[:self.len]
        if len(chunk) != self.len:
            raise ID3TagShapeError(f"{self.name}: expected {self.len} bytes")
        try:
            ascii = chunk.decode("ascii")
        except UnicodeDecodeError:
            raise ID3TagShapeError(f"{self.name}: not ascii") from None
        return ascii, data[self.len:]

    @override
    def write(self, frame: Frame, value: str) -> bytes:
        return (value.encode("ascii") + b"\x00" * self.len)[:self.len]

    @override
    def validate(self, frame: Frame, value: str) -> str:
        if not isinstance(value, str):
            raise TypeError(f"{self.name} has to be str")
        value.encode("ascii")

        if len(value) == self.len:
            return value

        raise ValueError('Invalid StringSpec[%d] data: %r' % (self.len, value))


class ImageFormatSpec(StringSpec):
    """The three letter image format of ID3v2.2 pictures, exposed as a
    MIME type.
    """

    _mimes: Final = {
        "JPG": "image/jpeg",
        "PNG": "image/png",
    }

    _formats: Final = {
        "image/jpeg": "JPG",
        "image/jpg": "JPG",
        "image/png": "PNG",
    }

    def __init__(self, name: str, default: str = "image/jpeg"):
        super().__init__(name, 3, default)

    @override
    def read(self, frame: Frame, data: bytes) -> tuple[str, bytes]:
        token, data = super().read(frame, data)
        token = token.upper()
        mime = self._mimes.get(token)
        if mime is None:
            mime = "image/" + token.strip("\x00 ").lower()
        return mime, data

    @override
    def write(self, frame: Frame, value: str) -> bytes:
        token = self._formats.get(value.lower())
        if token is None:
            token = value.rsplit("/", 1)[-1].upper()
        return super().write(frame, token)

    @override
    def validate(self, frame: Frame, value: str) -> str:
        if not isinstance(value, str):
            raise TypeError(f"{self.name} has to be str")
        value.encode("ascii")
        return value


class Latin1TextSpec(Spec[str]):
    """A null terminated ISO-8859-1 string (MIME types)"""

    def __init__(self, name: str, default: str = ""):
        super().__init__(name, default)

    @override
    def read(self, frame: Frame, data: bytes) -> tuple[str, bytes]:
        if b"\x00" not in data:
            raise ID3TagShapeError(f"{self.name}: missing terminator")
        value, ret = data.split(b"\x00", 1)
        return value.decode("latin-1"), ret

    @override
    def write(self, frame: Frame, value: str) -> bytes:
        return value.encode("latin-1") + b"\x00"

    @override
    def validate(self, frame: Frame, value: str) -> str:
        return str(value)


class EncodedTextSpec(Spec[str]):
    """A string in the frame's encoding, followed by a terminator of
    matching width.
    """

    def __init__(self, name: str, default: str = ""):
        super().__init__(name, default)

    @override
    def read(self, frame: Frame, data: bytes) -> tuple[str, bytes]:
        index = find_terminator(data, frame.encoding)
        if index == -1:
            raise ID3TagShapeError(f"{self.name}: missing terminator")
        term = terminator(frame.encoding)
        value = decode_text(data[:index], frame.encoding)
        return value, data[index + len(term):]

    @override
    def write(self, frame: Frame, value: str) -> bytes:
        return encode_text(value, frame.encoding) + \
            terminator(frame.encoding)

    @override
    def validate(self, frame: Frame, value: str) -> str:
        return str(value)


class TrailingTextSpec(EncodedTextSpec):
    """A string in the frame's encoding running to the end of the frame.

    A trailing terminator is dropped on read and not written.
    """

    handle_nodata = True

    @override
    def read(self, frame: Frame, data: bytes) -> tuple[str, bytes]:
        index = find_terminator(data, frame.encoding)
        if index != -1:
            data = data[:index]
        return decode_text(data, frame.encoding), b""

    @override
    def write(self, frame: Frame, value: str) -> bytes:
        return encode_text(value, frame.encoding)


class BinaryDataSpec(Spec[bytes]):

    handle_nodata = True

    def __init__(self, name: str, default: bytes = b""):
        super().__init__(name, default)

    @override
    def read(self, frame: Frame, data: bytes) -> tuple[bytes, bytes]:
        return data, b""

    @override
    def write(self, frame: Frame, value: bytes) -> bytes:
        return value

    @override
    def validate(self, frame: Frame, value: bytes) -> bytes:
        if isinstance(value, bytes):
            return value
        raise TypeError(f"{self.name} has to be bytes")
