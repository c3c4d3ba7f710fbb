# Copyright (C) 2005  Michael Urman
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import logging
import warnings
from collections.abc import Sequence
from typing import IO, Any, ClassVar, Final, Self, override

from tagcodec._util import cdata

from ._specs import (
    BinaryDataSpec,
    EncodedTextSpec,
    EncodingSpec,
    ImageFormatSpec,
    Latin1TextSpec,
    PictureTypeSpec,
    Spec,
    StringSpec,
    TrailingTextSpec,
    encoding_for,
    find_terminator,
)
from ._util import (
    ID3MalformedFrameError,
    ID3TagShapeError,
    ID3UnsupportedEncodingError,
    ID3Warning,
    decode_plain,
    decode_synchsafe,
    encode_plain,
    encode_synchsafe,
)

logger = logging.getLogger(__name__)


def _bytes2key(b: bytes) -> str:
    assert isinstance(b, bytes)

    return b.decode("latin1")


class Frame:
    """A frame whose raw value has an inner structure.

    The frame store keeps raw bytes only; instances of Frame subclasses
    are built from those bytes on access and flattened back on change.
    """

    _framespec: Sequence[Spec[Any]] = []

    def __init__(self, *args: Any, **kwargs: Any):
        if len(args) == 1 and len(kwargs) == 0 and \
                isinstance(args[0], Frame):
            other = args[0]
            for checker in self._framespec:
                setattr(self, checker.name, getattr(other, checker.name))
        else:
            for checker, val in zip(self._framespec, args, strict=False):
                setattr(self, checker.name, val)
            for checker in self._framespec[len(args):]:
                setattr(self, checker.name,
                        kwargs.get(checker.name, checker.default))

    @override
    def __setattr__(self, name: str, value: Any):
        for checker in self._framespec:
            if checker.name == name:
                self._setattr(name, checker.validate(self, value))
                return
        super().__setattr__(name, value)

    def _setattr(self, name: str, value: Any):
        self.__dict__[name] = value

    @property
    def FrameID(self) -> str:
        """ID3v2 three or four character frame ID"""

        return type(self).__name__

    @override
    def __repr__(self) -> str:
        """Python representation of a frame.

        The string returned is a valid Python expression to construct
        a copy of this frame.
        """

        kw: list[str] = []
        for attr in self._framespec:
            # so repr works during __init__
            if hasattr(self, attr.name):
                kw.append(f'{attr.name}={getattr(self, attr.name)!r}')
        return '{}({})'.format(type(self).__name__, ', '.join(kw))

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Frame):
            return NotImplemented
        return all(getattr(self, s.name) == getattr(other, s.name, None)
                   for s in self._framespec)

    __hash__: Final = object.__hash__

    def _readData(self, data: bytes) -> bytes:
        """Raises ID3TagShapeError; Returns leftover data"""

        for reader in self._framespec:
            if len(data) or reader.handle_nodata:
                value, data = reader.read(self, data)
            else:
                raise ID3TagShapeError(
                    f"{self.FrameID}: no data left for {reader.name}")
            self._setattr(reader.name, value)

        return data

    def _writeData(self) -> bytes:
        data: list[bytes] = []
        for writer in self._framespec:
            data.append(writer.write(self, getattr(self, writer.name)))
        return b''.join(data)

    @classmethod
    def _fromData(cls, data: bytes) -> Self:
        """Construct this frame from its raw value.

        Raises:
            ID3TagShapeError: in case the value doesn't have the structure
                of this frame
            ID3UnsupportedEncodingError
            ID3OddLengthError
        """

        frame = cls.__new__(cls)
        frame._readData(data)
        return frame


class APIC(Frame):
    """Attached (or linked) Picture.

    Attributes:

    * encoding -- text encoding for the description
    * mime -- a MIME type (e.g. image/jpeg) or '-->' if the data is a URI
    * type -- the source of the image (3 is the album front cover)
    * desc -- a text description of the image
    * data -- raw image data, as a byte string
    """

    _framespec = [
        EncodingSpec('encoding'),
        Latin1TextSpec('mime', default="image/jpeg"),
        PictureTypeSpec('type'),
        EncodedTextSpec('desc'),
        BinaryDataSpec('data'),
    ]

    def _pprint(self) -> str:
        type_desc = str(self.type)
        if hasattr(self.type, "_pprint"):
            type_desc = self.type._pprint()

        return "%s, %s (%s, %d bytes)" % (
            type_desc, self.desc, self.mime, len(self.data))


class PIC(APIC):
    """ID3v2.2 attached image

    The MIME type is stored as a three letter image format on the wire
    (``JPG``, ``PNG``) but exposed like the APIC one.
    """

    _framespec = [
        EncodingSpec('encoding'),
        ImageFormatSpec('mime'),
        PictureTypeSpec('type'),
        EncodedTextSpec('desc'),
        BinaryDataSpec('data'),
    ]


AttachedPicture = APIC


class TXXX(Frame):
    """User-defined text data.

    TXXX frames have a 'desc' attribute which is set to any Unicode
    value (though the encoding of the text and the description must be
    the same). Many taggers use this frame to store freeform keys.
    """

    _framespec = [
        EncodingSpec('encoding'),
        EncodedTextSpec('desc'),
        TrailingTextSpec('text'),
    ]


class TXX(TXXX):
    "User-defined text data"


class COMM(Frame):
    """User comment.

    User comment frames have a descrption, like TXXX, and also a three
    letter ISO language code in the 'lang' attribute.
    """

    _framespec = [
        EncodingSpec('encoding'),
        StringSpec('lang', 3, "eng"),
        EncodedTextSpec('desc'),
        TrailingTextSpec('text'),
    ]


class COM(COMM):
    "Comment"


Frames: Final = {"APIC": APIC, "TXXX": TXXX, "COMM": COMM}
"""All supported structured ID3v2.3/4 frames, keyed by frame ID."""

Frames_2_2: Final = {"PIC": PIC, "TXX": TXX, "COM": COM}
"""All supported structured ID3v2.2 frames, keyed by frame ID."""


def trim_text(value: bytes) -> bytes:
    """Cuts the raw value of a text frame at the first terminator following
    the encoding byte.

    Some encoders pad text frames with nulls and garbage; everything from
    the first terminator on is dropped.
    """

    if len(value) < 2:
        return value
    try:
        encoding = encoding_for(value[0])
    except ID3UnsupportedEncodingError:
        return value
    index = find_terminator(value[1:], encoding)
    if index == -1:
        return value
    return value[:1 + index]


class FrameHeader:
    """The on-wire shape of a frame header for one ID3v2 revision."""

    version: ClassVar[int]
    """The major version this layout belongs to"""

    key_size: ClassVar[int] = 4
    size_width: ClassVar[int] = 4
    flags_size: ClassVar[int] = 2
    synchsafe: ClassVar[bool] = False

    text_marker: ClassVar[str] = "T"
    """First letter of text frame IDs"""

    frames: ClassVar[dict[str, type[Frame]]] = Frames
    user_text_id: ClassVar[str] = "TXXX"
    picture_id: ClassVar[str] = "APIC"
    comment_id: ClassVar[str] = "COMM"

    # frame flags we can't handle, the raw value is kept as is
    _unsupported_flags: ClassVar[int] = 0

    @classmethod
    def size(cls) -> int:
        """Total width of the frame header in bytes"""

        return cls.key_size + cls.size_width + cls.flags_size

    @classmethod
    def _decode_size(cls, data: bytes) -> int:
        if cls.synchsafe:
            return decode_synchsafe(data)
        return decode_plain(data)

    @classmethod
    def _encode_size(cls, value: int) -> bytes:
        if cls.synchsafe:
            return encode_synchsafe(value)
        return encode_plain(value, cls.size_width)

    @classmethod
    def unpack(cls, header: bytes) -> tuple[str, int, int]:
        """Returns (key, value size, flags) for a frame header.

        Raises:
            ID3MalformedFrameError: if the header is too short
        """

        if len(header) != cls.size():
            raise ID3MalformedFrameError(
                "frame header too short: %d of %d bytes" %
                (len(header), cls.size()))

        key = _bytes2key(header[:cls.key_size])
        offset = cls.key_size
        size = cls._decode_size(header[offset:offset + cls.size_width])
        offset += cls.size_width
        flags = 0
        if cls.flags_size:
            flags = cdata.ushort_be(header[offset:offset + cls.flags_size])
        return key, size, flags

    @classmethod
    def pack(cls, key: str, size: int) -> bytes:
        """Returns a frame header for a value of the given size.

        Frame flags are always written as zero.
        """

        key_bytes = key.encode("latin1")
        if len(key_bytes) != cls.key_size:
            raise ValueError(
                "ID3v2.%d frame IDs have %d characters: %r" %
                (cls.version, cls.key_size, key))
        return key_bytes + cls._encode_size(size) + b"\x00" * cls.flags_size

    @classmethod
    def is_text(cls, key: str) -> bool:
        return key.startswith(cls.text_marker) and key != cls.user_text_id

    @classmethod
    def read_frame(cls, fileobj: IO[bytes],
                   header: bytes | None = None) -> tuple[str, bytes, int]:
        """Reads one frame.

        Args:
            fileobj: positioned at the frame start, or right after the
                header if `header` is passed
            header: the already read frame header
        Returns:
            (key, raw value, bytes consumed)
        Raises:
            ID3MalformedFrameError: if the header or the value is cut short
        """

        if header is None:
            header = fileobj.read(cls.size())
        key, size, flags = cls.unpack(header)

        value = fileobj.read(size)
        if len(value) != size:
            raise ID3MalformedFrameError(
                "%s: declared size %d exceeds the remaining %d bytes" %
                (key, size, len(value)))

        if flags & cls._unsupported_flags:
            warnings.warn(
                "%s: frame flags 0x%04x are not supported, value kept as is"
                % (key, flags), ID3Warning)

        logger.debug("read frame %s (%d bytes)", key, size)

        consumed = cls.size() + size
        if cls.is_text(key):
            value = trim_text(value)
        return key, value, consumed

    @classmethod
    def write_frame(cls, key: str, value: bytes) -> bytes:
        return cls.pack(key, len(value)) + value


class FrameHeader22(FrameHeader):
    """``[key:3][size:3]``, plain big-endian size, no flags"""

    version = 2
    key_size = 3
    size_width = 3
    flags_size = 0

    frames = Frames_2_2
    user_text_id = "TXX"
    picture_id = "PIC"
    comment_id = "COM"


class FrameHeader23(FrameHeader):
    """``[key:4][size:4][flags:2]``, plain big-endian size"""

    version = 3

    # compression, encryption
    _unsupported_flags = 0x0080 | 0x0040


class FrameHeader24(FrameHeader):
    """``[key:4][size:4][flags:2]``, synchsafe size"""

    version = 4
    synchsafe = True

    # compression, encryption, unsynchronisation
    _unsupported_flags = 0x0008 | 0x0004 | 0x0002
