# Copyright 2005 Michael Urman
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import logging
import struct
import warnings
from collections.abc import Iterable
from enum import Enum, IntFlag
from typing import IO, ClassVar, override

from tagcodec._util import DictProxy, read_full

from ._frames import Frame, FrameHeader, FrameHeader24
from ._specs import Encoding, read_text_value, write_text_value
from ._util import (
    ID3MalformedFrameError,
    ID3MalformedHeaderError,
    ID3NoHeaderError,
    ID3SeekError,
    ID3TagNotFoundError,
    ID3UnsupportedVersionError,
    ID3Warning,
    decode_plain,
    decode_synchsafe,
    encode_synchsafe,
    error,
    is_valid_frame_id,
    parse_int,
)

logger = logging.getLogger(__name__)


class ID3Flags(IntFlag):
    """Flags of the ID3v2 tag header"""

    UNSYNCH = 0x80
    """All frames are unsynchronised"""

    EXTENDED = 0x40
    """An extended header follows the tag header (v2.2: compression)"""

    EXPERIMENTAL = 0x20
    """The tag is in an experimental stage"""


class ID3Header:
    """The 10 byte ID3v2 tag header.

    Attributes:
        major (int): the major version (2, 3 or 4)
        minor (int): the revision, written back unchanged
        flags (ID3Flags)
        size (int): the synchsafe encoded size of everything following
            the header that belongs to the tag
    """

    _STRUCT: ClassVar[str] = ">3sBBB4s"

    major: int
    minor: int
    flags: ID3Flags
    size: int

    def __init__(self, fileobj: IO[bytes] | None = None, major: int = 4):
        """Raises ID3MalformedHeaderError, ID3NoHeaderError,
        ID3UnsupportedVersionError"""

        if fileobj is None:
            self.major = major
            self.minor = 0
            self.flags = ID3Flags(0)
            self.size = 0
            return

        data = fileobj.read(10)
        if len(data) != 10:
            raise ID3MalformedHeaderError(
                "tag header too short: %d of 10 bytes" % len(data))

        marker, major, minor, flags, size = struct.unpack(self._STRUCT, data)
        if marker != b"ID3":
            raise ID3NoHeaderError(f"{marker!r} doesn't start an ID3 tag")

        if major not in (2, 3, 4):
            raise ID3UnsupportedVersionError(
                "ID3v2.%d is not supported" % major)

        self.major = major
        self.minor = minor
        self.flags = ID3Flags(flags)
        self.size = decode_synchsafe(size)

    @property
    def marker(self) -> bytes:
        return b"ID3"

    @property
    def version(self) -> tuple[int, int, int]:
        return (2, self.major, self.minor)

    @property
    def f_unsynch(self) -> bool:
        return bool(self.flags & ID3Flags.UNSYNCH)

    @property
    def f_extended(self) -> bool:
        return bool(self.flags & ID3Flags.EXTENDED)

    @property
    def f_experimental(self) -> bool:
        return bool(self.flags & ID3Flags.EXPERIMENTAL)

    def render(self, size: int) -> bytes:
        """The header for a frame region of `size` bytes.

        Only the experimental flag survives, nothing that would change
        the meaning of the written frames is flagged.
        """

        flags = self.flags & ID3Flags.EXPERIMENTAL
        return struct.pack(self._STRUCT, b"ID3", self.major, self.minor,
                           int(flags), encode_synchsafe(size))

    @override
    def __repr__(self) -> str:
        return "<%s v2.%d.%d flags=0x%02x size=%d>" % (
            type(self).__name__, self.major, self.minor, self.flags,
            self.size)


class FrameKind(Enum):
    """Whether a stored frame can be interpreted by its tag version"""

    KNOWN = "known"
    OPAQUE = "opaque"


class FrameStore(DictProxy):
    """A mapping of frame key to raw frame value.

    Values are kept as the exact bytes read from the file, anything not
    understood is written back unchanged.
    """

    def __init__(self, known: Iterable[str] = ()):
        self._known = frozenset(known)
        super().__init__()

    @override
    def __getitem__(self, key: str) -> bytes:
        try:
            return super().__getitem__(key)
        except KeyError:
            raise ID3TagNotFoundError(key) from None

    @override
    def __setitem__(self, key: str, value: bytes):
        if not isinstance(value, bytes):
            raise TypeError(f"frame values have to be bytes, not {value!r}")
        super().__setitem__(key, value)

    @override
    def __delitem__(self, key: str):
        try:
            super().__delitem__(key)
        except KeyError:
            raise ID3TagNotFoundError(key) from None

    def kind(self, key: str) -> FrameKind:
        if key not in self:
            raise ID3TagNotFoundError(key)
        if not self._known or key in self._known:
            return FrameKind.KNOWN
        return FrameKind.OPAQUE


class ID3Tags:
    """The frames of one ID3v2 tag and the audio data following it.

    The frame region is bounded by the size in the tag header; frames are
    read until that many bytes are consumed and serialized back in one
    pass by :meth:`render`.

    Attributes:
        header (ID3Header)
        frames (FrameStore): standard frames, keyed by frame ID
        user_frames (FrameStore): raw user defined text frames, keyed by
            their description
        trailing_data (bytes): everything after the tag, usually audio
        padding (int): number of padding bytes found while reading
    """

    _major: ClassVar[int] = 4
    _frame_header: ClassVar[type[FrameHeader]] = FrameHeader24
    _known_frames: ClassVar[frozenset[str]] = frozenset()

    header: ID3Header
    frames: FrameStore
    user_frames: FrameStore
    trailing_data: bytes
    padding: int

    def __init__(self, *args, **kwargs):
        self._reset()
        super().__init__(*args, **kwargs)

    def _reset(self):
        self.header = ID3Header(major=self._major)
        self.frames = FrameStore(self._known_frames)
        self.user_frames = FrameStore()
        self.trailing_data = b""
        self.padding = 0

    @property
    def marker(self) -> bytes:
        return self.header.marker

    @property
    def version(self) -> tuple[int, int, int]:
        return self.header.version

    @property
    def flags(self) -> ID3Flags:
        return self.header.flags

    @property
    def declared_length(self) -> int:
        """Size of the frame region as stated in the tag header"""

        return self.header.size

    def _read(self, fileobj: IO[bytes]):
        try:
            fileobj.seek(0)
            position = fileobj.tell()
        except OSError as e:
            raise ID3SeekError(e) from e
        if position != 0:
            raise ID3SeekError(f"can't seek to the tag start, at {position}")

        header = ID3Header(fileobj)
        if header.major != self._major:
            raise ID3UnsupportedVersionError(
                "expected an ID3v2.%d tag, found ID3v2.%d" %
                (self._major, header.major))
        self.header = header

        if header.f_unsynch:
            warnings.warn(
                "unsynchronised tags are not supported, frames are read "
                "as stored", ID3Warning)

        consumed = 0
        if header.f_extended:
            if header.major == 2:
                warnings.warn(
                    "compressed ID3v2.2 tags are not supported", ID3Warning)
            else:
                consumed += self._skip_extended_header(fileobj)

        codec = self._frame_header
        while consumed < header.size:
            remaining = header.size - consumed
            frame_header = fileobj.read(min(codec.size(), remaining))
            if not frame_header:
                raise ID3MalformedFrameError(
                    "tag ends %d bytes before its declared size" % remaining)

            if frame_header[0] == 0:
                rest = remaining - len(frame_header)
                if len(fileobj.read(rest)) != rest:
                    raise ID3MalformedFrameError(
                        "padding ends before the declared tag size")
                logger.debug("skipped %d bytes of padding", remaining)
                self.padding = remaining
                consumed = header.size
                break

            key, value, used = codec.read_frame(fileobj, frame_header)
            consumed += used
            if consumed > header.size:
                raise ID3MalformedFrameError(
                    "%s: frame ends %d bytes after the declared tag size" %
                    (key, consumed - header.size))
            self._add_frame(key, value)

        self.trailing_data = fileobj.read()

    def _skip_extended_header(self, fileobj: IO[bytes]) -> int:
        """Skips the extended header, returns the number of bytes skipped"""

        try:
            data = read_full(fileobj, 4)
            if self.header.major == 4:
                # synchsafe, includes the size field itself
                size = decode_synchsafe(data)
                if size < 4:
                    raise ID3MalformedHeaderError(
                        "extended header size %d too small" % size)
                read_full(fileobj, size - 4)
                skipped = size
            else:
                size = decode_plain(data)
                read_full(fileobj, size)
                skipped = size + 4
        except EOFError as e:
            raise ID3MalformedHeaderError(
                f"extended header cut short: {e}") from e

        if skipped > self.header.size:
            raise ID3MalformedHeaderError(
                "extended header larger than the tag")
        logger.debug("skipped %d bytes of extended header", skipped)
        return skipped

    def _add_frame(self, key: str, value: bytes):
        codec = self._frame_header
        if key == codec.user_text_id:
            try:
                frame = codec.frames[key]._fromData(value)
            except error as e:
                logger.debug("%s: kept as opaque frame (%s)", key, e)
            else:
                self.user_frames[frame.desc] = value
                return

        if key in self.frames:
            logger.debug("%s: duplicate frame replaces the earlier one", key)
        self.frames[key] = value

    def _write(self) -> bytes:
        """Returns the serialized frame region"""

        codec = self._frame_header
        data: list[bytes] = []
        for key, value in self.frames.items():
            data.append(codec.write_frame(key, value))
        for value in self.user_frames.values():
            data.append(codec.write_frame(codec.user_text_id, value))
        return b"".join(data)

    def render(self) -> bytes:
        """Returns the complete tag block followed by the trailing data"""

        framedata = self._write()
        return self.header.render(len(framedata)) + framedata + \
            self.trailing_data

    def _check_key(self, key: str):
        codec = self._frame_header
        if len(key) != codec.key_size or not is_valid_frame_id(key):
            raise ValueError(
                "%r is not a valid ID3v2.%d frame ID" % (key, self._major))

    def get_bytes(self, key: str) -> bytes:
        """Returns the raw value of a frame.

        Raises:
            ID3TagNotFoundError
        """

        return self.frames[key]

    def set_bytes(self, key: str, value: bytes):
        self._check_key(key)
        self.frames[key] = value

    def get_string(self, key: str) -> str:
        """Returns the text of a text frame.

        Raises:
            ID3TagNotFoundError
            ID3TagShapeError
        """

        return read_text_value(self.frames[key])

    def set_string(self, key: str, text: str):
        """Stores text in a text frame, replacing any previous value."""

        self._check_key(key)
        self.frames[key] = write_text_value(text)

    def delete_frame(self, key: str):
        if key in self.frames:
            del self.frames[key]

    def delete_all(self):
        """Removes all frames and user text frames."""

        self.frames.clear()
        self.user_frames.clear()

    def frame_names(self) -> list[str]:
        """All frame IDs followed by all user text descriptions"""

        return self.frames.keys() + self.user_frames.keys()

    def get_frame(self, key: str) -> Frame:
        """Returns the structured frame stored under `key`.

        Raises:
            ID3TagNotFoundError
            KeyError: if `key` has no structured frame class
            ID3TagShapeError
        """

        return self._frame_header.frames[key]._fromData(self.frames[key])

    def set_frame(self, frame: Frame):
        self.frames[frame.FrameID] = frame._writeData()

    def get_user_text(self, desc: str) -> str:
        """Returns the value of a user text frame.

        Raises:
            ID3TagNotFoundError
        """

        codec = self._frame_header
        frame = codec.frames[codec.user_text_id]._fromData(
            self.user_frames[desc])
        return frame.text

    def get_user_int(self, desc: str) -> int:
        return parse_int(self.get_user_text(desc), desc)

    def set_user_text(self, desc: str, text: str):
        codec = self._frame_header
        frame = codec.frames[codec.user_text_id](
            encoding=Encoding.LATIN1, desc=desc, text=text)
        self.user_frames[desc] = frame._writeData()

    def delete_user_text(self, desc: str):
        if desc in self.user_frames:
            del self.user_frames[desc]
