# Copyright (C) 2005  Michael Urman
#               2006  Lukas Lalinsky
#               2013  Christoph Reiter
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import logging
from typing import override

import tagcodec
from tagcodec._filething import FileThing
from tagcodec._util import EmptyInputError, convert_error, loadfile

from ._fields import ID3Fields, fields_for, frames_for
from ._frames import FrameHeader22, FrameHeader23, FrameHeader24
from ._tags import ID3Flags, ID3Tags
from ._util import ID3EmptyInputError, ID3ReadError, ID3WriteError

logger = logging.getLogger(__name__)


class ID3(ID3Fields, ID3Tags, tagcodec.Metadata):
    """ID3(filething=None)

    A file with an ID3v2 tag of one specific version, see
    :class:`ID3v22`, :class:`ID3v23` and :class:`ID3v24`.

    If any arguments are given, the :meth:`load` is called with them. If no
    arguments are given then an empty tag is created.

    ::

        ID3v23("foo.mp3")
        # same as
        t = ID3v23()
        t.load("foo.mp3")

    Arguments:
        filething (filething): or `None`

    Attributes:
        version (tuple[int]): ID3 tag version as a tuple
        declared_length (int): the size of the frame region stated in the
            tag header
        filename (str): the file most recently loaded
    """

    __module__ = "tagcodec.id3"

    filename: str | None = None

    @override
    def __repr__(self) -> str:
        return "<%s frames=%s>" % (
            type(self).__name__, ", ".join(self.frame_names()) or "-")

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ID3):
            return NotImplemented
        return (self._major == other._major and
                self.frames.items() == other.frames.items() and
                self.user_frames.items() == other.user_frames.items())

    __hash__ = object.__hash__

    @convert_error(OSError, ID3ReadError)
    @convert_error(EmptyInputError, ID3EmptyInputError)
    @loadfile()
    def load(self, filething: FileThing):
        """Load tags from a filename.

        Args:
            filething (filething): filename or file object to load tag
                data from

        Raises:
            tagcodec.id3.error: the tag couldn't be read, the instance is
                left empty
        """

        self._reset()
        try:
            self._read(filething.fileobj)
        except BaseException:
            self._reset()
            raise

        logger.debug("loaded %s: %d frames, %d user frames, %d bytes "
                     "trailing", filething.name, len(self.frames),
                     len(self.user_frames), len(self.trailing_data))

    @convert_error(OSError, ID3WriteError)
    @convert_error(EmptyInputError, ID3EmptyInputError)
    @loadfile(writable=True, create=True)
    def save(self, filething: FileThing | None = None):
        """save(filething=None)

        Save the tag followed by the trailing data.

        The whole file is rewritten from memory in a single write, which
        replaces its previous content.

        Args:
            filething (filething):
                Filename to save the tag to. If no filename is given,
                the one most recently loaded is used.

        Raises:
            tagcodec.id3.ID3WriteError
        """

        assert filething is not None
        f = filething.fileobj

        framedata = self._write()
        data = self.header.render(len(framedata)) + framedata + \
            self.trailing_data

        f.seek(0)
        written = f.write(data)
        if written is not None and written != len(data):
            raise ID3WriteError(
                "short write: %d of %d bytes" % (written, len(data)))
        f.truncate()

        self.header.size = len(framedata)
        self.header.flags &= ID3Flags.EXPERIMENTAL
        self.padding = 0


class ID3v22(ID3):
    """An ID3v2.2 tag: three letter frame IDs, no frame flags"""

    __module__ = "tagcodec.id3"

    _major = 2
    _frame_header = FrameHeader22
    _fields = fields_for(2)
    _known_frames = frames_for(2) | frozenset(FrameHeader22.frames)


class ID3v23(ID3):
    """An ID3v2.3 tag"""

    __module__ = "tagcodec.id3"

    _major = 3
    _frame_header = FrameHeader23
    _fields = fields_for(3)
    _known_frames = frames_for(3) | frozenset(FrameHeader23.frames)


class ID3v24(ID3):
    """An ID3v2.4 tag: synchsafe frame sizes"""

    __module__ = "tagcodec.id3"

    _major = 4
    _frame_header = FrameHeader24
    _fields = fields_for(4)
    _known_frames = frames_for(4) | frozenset(FrameHeader24.frames)
