# Copyright (C) 2005  Michael Urman
#               2006  Lukas Lalinsky
#               2013  Christoph Reiter
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""ID3v2 reading and writing.

This is based off of the following references:

* http://id3.org/id3v2.4.0-structure
* http://id3.org/id3v2.4.0-frames
* http://id3.org/id3v2.3.0
* http://id3.org/id3v2-00

Frames are kept as raw bytes keyed by their frame ID; everything the
field tables don't interpret is written back unchanged. Text is always
written with encoding 0 holding UTF-8, frames read in UTF-16 are
converted on their next change.

Unsynchronisation, compression and encryption are not supported; the
flags are read and an :class:`ID3Warning` is emitted.

Since this file's documentation is a little unwieldy, you are probably
interested in the :class:`ID3v23` class to start with.
"""

from ._file import ID3 as ID3, ID3v22 as ID3v22, ID3v23 as ID3v23, \
    ID3v24 as ID3v24
from ._specs import Encoding as Encoding, PictureType as PictureType, \
    encoding_for as encoding_for, decode_text as decode_text, \
    encode_text as encode_text, read_text_value as read_text_value, \
    write_text_value as write_text_value
from ._frames import Frames as Frames, Frames_2_2 as Frames_2_2, \
    Frame as Frame, FrameHeader as FrameHeader, \
    FrameHeader22 as FrameHeader22, FrameHeader23 as FrameHeader23, \
    FrameHeader24 as FrameHeader24, AttachedPicture as AttachedPicture, \
    APIC as APIC, PIC as PIC, COMM as COMM, COM as COM, TXXX as TXXX, \
    TXX as TXX
from ._tags import ID3Tags as ID3Tags, ID3Header as ID3Header, \
    ID3Flags as ID3Flags, FrameStore as FrameStore, FrameKind as FrameKind
from ._fields import ID3Fields as ID3Fields, FIELDS as FIELDS
from ._util import error as error, BitPaddedInt as BitPaddedInt, \
    decode_synchsafe as decode_synchsafe, \
    encode_synchsafe as encode_synchsafe, SYNCHSAFE_MAX as SYNCHSAFE_MAX, \
    ID3EmptyInputError as ID3EmptyInputError, ID3SeekError as ID3SeekError, \
    ID3ReadError as ID3ReadError, ID3WriteError as ID3WriteError, \
    ID3MalformedHeaderError as ID3MalformedHeaderError, \
    ID3NoHeaderError as ID3NoHeaderError, \
    ID3UnsupportedVersionError as ID3UnsupportedVersionError, \
    ID3MalformedFrameError as ID3MalformedFrameError, \
    ID3TagNotFoundError as ID3TagNotFoundError, \
    ID3TagShapeError as ID3TagShapeError, \
    ID3UnsupportedEncodingError as ID3UnsupportedEncodingError, \
    ID3OddLengthError as ID3OddLengthError, \
    ID3UnsupportedFieldError as ID3UnsupportedFieldError, \
    ID3NumberError as ID3NumberError, \
    ID3ValueRangeError as ID3ValueRangeError, \
    ID3UnknownGenreError as ID3UnknownGenreError, \
    ID3Warning as ID3Warning


__all__ = ['ID3', 'ID3v22', 'ID3v23', 'ID3v24', 'Frames', 'AttachedPicture',
           'error']
